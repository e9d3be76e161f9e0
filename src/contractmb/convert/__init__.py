"""
contractmb Conversion Module

Contract to Mountebank stub conversion.

This module provides:
- Contract normalization into canonical request/response models
- Predicate and response builders
- Stub assembly for single contracts and contract sets
"""

from .assembler import StubConverter, ConverterConfig
from .normalizer import (
    ContractStructureError,
    HeaderEntry,
    NormalizedRequest,
    NormalizedResponse,
    normalize_body,
    normalize_contract,
    normalize_request,
    normalize_response
)
from .predicates import PredicateBuilder
from .responses import ResponseBuilder
from .results import BatchResult, ConversionIssue, IssueKind, StubResult
from .schema import MatchMode, FILE_TYPE

__all__ = [
    # Assembler
    'StubConverter',
    'ConverterConfig',

    # Normalizer
    'ContractStructureError',
    'HeaderEntry',
    'NormalizedRequest',
    'NormalizedResponse',
    'normalize_body',
    'normalize_contract',
    'normalize_request',
    'normalize_response',

    # Builders
    'PredicateBuilder',
    'ResponseBuilder',

    # Results
    'BatchResult',
    'ConversionIssue',
    'IssueKind',
    'StubResult',

    # Wire format
    'MatchMode',
    'FILE_TYPE',
]
