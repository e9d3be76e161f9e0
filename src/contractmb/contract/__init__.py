"""
contractmb Contract Module

Contract model and YAML contract loading.
"""

from .model import (
    Contract,
    ContractMetadata,
    DslValue,
    Header,
    QueryParameter,
    RegexValue,
    Request,
    Response,
    Url
)
from .loader import ContractLoader, ContractLoadError

__all__ = [
    'Contract',
    'ContractMetadata',
    'DslValue',
    'Header',
    'QueryParameter',
    'RegexValue',
    'Request',
    'Response',
    'Url',
    'ContractLoader',
    'ContractLoadError'
]
