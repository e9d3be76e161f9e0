"""
Result objects returned by the stub builders and the converter.

Recovered problems are reported as ConversionIssue values instead of
exceptions so a caller can see exactly which block was dropped or changed.
"""

from enum import Enum
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field

from ..contract.model import Contract


class IssueKind(str, Enum):
    """Kinds of recovered conversion problems."""

    MALFORMED_BODY_JSON = "malformed_body_json"
    MISSING_STRUCTURE = "missing_structure"


@dataclass
class ConversionIssue:
    """A problem recovered at the smallest possible scope."""

    kind: IssueKind
    message: str
    contract: Optional[str] = None
    block: Optional[str] = None  # request.body, response.body, contract

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'kind': self.kind.value,
            'message': self.message,
            'contract': self.contract,
            'block': self.block
        }


@dataclass
class PredicateResult:
    """Predicate array built for one request."""
    predicates: List[Dict[str, Any]]
    issues: List[ConversionIssue] = field(default_factory=list)


@dataclass
class ResponseResult:
    """Response array built for one response."""
    responses: List[Dict[str, Any]]
    issues: List[ConversionIssue] = field(default_factory=list)


@dataclass
class StubResult:
    """Stub document for a single contract."""
    document: Dict[str, Any]
    issues: List[ConversionIssue] = field(default_factory=list)


@dataclass
class BatchResult:
    """Result of converting a contract set."""
    documents: Dict[Contract, str] = field(default_factory=dict)
    issues: List[ConversionIssue] = field(default_factory=list)
    skipped: List[Contract] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.skipped
