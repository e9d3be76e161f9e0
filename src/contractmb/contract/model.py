"""
contractmb Contract Model

In-memory description of consumer-driven HTTP contracts.

A contract value is either a plain literal, a RegexValue (matched by
pattern instead of equality) or a DslValue carrying distinct consumer
(stub side) and producer (server side) values.
"""

import re
from pathlib import Path
from typing import List, Any, Optional
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RegexValue:
    """A value matched against a regular expression instead of a literal."""

    pattern: str

    def __str__(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class DslValue:
    """A value with different consumer (stub) and producer (server) sides."""

    client: Any
    server: Any


def stub_side_value(value: Any) -> Any:
    """Pick the consumer side of a value without resolving regex types."""
    while isinstance(value, DslValue):
        value = value.client
    return value


def server_side_value(value: Any) -> Any:
    """Resolve a value to the concrete value the producer side sends."""
    while isinstance(value, DslValue):
        value = value.server
    if isinstance(value, RegexValue):
        return value.pattern
    if isinstance(value, re.Pattern):
        return value.pattern
    return value


def is_regex(value: Any) -> bool:
    """True when the stub side of a value is declared as a pattern."""
    return isinstance(stub_side_value(value), (RegexValue, re.Pattern))


def stub_side_values(value: Any) -> Any:
    """
    Recursively resolve a (possibly nested) value to its stub side.

    Regex-typed values become their pattern text, mappings and sequences
    are rebuilt with every element resolved.

    Args:
        value: Literal, RegexValue, DslValue, dict or list

    Returns:
        Plain Python value made of dicts, lists and scalars
    """
    value = stub_side_value(value)

    if isinstance(value, (RegexValue, re.Pattern)):
        return value.pattern
    if isinstance(value, dict):
        return {key: stub_side_values(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [stub_side_values(item) for item in value]
    return value


@dataclass(frozen=True)
class QueryParameter:
    """A single query parameter of a request URL."""

    name: str
    value: Any

    @property
    def server_value(self) -> Any:
        return server_side_value(self.value)


@dataclass(frozen=True)
class Header:
    """A single request or response header."""

    name: str
    value: Any


@dataclass
class Url:
    """Request URL (or URL path) with its query parameters."""

    value: Any
    query_parameters: List[QueryParameter] = field(default_factory=list)


@dataclass
class Request:
    """Request side of a contract."""

    method: Any = None
    url: Optional[Url] = None
    url_path: Optional[Url] = None
    headers: Optional[List[Header]] = None
    body: Any = None


@dataclass
class Response:
    """Response side of a contract."""

    status: Any = None
    headers: Optional[List[Header]] = None
    body: Any = None
    delay: Any = None


@dataclass(eq=False)
class Contract:
    """
    A request/response pair.

    Contracts compare and hash by identity so that two contracts with the
    same content stay distinct keys in a conversion result.
    """

    name: Optional[str] = None
    description: str = ""
    request: Optional[Request] = None
    response: Optional[Response] = None

    @property
    def display_name(self) -> str:
        return self.name or 'unnamed contract'


@dataclass
class ContractMetadata:
    """A group of contracts read from one source (usually one file)."""

    path: Optional[Path] = None
    converted_contracts: List[Contract] = field(default_factory=list)
