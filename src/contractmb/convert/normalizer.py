"""
contractmb Contract Normalizer

Resolves a contract's request and response into immutable normalized
models with canonical (JSON text) bodies. The stub builders only ever see
these models, never the raw contract.
"""

import logging
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass

from ..common import to_text, canonical_json
from ..contract.model import (
    Contract,
    Header,
    Request,
    Response,
    is_regex,
    stub_side_value,
    stub_side_values
)


logger = logging.getLogger("contractmb.normalizer")


class ContractStructureError(ValueError):
    """A contract lacks a part every stub needs (response, method, URL, status)."""


@dataclass(frozen=True)
class HeaderEntry:
    """Request header with its stub-side value and regex flag."""

    name: str
    value: Any
    is_regex: bool = False


@dataclass(frozen=True)
class NormalizedRequest:
    """Canonical request model consumed by the PredicateBuilder."""

    method: str
    url: str
    is_url_regex: bool = False
    query_parameters: Optional[Dict[str, str]] = None
    headers: Optional[Tuple[HeaderEntry, ...]] = None
    body: Optional[str] = None


@dataclass(frozen=True)
class NormalizedResponse:
    """Canonical response model consumed by the ResponseBuilder."""

    status: str
    body: str = ""
    delay: Optional[int] = None
    headers: Optional[Dict[str, str]] = None


def normalize_body(body: Any) -> Optional[str]:
    """
    Resolve a contract body to its canonical text.

    - mapping: string-to-string mapping without null entries, as JSON object text
    - sequence: every element resolved to its stub side, as JSON array text
    - anything else: passed through as text

    Args:
        body: Raw contract body (may hold RegexValue / DslValue leaves)

    Returns:
        Canonical body text, or None when the body is absent
    """
    if body is None:
        return None

    resolved = stub_side_values(body)

    if isinstance(resolved, dict):
        flat = {str(key): to_text(value) for key, value in resolved.items() if value is not None}
        return canonical_json(flat)
    if isinstance(resolved, list):
        return canonical_json(resolved)
    if resolved is None:
        return None
    return to_text(resolved)


def normalize_request(request: Request) -> NormalizedRequest:
    """
    Build the NormalizedRequest for a contract request.

    Raises:
        ContractStructureError: If the method or both URL forms are missing
    """
    if request.method is None:
        raise ContractStructureError("request has no method")

    url = request.url if request.url is not None else request.url_path
    if url is None or url.value is None:
        raise ContractStructureError("request has neither url nor urlPath")

    return NormalizedRequest(
        method=to_text(stub_side_values(request.method)),
        url=to_text(stub_side_values(url.value)),
        is_url_regex=is_regex(url.value),
        query_parameters=_query_parameters(url.query_parameters),
        headers=_request_headers(request.headers),
        body=normalize_body(request.body) or None
    )


def normalize_response(response: Optional[Response]) -> NormalizedResponse:
    """
    Build the NormalizedResponse for a contract response.

    Raises:
        ContractStructureError: If the response or its status is missing, or
            the delay is not a number
    """
    if response is None:
        raise ContractStructureError("contract has no response")
    if response.status is None:
        raise ContractStructureError("response has no status")

    delay = stub_side_value(response.delay)
    if delay is not None:
        try:
            delay = int(delay)
        except (TypeError, ValueError) as e:
            raise ContractStructureError(f"response delay {delay!r} is not a number of milliseconds") from e

    return NormalizedResponse(
        status=to_text(stub_side_values(response.status)),
        body=normalize_body(response.body) or "",
        delay=delay,
        headers=_response_headers(response.headers)
    )


def normalize_contract(contract: Contract) -> Tuple[NormalizedRequest, NormalizedResponse]:
    """Normalize both sides of a request-bearing contract."""
    if contract.request is None:
        raise ContractStructureError("contract has no request")

    normalized = normalize_request(contract.request), normalize_response(contract.response)
    logger.debug(f"Normalized {contract.display_name}: {normalized[0].method} {normalized[0].url}")
    return normalized


def _query_parameters(parameters: List[Any]) -> Optional[Dict[str, str]]:
    """Server-side query values, last duplicate wins, null values dropped."""
    query = {}
    for parameter in parameters or []:
        value = parameter.server_value
        if value is None:
            continue
        query[parameter.name] = to_text(value)
    return query or None


def _request_headers(headers: Optional[List[Header]]) -> Optional[Tuple[HeaderEntry, ...]]:
    if not headers:
        return None
    return tuple(
        HeaderEntry(name=h.name, value=stub_side_values(h.value), is_regex=is_regex(h.value))
        for h in headers
    )


def _response_headers(headers: Optional[List[Header]]) -> Optional[Dict[str, str]]:
    if not headers:
        return None
    return {h.name: to_text(stub_side_values(h.value)) for h in headers}
