"""
contractmb Predicate Builder

Builds the Mountebank predicate array for a normalized request:

    [{"and": [<schema block>, <header block>?, <body block>?]}]

Block order is fixed (schema, headers, body) because it is array position.
"""

import logging
from typing import List, Dict, Any, Optional, Tuple

from ..common import parse_json_body
from .normalizer import NormalizedRequest, HeaderEntry
from .results import ConversionIssue, IssueKind, PredicateResult
from .schema import (
    MatchMode,
    OPERATION_AND,
    OPERATION_BODY,
    OPERATION_HEADERS,
    OPERATION_METHOD,
    OPERATION_PATH,
    OPERATION_QUERY
)


logger = logging.getLogger("contractmb.predicates")


class PredicateBuilder:
    """
    Turns a NormalizedRequest into Mountebank predicates.

    - Schema block (path, method, query) uses "matches" for regex URLs,
      "equals" otherwise.
    - Header block uses one operator for all headers: "matches" as soon
      as any header value is regex typed.
    - Body block always uses "matches". A body that is not valid JSON is
      reported as an issue and left out; the other blocks are kept.

    Example:
        result = PredicateBuilder().build(normalized_request)
        stub['predicates'] = result.predicates
    """

    def build(self, request: NormalizedRequest, contract_name: Optional[str] = None) -> PredicateResult:
        """
        Build the predicate array for a request.

        Args:
            request: Normalized request
            contract_name: Name used when reporting issues

        Returns:
            PredicateResult with the single-element predicate array
        """
        issues: List[ConversionIssue] = []
        blocks = [self._schema_block(request)]

        if request.headers is not None:
            blocks.append(self._header_block(request.headers))

        if request.body is not None:
            body_block = self._body_block(request.body, contract_name, issues)
            if body_block is not None:
                blocks.append(body_block)

        return PredicateResult(predicates=[{OPERATION_AND: blocks}], issues=issues)

    def _schema_block(self, request: NormalizedRequest) -> Dict[str, Any]:
        schema = {
            OPERATION_PATH: request.url,
            OPERATION_METHOD: request.method
        }
        if request.query_parameters:
            schema[OPERATION_QUERY] = dict(request.query_parameters)

        mode = MatchMode.for_regex(request.is_url_regex)
        return {mode.value: schema}

    def _header_block(self, headers: Tuple[HeaderEntry, ...]) -> Dict[str, Any]:
        header_map = {header.name: header.value for header in headers}
        mode = MatchMode.for_regex(any(header.is_regex for header in headers))
        return {mode.value: {OPERATION_HEADERS: header_map}}

    def _body_block(
        self,
        body: str,
        contract_name: Optional[str],
        issues: List[ConversionIssue]
    ) -> Optional[Dict[str, Any]]:
        try:
            parsed = parse_json_body(body)
        except ValueError as e:
            message = f"Request body is not valid JSON, body predicate omitted: {e}"
            logger.warning(f"{contract_name or 'contract'}: {message}")
            issues.append(ConversionIssue(
                kind=IssueKind.MALFORMED_BODY_JSON,
                message=message,
                contract=contract_name,
                block='request.body'
            ))
            return None

        return {MatchMode.MATCHES.value: {OPERATION_BODY: parsed}}
