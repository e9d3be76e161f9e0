"""
contractmb Response Builder

Builds the single-element Mountebank response array for a normalized
response, with an optional wait behavior when the contract declares a
delay.
"""

import logging
from typing import List, Any, Optional

from ..common import parse_json_body
from .normalizer import NormalizedResponse
from .results import ConversionIssue, IssueKind, ResponseResult
from .schema import (
    OPERATION_BEHAVIORS,
    OPERATION_BODY,
    OPERATION_HEADERS,
    OPERATION_IS,
    OPERATION_STATUS_CODE,
    OPERATION_WAIT
)


logger = logging.getLogger("contractmb.responses")


class ResponseBuilder:
    """Turns a NormalizedResponse into a Mountebank response array."""

    def build(self, response: NormalizedResponse, contract_name: Optional[str] = None) -> ResponseResult:
        """
        Build the response array.

        Args:
            response: Normalized response
            contract_name: Name used when reporting issues

        Returns:
            ResponseResult holding exactly one response node
        """
        issues: List[ConversionIssue] = []

        response_data = {
            OPERATION_STATUS_CODE: response.status,
            OPERATION_BODY: self._body(response.body, contract_name, issues)
        }
        if response.headers is not None:
            response_data[OPERATION_HEADERS] = dict(response.headers)

        container = {}
        if response.delay is not None:
            container[OPERATION_BEHAVIORS] = {OPERATION_WAIT: response.delay}
        container[OPERATION_IS] = response_data

        return ResponseResult(responses=[container], issues=issues)

    def _body(self, body: str, contract_name: Optional[str], issues: List[ConversionIssue]) -> Any:
        """Parsed JSON body, "" for an empty body, raw text when it is not JSON."""
        if not body:
            return ""

        try:
            return parse_json_body(body)
        except ValueError as e:
            message = f"Response body is not valid JSON, serving it as text: {e}"
            logger.warning(f"{contract_name or 'contract'}: {message}")
            issues.append(ConversionIssue(
                kind=IssueKind.MALFORMED_BODY_JSON,
                message=message,
                contract=contract_name,
                block='response.body'
            ))
            return body
