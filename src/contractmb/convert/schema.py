"""
Mountebank stub wire format.

Every JSON key written into a generated stub document lives here, so the
format the mock server loads can be checked against a single module.
"""

from enum import Enum


# Top level
OPERATION_PREDICATES = "predicates"
OPERATION_RESPONSES = "responses"

# Predicates
OPERATION_AND = "and"
OPERATION_PATH = "path"
OPERATION_METHOD = "method"
OPERATION_QUERY = "query"
OPERATION_HEADERS = "headers"
OPERATION_BODY = "body"

# Responses
OPERATION_IS = "is"
OPERATION_STATUS_CODE = "statusCode"
OPERATION_BEHAVIORS = "_behaviors"
OPERATION_WAIT = "wait"

# Stub template file extension
FILE_TYPE = ".ejs"


class MatchMode(str, Enum):
    """Predicate operator wrapping a match block."""

    EQUALS = "equals"
    MATCHES = "matches"

    @classmethod
    def for_regex(cls, is_regex: bool) -> 'MatchMode':
        """Pick the operator for a block whose values are (or are not) regex typed."""
        return cls.MATCHES if is_regex else cls.EQUALS
