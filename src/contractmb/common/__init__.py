"""
contractmb Common Utilities

Shared helpers used across contractmb modules.
"""

from .utils import (
    to_text,
    canonical_json,
    is_json_array_text,
    parse_json_body,
    dump_document
)

__all__ = [
    'to_text',
    'canonical_json',
    'is_json_array_text',
    'parse_json_body',
    'dump_document'
]
