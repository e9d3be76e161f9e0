"""
contractmb Common Utilities

JSON helpers shared by the normalizer and the stub builders.
"""

import json
from typing import Any


def to_text(value: Any) -> str:
    """
    Render a resolved contract value as the string the stub should carry.

    Booleans use JSON spelling, containers become compact JSON text and
    everything else goes through str().
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    if isinstance(value, (dict, list, tuple)):
        return canonical_json(value)
    return str(value)


def canonical_json(value: Any) -> str:
    """
    Serialize a value as compact JSON text, keeping key insertion order.

    Values JSON has no type for (dates and timestamps from YAML) are
    written as their str() form.
    """
    return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)


def is_json_array_text(text: str) -> bool:
    """True when body text looks like a JSON array (leading '[')."""
    return text.strip().startswith('[')


def parse_json_body(text: str) -> Any:
    """
    Parse canonical body text into a JSON array or object.

    The leading character decides the expected shape: text starting with
    '[' must be an array, anything else must be an object.

    Args:
        text: Body text produced by the normalizer

    Returns:
        Parsed list or dict

    Raises:
        ValueError: If the text is not valid JSON or has the wrong shape
    """
    parsed = json.loads(text)

    expected = list if is_json_array_text(text) else dict
    if not isinstance(parsed, expected):
        raise ValueError(
            f"Expected a JSON {'array' if expected is list else 'object'}, "
            f"got {type(parsed).__name__}"
        )
    return parsed


def dump_document(document: Any, indent: int = 2, ensure_ascii: bool = False) -> str:
    """Pretty-print a stub document with a fixed indent."""
    return json.dumps(document, indent=indent, ensure_ascii=ensure_ascii, default=str)
