"""
Closed variant over the value kinds a record field can hold.

Store fields are untyped on the wire; this module maps every Python value the
client can hand back onto one ValueKind and renders it as a single CSV field.
Anything outside the variant raises UnsupportedValueError so the owning
partition fails instead of writing an unreadable cell.

Rendering
- NULL -> None (the CSV writer emits an empty field)
- INTEGER -> decimal text; bool renders as 1/0
- FLOAT -> repr() text (round-trips)
- STRING -> unchanged
- BYTES -> base64
- LIST / MAP -> compact JSON, nested bytes as base64, map keys as text

Notes:
    - Zero-IO; stdlib only.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .errors import UnsupportedValueError

__all__ = [
    "ValueKind",
    "classify",
    "encode_bytes",
    "encode_value",
]


class ValueKind(str, Enum):
    """Supported field value kinds."""

    NULL = "null"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BYTES = "bytes"
    LIST = "list"
    MAP = "map"


def classify(value: Any) -> ValueKind:
    """
    Return the ValueKind of a field value.

    Raises:
        UnsupportedValueError: If the value is not one of the supported kinds.
    """
    if value is None:
        return ValueKind.NULL
    # bool is an int subclass; the store has no separate boolean kind
    if isinstance(value, int):
        return ValueKind.INTEGER
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ValueKind.BYTES
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    if isinstance(value, Mapping):
        return ValueKind.MAP
    raise UnsupportedValueError(f"unsupported value type {type(value).__name__!r}")


def encode_bytes(value: bytes | bytearray | memoryview) -> str:
    """Base64-encode a byte sequence as ASCII text."""
    return base64.b64encode(bytes(value)).decode("ascii")


def _to_json_obj(value: Any) -> Any:
    kind = classify(value)
    if kind is ValueKind.NULL or kind is ValueKind.STRING or kind is ValueKind.FLOAT:
        return value
    if kind is ValueKind.INTEGER:
        return int(value)
    if kind is ValueKind.BYTES:
        return encode_bytes(value)
    if kind is ValueKind.LIST:
        return [_to_json_obj(v) for v in value]
    return {str(k): _to_json_obj(v) for k, v in value.items()}


def encode_value(value: Any) -> str | None:
    """
    Render a field value as the text of one CSV cell.

    Args:
        value (Any): Raw value as delivered by the store client.

    Returns:
        str | None: Cell text, or None for a null value.

    Raises:
        UnsupportedValueError: If the value (or a nested element) is unsupported.

    Examples:
        >>> encode_value(b"\\x00\\x01")
        'AAE='
        >>> encode_value({"a": [1, True]})
        '{"a":[1,1]}'
    """
    kind = classify(value)
    if kind is ValueKind.NULL:
        return None
    if kind is ValueKind.INTEGER:
        return str(int(value))
    if kind is ValueKind.FLOAT:
        return repr(value)
    if kind is ValueKind.STRING:
        return value
    if kind is ValueKind.BYTES:
        return encode_bytes(value)
    return json.dumps(_to_json_obj(value), separators=(",", ":"), ensure_ascii=False)
