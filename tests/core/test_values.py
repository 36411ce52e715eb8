from __future__ import annotations

import json

import pytest

from setexport.core.errors import ScanError, UnsupportedValueError
from setexport.core.values import ValueKind, classify, encode_value


@pytest.mark.parametrize(
    ("value", "kind"),
    [
        (None, ValueKind.NULL),
        (7, ValueKind.INTEGER),
        (True, ValueKind.INTEGER),
        (1.5, ValueKind.FLOAT),
        ("x", ValueKind.STRING),
        (b"\x01", ValueKind.BYTES),
        (bytearray(b"\x01"), ValueKind.BYTES),
        ([1, 2], ValueKind.LIST),
        ((1, 2), ValueKind.LIST),
        ({"k": 1}, ValueKind.MAP),
    ],
)
def test_classify_supported_kinds(value, kind) -> None:
    assert classify(value) is kind


def test_classify_rejects_unknown_types() -> None:
    with pytest.raises(UnsupportedValueError):
        classify(object())
    # unsupported values fail the partition, so they are scan errors
    assert issubclass(UnsupportedValueError, ScanError)


def test_encode_scalars() -> None:
    assert encode_value(None) is None
    assert encode_value(42) == "42"
    assert encode_value(False) == "0"
    assert encode_value(0.25) == "0.25"
    assert encode_value("hello, world") == "hello, world"


def test_encode_bytes_as_base64() -> None:
    assert encode_value(b"hello") == "aGVsbG8="


def test_encode_nested_collections_as_compact_json() -> None:
    text = encode_value({"tags": ["a", "b"], "blob": b"\xff", 3: None})
    assert json.loads(text) == {"tags": ["a", "b"], "blob": "/w==", "3": None}
    assert " " not in text


def test_encode_rejects_nested_unsupported_value() -> None:
    with pytest.raises(UnsupportedValueError):
        encode_value([1, {2, 3}])
