from __future__ import annotations

import base64

import pytest

from setexport.core.errors import UnsupportedValueError
from setexport.core.filters import FilterParams
from setexport.engine.materializer import materialize
from setexport.engine.registry import SchemaRegistry
from setexport.store.client import Key, Record

KEY = Key("test", "demo", b"\x01\x02\x03")


def test_first_record_initializes_sorted_columns() -> None:
    reg = SchemaRegistry()
    row = materialize(KEY, Record({"b": 2, "a": 1}), reg, FilterParams())
    assert reg.snapshot() == ("a", "b")
    assert row == [1, 2]


def test_rows_match_registry_size_at_write_time() -> None:
    reg = SchemaRegistry()
    params = FilterParams()
    r1 = materialize(KEY, Record({"a": "v1", "b": "v2"}), reg, params)
    assert len(r1) == len(reg) == 2
    r2 = materialize(KEY, Record({"a": "v1", "c": "v3"}), reg, params)
    assert r2 == ["v1", None, "v3"]
    assert len(r2) == len(reg) == 3
    r3 = materialize(KEY, Record({"a": "v1"}), reg, params)
    assert r3 == ["v1", None, None]
    assert len(r3) == len(reg)


def test_new_columns_append_in_first_seen_order() -> None:
    reg = SchemaRegistry()
    params = FilterParams()
    materialize(KEY, Record({"m": 0}), reg, params)
    row = materialize(KEY, Record({"z": 1, "m": 2, "b": 3}), reg, params)
    assert reg.snapshot() == ("m", "z", "b")
    assert row == [2, 1, 3]


def test_prefix_values_come_first() -> None:
    reg = SchemaRegistry()
    params = FilterParams(record_metadata=True, include_digest=True)
    row = materialize(KEY, Record({"a": 1}, generation=7, expiration=99), reg, params)
    assert reg.snapshot() == ("_digest", "_generation", "_expiry", "a")
    assert row == [base64.b64encode(b"\x01\x02\x03").decode(), 7, 99, 1]


def test_unsupported_value_raises() -> None:
    with pytest.raises(UnsupportedValueError):
        materialize(KEY, Record({"a": object()}), SchemaRegistry(), FilterParams())
