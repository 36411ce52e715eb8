from __future__ import annotations

import pytest

from setexport.core.constants import MAX_INT64
from setexport.core.errors import ConfigError
from setexport.core.filters import (
    Bound,
    FilterExpression,
    FilterParams,
    Metric,
    RecordMeta,
    parse_time_ns,
)


def test_filter_params_defaults_are_unbounded() -> None:
    p = FilterParams()
    assert p.start_time_ns == 0
    assert p.end_time_ns == MAX_INT64
    assert p.min_size == 0
    assert p.max_size == MAX_INT64
    assert p.unlimited


@pytest.mark.parametrize(
    "kwargs",
    [
        {"record_limit": -1},
        {"start_time_ns": 10, "end_time_ns": 5},
        {"min_size": 200, "max_size": 100},
        {"min_size": -1},
    ],
)
def test_filter_params_rejects_inconsistent_bounds(kwargs) -> None:
    with pytest.raises(ConfigError):
        FilterParams(**kwargs)


def test_expression_bounds_are_inclusive() -> None:
    expr = FilterExpression(
        (
            Bound(Metric.LAST_UPDATE, 10, 20),
            Bound(Metric.DEVICE_SIZE, 100, 200),
        )
    )
    assert expr.size_metric is Metric.DEVICE_SIZE
    assert expr.matches(RecordMeta(last_update_ns=10, device_size=100))
    assert expr.matches(RecordMeta(last_update_ns=20, device_size=200))
    assert not expr.matches(RecordMeta(last_update_ns=9, device_size=150))
    assert not expr.matches(RecordMeta(last_update_ns=21, device_size=150))
    assert not expr.matches(RecordMeta(last_update_ns=15, device_size=99))
    # memory size is not consulted by a device-size expression
    assert expr.matches(RecordMeta(last_update_ns=15, device_size=150, memory_size=10_000))


def test_parse_time_accepts_all_formats() -> None:
    one_second = 1_000_000_000
    assert parse_time_ns("01/01/1970-00:00:01") == one_second
    assert parse_time_ns("January 1 1970 00:00:01 +0000") == one_second
    assert parse_time_ns("1970-01-01T00:00:01+00:00") == one_second
    assert parse_time_ns("1970-01-01T01:00:01+01:00") == one_second


def test_parse_time_empty_and_invalid() -> None:
    assert parse_time_ns(None) is None
    assert parse_time_ns("  ") is None
    with pytest.raises(ConfigError):
        parse_time_ns("yesterday")
