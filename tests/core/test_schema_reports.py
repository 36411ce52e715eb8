from __future__ import annotations

import pytest
from pydantic import ValidationError

from setexport.core.schema import FilterSummary, PartitionReport, RunManifest
from setexport.core.typing import PartitionId


def _filters() -> FilterSummary:
    return FilterSummary(
        start_time_ns=0,
        end_time_ns=10,
        min_size=0,
        max_size=10,
        record_limit=0,
        record_metadata=False,
        include_digest=False,
    )


def test_partition_report_ok_and_partition() -> None:
    r = PartitionReport(namespace="test", set_name="demo", status="done", rows=2)
    assert r.ok
    assert r.partition == PartitionId("test", "demo")
    failed = PartitionReport(namespace="test", set_name="demo", status="failed", error="boom")
    assert not failed.ok


def test_partition_report_rejects_unknown_status_and_fields() -> None:
    with pytest.raises(ValidationError):
        PartitionReport(namespace="t", set_name="s", status="maybe")
    with pytest.raises(ValidationError):
        PartitionReport(namespace="t", set_name="s", status="done", extra=1)


def test_run_manifest_sorts_partitions_and_lists_failures() -> None:
    m = RunManifest(
        started_at="2024-01-01T00:00:00+00:00",
        finished_at="2024-01-01T00:00:01+00:00",
        concurrency=2,
        filters=_filters(),
        partitions=[
            PartitionReport(namespace="z", set_name="a", status="done"),
            PartitionReport(namespace="a", set_name="b", status="failed", error="x"),
        ],
    )
    assert [r.namespace for r in m.partitions] == ["a", "z"]
    assert [r.set_name for r in m.failed] == ["b"]


def test_run_manifest_requires_positive_concurrency() -> None:
    with pytest.raises(ValidationError):
        RunManifest(started_at="s", finished_at="f", concurrency=0, filters=_filters())
