from __future__ import annotations

import pytest

from setexport.core.filters import Bound, FilterExpression, Metric
from setexport.core.typing import PartitionId
from setexport.store.client import ScanAction, StoreClient
from setexport.store.memory import MemoryStore, digest_for

ALL = FilterExpression((Bound(Metric.LAST_UPDATE, 0, 2**63 - 1),))


def test_memory_store_satisfies_protocol(store: MemoryStore) -> None:
    assert isinstance(store, StoreClient)


def test_put_registers_partitions_and_namespaces(store: MemoryStore) -> None:
    store.add_namespace("mem", in_memory=True)
    store.put("mem", "cache", "k", {"x": 1})
    store.put("test", "demo", 1, {"a": 1})
    assert set(store.list_partitions()) == {PartitionId("mem", "cache"), PartitionId("test", "demo")}
    assert store.namespace_config("mem")["storage-engine"] == "memory"
    assert store.namespace_config("test")["storage-engine"] == "device"


def test_scan_applies_expression_and_honours_stop(store: MemoryStore) -> None:
    for i in range(5):
        store.put("test", "demo", i, {"i": i}, device_size=i * 100)
    seen: list[int] = []

    def on_record(key, record):
        seen.append(record.fields["i"])
        return ScanAction.STOP_LIMIT if len(seen) == 2 else ScanAction.CONTINUE

    expr = FilterExpression((Bound(Metric.DEVICE_SIZE, 100, 400),))
    assert store.scan("test", "demo", expr, on_record) is ScanAction.STOP_LIMIT
    assert seen == [1, 2]


def test_scan_failure_injection(store: MemoryStore) -> None:
    store.put("test", "demo", 1, {"a": 1})
    store.put("test", "demo", 2, {"a": 2})
    store.fail_scan_after[PartitionId("test", "demo")] = 1
    seen = []
    with pytest.raises(ConnectionError):
        store.scan("test", "demo", ALL, lambda k, r: seen.append(k) or ScanAction.CONTINUE)
    assert len(seen) == 1


def test_digest_is_stable_and_twenty_bytes() -> None:
    assert digest_for("demo", 1) == digest_for("demo", 1)
    assert digest_for("demo", 1) != digest_for("demo", 2)
    assert len(digest_for("demo", 1)) == 20


def test_load_from_mappings(store: MemoryStore) -> None:
    store.load(
        [
            {"namespace": "test", "set": "demo", "key": 1, "fields": {"a": 1}, "generation": 4},
        ]
    )
    got = []
    store.scan("test", "demo", ALL, lambda k, r: got.append(r) or ScanAction.CONTINUE)
    assert got[0].generation == 4
    assert got[0].fields == {"a": 1}
