"""
In-process store client.

MemoryStore keeps records per (namespace, set) together with the server-side metadata a
FilterExpression is evaluated against, and applies the expression before invoking the scan
callback, the way a real cluster evaluates it server-side. It backs the CLI --mock path and
the test suite.

Failure injection
- fail_listing: list_partitions()/namespace_config() raise ConnectionError.
- fail_scan_after: {PartitionId: n} raises ConnectionError from scan() after n deliveries.
"""

from __future__ import annotations

import hashlib
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from setexport.core.filters import FilterExpression, RecordMeta
from setexport.core.typing import PartitionId

from .client import Key, OnRecord, Record, ScanAction


def digest_for(set_name: str, user_key: Any) -> bytes:
    """Deterministic 20-byte digest for a user key (RIPEMD-160 when available)."""
    raw = f"{set_name}:{user_key!r}".encode("utf-8")
    try:
        return hashlib.new("ripemd160", raw).digest()
    except ValueError:
        return hashlib.sha1(raw).digest()


@dataclass(slots=True)
class StoredRecord:
    key: Key
    record: Record
    meta: RecordMeta


@dataclass
class MemoryStore:
    """
    Dict-backed StoreClient.

    Attributes:
        namespaces (dict[str, dict[str, str]]): Namespace name -> config properties.
        fail_listing (bool): Make discovery calls raise ConnectionError.
        fail_scan_after (dict[PartitionId, int]): Raise after delivering n records.

    Examples:
        >>> store = MemoryStore()
        >>> store.put("test", "demo", 1, {"a": 1})
        >>> sorted(store.list_partitions())
        [PartitionId(namespace='test', set_name='demo')]
    """

    namespaces: dict[str, dict[str, str]] = field(default_factory=dict)
    fail_listing: bool = False
    fail_scan_after: dict[PartitionId, int] = field(default_factory=dict)
    _data: dict[PartitionId, list[StoredRecord]] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    scanned: list[PartitionId] = field(default_factory=list, repr=False)

    def add_namespace(self, namespace: str, *, in_memory: bool = False) -> None:
        cfg = self.namespaces.setdefault(namespace, {})
        cfg["storage-engine"] = "memory" if in_memory else "device"

    def put(
        self,
        namespace: str,
        set_name: str,
        user_key: Any,
        fields: Mapping[str, Any],
        *,
        generation: int = 1,
        expiration: int = 0,
        last_update_ns: int = 0,
        device_size: int | None = None,
        memory_size: int | None = None,
    ) -> None:
        """Store a record; sizes default to a rough estimate of the field payload."""
        if namespace not in self.namespaces:
            self.add_namespace(namespace)
        estimate = sum(len(str(k)) + len(str(v)) for k, v in fields.items())
        stored = StoredRecord(
            key=Key(namespace, set_name, digest_for(set_name, user_key), user_key),
            record=Record(dict(fields), generation, expiration),
            meta=RecordMeta(
                last_update_ns=last_update_ns,
                device_size=estimate if device_size is None else device_size,
                memory_size=estimate if memory_size is None else memory_size,
            ),
        )
        with self._lock:
            self._data.setdefault(PartitionId(namespace, set_name), []).append(stored)

    def load(self, rows: Iterable[Mapping[str, Any]]) -> None:
        """
        Bulk-load records from mappings with keys namespace, set, key, fields and the
        optional put() keyword arguments.
        """
        for row in rows:
            extra = {
                k: row[k]
                for k in ("generation", "expiration", "last_update_ns", "device_size", "memory_size")
                if k in row
            }
            self.put(row["namespace"], row["set"], row.get("key"), row.get("fields", {}), **extra)

    # StoreClient protocol

    def list_partitions(self) -> list[PartitionId]:
        if self.fail_listing:
            raise ConnectionError("store unreachable")
        with self._lock:
            return list(self._data)

    def namespace_config(self, namespace: str) -> dict[str, str]:
        if self.fail_listing:
            raise ConnectionError("store unreachable")
        return dict(self.namespaces.get(namespace, {}))

    def scan(
        self,
        namespace: str,
        set_name: str,
        expression: FilterExpression,
        on_record: OnRecord,
    ) -> ScanAction:
        pid = PartitionId(namespace, set_name)
        with self._lock:
            records = list(self._data.get(pid, []))
            self.scanned.append(pid)
        fail_after = self.fail_scan_after.get(pid)
        delivered = 0
        for stored in records:
            if not expression.matches(stored.meta):
                continue
            if fail_after is not None and delivered >= fail_after:
                raise ConnectionError(f"scan of {pid} interrupted")
            action = on_record(stored.key, stored.record)
            delivered += 1
            if action.stops:
                return action
        if fail_after is not None and delivered >= fail_after:
            raise ConnectionError(f"scan of {pid} interrupted")
        return ScanAction.CONTINUE

    def close(self) -> None:
        pass
