"""
Store client interface consumed by the export engine.

The engine never talks to the network itself; it depends on this protocol for three things:
listing partitions, reading a namespace's configuration, and running a filtered, streaming
scan that calls back once per record on the caller's thread.

Scan control
- The callback returns a ScanAction. CONTINUE asks for the next record. STOP_LIMIT and
  STOP_ERROR both end the stream; they are distinct so the caller can tell an intentional
  record-limit stop from a failure without a shared exception type.
- scan() returns the action that ended the stream, or CONTINUE when results were exhausted.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from setexport.core.filters import FilterExpression
from setexport.core.typing import PartitionId

__all__ = [
    "Key",
    "Record",
    "ScanAction",
    "OnRecord",
    "StoreClient",
]


@dataclass(frozen=True, slots=True)
class Key:
    """Record key as delivered by a scan; only the digest is used by the engine."""

    namespace: str
    set_name: str
    digest: bytes
    user_key: Any = None


@dataclass(frozen=True, slots=True)
class Record:
    """
    Record payload as delivered by a scan.

    Attributes:
        fields (Mapping[str, Any]): Bin name -> value, in the store's iteration order.
        generation (int): Write generation counter.
        expiration (int): Expiration as reported by the client.
    """

    fields: Mapping[str, Any] = field(default_factory=dict)
    generation: int = 0
    expiration: int = 0


class ScanAction(str, Enum):
    """What a scan callback asks the store to do next."""

    CONTINUE = "continue"
    STOP_LIMIT = "stop_limit"
    STOP_ERROR = "stop_error"

    @property
    def stops(self) -> bool:
        return self is not ScanAction.CONTINUE


OnRecord = Callable[[Key, Record], ScanAction]


@runtime_checkable
class StoreClient(Protocol):
    """Operations the engine needs from a store client."""

    def list_partitions(self) -> Iterable[PartitionId]:
        """Return every (namespace, set) pair present in the cluster."""
        ...

    def namespace_config(self, namespace: str) -> Mapping[str, str]:
        """Return the namespace's configuration properties as strings."""
        ...

    def scan(
        self,
        namespace: str,
        set_name: str,
        expression: FilterExpression,
        on_record: OnRecord,
    ) -> ScanAction:
        """Stream matching records to on_record until exhausted or told to stop."""
        ...

    def close(self) -> None:
        ...
