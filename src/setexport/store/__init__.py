"""
setexport.store — Store client collaborators.

## Responsibilities
- StoreClient protocol, Key/Record payloads and the ScanAction stop signal.
- MemoryStore: in-process client that applies filter expressions (tests, --mock).
- AerospikeStore: adapter over the optional `aerospike` client (imported lazily).

## Import DAG discipline
- Depends on stdlib and setexport.core; never on setexport.io or setexport.engine.
"""

from __future__ import annotations

from .client import Key, OnRecord, Record, ScanAction, StoreClient
from .memory import MemoryStore

__all__ = [
    "Key",
    "MemoryStore",
    "OnRecord",
    "Record",
    "ScanAction",
    "StoreClient",
]
