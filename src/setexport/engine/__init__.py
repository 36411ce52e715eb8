"""
setexport.engine — Dynamic-schema CSV export engine.

## Components (leaves first)
- selector (select_partitions()): namespace/set regex filters over the store's partition list.
- predicate (StorageClassifier + build_filter()): time/size AND expression per namespace.
- registry (SchemaRegistry): append-only column order per partition.
- materializer (materialize()): positional rows aligned to the registry at write time.
- worker (PartitionExportWorker): scan, early stop, header-prefixed finalize.
- coordinator (ExportCoordinator): bounded thread pool, failure isolation.
- exporter (Exporter): facade wiring the above for one run.

## Import DAG discipline
- Depends on setexport.core, setexport.io and setexport.store; never on setexport.cli.
"""

from __future__ import annotations

from .coordinator import ExportCoordinator
from .exporter import Exporter
from .materializer import materialize
from .predicate import StorageClassifier, build_filter, build_filters
from .registry import SchemaRegistry
from .selector import select_partitions
from .worker import PartitionExportWorker, WorkerState

__all__ = [
    "ExportCoordinator",
    "Exporter",
    "PartitionExportWorker",
    "SchemaRegistry",
    "StorageClassifier",
    "WorkerState",
    "build_filter",
    "build_filters",
    "materialize",
    "select_partitions",
]
