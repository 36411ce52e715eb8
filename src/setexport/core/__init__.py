"""
setexport.core — Zero-IO domain types for the CSV export engine.

## Responsibilities
- Identity (PartitionId), filter parameters and expressions, the closed value variant,
  typed errors, reserved column names and defaults, and pydantic report models.

## Import DAG discipline
- stdlib + pydantic only; no file or network IO.
- MUST NOT import setexport.io, setexport.store, setexport.engine or setexport.cli.
"""

from __future__ import annotations

from .errors import ConfigError, DiscoveryError, ExportError, ScanError, UnsupportedValueError
from .filters import Bound, FilterExpression, FilterParams, Metric, RecordMeta, parse_time_ns
from .schema import PartitionReport, RunManifest
from .typing import PartitionId
from .values import ValueKind, classify, encode_value

__all__ = [
    "Bound",
    "ConfigError",
    "DiscoveryError",
    "ExportError",
    "FilterExpression",
    "FilterParams",
    "Metric",
    "PartitionId",
    "PartitionReport",
    "RecordMeta",
    "RunManifest",
    "ScanError",
    "UnsupportedValueError",
    "ValueKind",
    "classify",
    "encode_value",
    "parse_time_ns",
]
