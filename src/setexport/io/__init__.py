"""
setexport.io — File layer for export runs.

## Responsibilities
- ExportSettings: run configuration with env > TOML > defaults precedence.
- Streaming scratch writes, header-prefixed finalize with atomic rename, path layout.
- Run manifest persistence and a padding reader for export files (Polars).

## Import DAG discipline
- Depends only on stdlib, polars, pydantic and setexport.core.
- MUST NOT import setexport.store, setexport.engine or setexport.cli.

## Notes
- Finalize path: staging file (header + scratch bytes) -> fsync -> os.replace(staging, final).
"""

from __future__ import annotations

from .config import ExportSettings
from .read import read_export, read_exports

__all__ = [
    "ExportSettings",
    "read_export",
    "read_exports",
]
