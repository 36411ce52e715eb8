"""
Run manifest persistence.

Manifest layout (JSON at <output_dir>/export.manifest.json):
{
  "version": 1,
  "started_at": "ISO-8601",
  "finished_at": "ISO-8601",
  "concurrency": 3,
  "filters": {"start_time_ns": 0, ..., "include_digest": false},
  "partitions": [
    {"namespace": "test", "set_name": "demo", "status": "done", "rows": 3,
     "columns": ["a", "b"], "path": "out/test.demo.csv", "stopped_early": false, "error": null}
  ]
}

Notes:
- Models live in setexport.core.schema (pydantic); this module only does file IO.
- A manifest is written even when some partitions failed, so re-runs can target them.
"""

from __future__ import annotations

import json
import os
from collections.abc import Iterable
from datetime import UTC, datetime

from pydantic import ValidationError

from setexport.core.filters import FilterParams
from setexport.core.schema import FilterSummary, PartitionReport, RunManifest

from .errors import IoManifestError
from .fs import makedirs, open_write, rename_atomic
from .paths import manifest_path


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat()


def build_manifest(
    params: FilterParams,
    concurrency: int,
    reports: Iterable[PartitionReport],
    *,
    started_at: str,
    finished_at: str | None = None,
) -> RunManifest:
    """Assemble a RunManifest from a run's inputs and per-partition reports."""
    return RunManifest(
        started_at=started_at,
        finished_at=finished_at or utc_now_iso(),
        concurrency=concurrency,
        filters=FilterSummary(
            start_time_ns=params.start_time_ns,
            end_time_ns=params.end_time_ns,
            min_size=params.min_size,
            max_size=params.max_size,
            record_limit=params.record_limit,
            record_metadata=params.record_metadata,
            include_digest=params.include_digest,
        ),
        partitions=list(reports),
    )


def write_manifest(output_dir: str, manifest: RunManifest) -> str:
    """
    Persist the run manifest atomically.

    The write path is: serialize JSON -> write "<final>.tmp" -> atomic rename to final.

    Returns:
        str: Path of the written manifest.

    Raises:
        IoManifestError: If filesystem operations fail.
    """
    final_path = manifest_path(output_dir)
    tmp_path = final_path + ".tmp"
    payload = json.dumps(manifest.model_dump(mode="json"), indent=2).encode("utf-8")
    try:
        makedirs(output_dir, exist_ok=True)
        with open_write(tmp_path) as fh:
            fh.write(payload)
        rename_atomic(tmp_path, final_path)
    except OSError as exc:
        raise IoManifestError(f"failed to write manifest {final_path}: {exc}") from exc
    return final_path


def load_manifest(output_dir: str) -> RunManifest | None:
    """
    Load the run manifest of an output directory if present.

    Returns:
        RunManifest | None: Parsed manifest, or None if no manifest exists.

    Raises:
        IoManifestError: If the file exists but cannot be parsed.
    """
    mpath = manifest_path(output_dir)
    if not os.path.exists(mpath):
        return None
    try:
        with open(mpath, encoding="utf-8") as fh:
            data = json.load(fh)
        return RunManifest.model_validate(data)
    except (OSError, ValueError, ValidationError) as exc:
        raise IoManifestError(f"invalid manifest {mpath}: {exc}") from exc
