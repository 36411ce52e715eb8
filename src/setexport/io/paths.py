"""
Path and layout helpers for setexport.io.

Layout (file protocol baseline)
- <output_dir>/<namespace>.<set>.csv                   final export file
- <output_dir>/<namespace>.<set>.<uuid>.csv.tmp        scratch rows (no header) while scanning
- <output_dir>/<namespace>.<set>.<uuid>.csv.part       header + rows, renamed onto the final file
- <output_dir>/export.manifest.json                    run manifest

Import DAG discipline
- stdlib + setexport.core only.
"""

from __future__ import annotations

import os
import re
import uuid
from dataclasses import dataclass

from setexport.core.constants import (
    OUTPUT_SUFFIX,
    RUN_MANIFEST_NAME,
    SCRATCH_SUFFIX,
    STAGING_SUFFIX,
)
from setexport.core.typing import PartitionId

# <namespace>.<set>.csv where neither part is a scratch/staging uuid
_EXPORT_RE = re.compile(r"^(?P<ns>[^.]+)\.(?P<set>.+)\.csv$")


@dataclass(frozen=True, slots=True)
class ExportPaths:
    """Scratch, staging and final paths for one partition export."""

    scratch_path: str
    staging_path: str
    final_path: str


def output_file_name(partition: PartitionId) -> str:
    """
    File name of a partition's export.

    Examples:
        >>> output_file_name(PartitionId("test", "demo"))
        'test.demo.csv'
    """
    return partition.file_stem + OUTPUT_SUFFIX


def output_path(output_dir: str, partition: PartitionId) -> str:
    """Final export path for a partition."""
    return os.path.join(output_dir, output_file_name(partition))


def export_paths(output_dir: str, partition: PartitionId, uid: str | None = None) -> ExportPaths:
    """
    Paths used by one worker run; `uid` keeps concurrent or repeated runs apart.

    Args:
        output_dir (str): Output directory.
        partition (PartitionId): Partition being exported.
        uid (str | None): Unique token; a random uuid4 hex when omitted.
    """
    token = uid or uuid.uuid4().hex
    stem = os.path.join(output_dir, f"{partition.file_stem}.{token}")
    return ExportPaths(
        scratch_path=stem + SCRATCH_SUFFIX,
        staging_path=stem + STAGING_SUFFIX,
        final_path=output_path(output_dir, partition),
    )


def manifest_path(output_dir: str) -> str:
    """Path to the run manifest in an output directory."""
    return os.path.join(output_dir, RUN_MANIFEST_NAME)


def partition_from_path(path: str) -> PartitionId | None:
    """
    Recover the PartitionId from an export file name, or None if it is not one.

    Notes:
        Namespaces cannot contain dots, so the first dot separates namespace from set.
    """
    name = os.path.basename(path)
    if name.endswith(SCRATCH_SUFFIX) or name.endswith(STAGING_SUFFIX):
        return None
    m = _EXPORT_RE.match(name)
    if not m:
        return None
    return PartitionId(m.group("ns"), m.group("set"))
