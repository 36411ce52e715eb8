"""
Pydantic v2 models for per-partition outcomes and the run manifest.

Responsibilities
- PartitionReport: the outcome a Partition Export Worker returns (never an exception).
- RunManifest: what a run persists next to its CSV files (see setexport.io.manifest).

Style
- Zero-IO (stdlib + pydantic only).
- Models forbid unknown fields so manifests stay round-trippable.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .typing import PartitionId

__all__ = [
    "PartitionStatus",
    "PartitionReport",
    "FilterSummary",
    "RunManifest",
]

PartitionStatus = Literal["done", "failed"]


class PartitionReport(BaseModel):
    """
    Outcome of exporting one partition.

    Attributes:
        namespace (str): Namespace of the partition.
        set_name (str): Set name of the partition.
        status (PartitionStatus): "done" on success, "failed" otherwise.
        rows (int): Rows written to the scratch file before finishing or failing.
        columns (list[str]): Final header columns (empty when failed before finalizing).
        path (str | None): Final CSV path when status is "done".
        stopped_early (bool): True when the record limit ended the scan.
        error (str | None): Failure description when status is "failed".

    Examples:
        >>> from setexport.core.schema import PartitionReport
        >>> PartitionReport(namespace="test", set_name="demo", status="done", rows=3).ok
        True
    """

    model_config = ConfigDict(extra="forbid")

    namespace: str
    set_name: str
    status: PartitionStatus
    rows: int = Field(default=0, ge=0)
    columns: list[str] = Field(default_factory=list)
    path: str | None = None
    stopped_early: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "done"

    @property
    def partition(self) -> PartitionId:
        return PartitionId(self.namespace, self.set_name)


class FilterSummary(BaseModel):
    """Filter parameters echoed into the run manifest."""

    model_config = ConfigDict(extra="forbid")

    start_time_ns: int
    end_time_ns: int
    min_size: int
    max_size: int
    record_limit: int
    record_metadata: bool
    include_digest: bool


class RunManifest(BaseModel):
    """
    Summary of one export run.

    Attributes:
        version (int): Manifest layout version.
        started_at (str): ISO-8601 UTC start timestamp.
        finished_at (str): ISO-8601 UTC finish timestamp.
        concurrency (int): Worker pool size used.
        filters (FilterSummary): Filter parameters applied to every partition.
        partitions (list[PartitionReport]): One report per selected partition.
    """

    model_config = ConfigDict(extra="forbid")

    version: int = 1
    started_at: str
    finished_at: str
    concurrency: int = Field(..., ge=1)
    filters: FilterSummary
    partitions: list[PartitionReport] = Field(default_factory=list)

    @field_validator("partitions")
    @classmethod
    def _sorted(cls, v: list[PartitionReport]) -> list[PartitionReport]:
        return sorted(v, key=lambda r: (r.namespace, r.set_name))

    @property
    def failed(self) -> list[PartitionReport]:
        return [r for r in self.partitions if not r.ok]
