"""
Partition export worker.

One worker exports one partition through the states

    IDLE -> SCANNING -> FINALIZING -> DONE
                  \\            \\
                   +------------+--> FAILED

SCANNING   rows stream to a header-less scratch file while the registry grows.
FINALIZING the header is built from the final registry snapshot, written ahead of the
           scratch bytes into a staging file, and renamed onto "<namespace>.<set>.csv".

Stopping the stream
- Record limit reached: the callback returns ScanAction.STOP_LIMIT; a normal completion.
- Failure while handling a record (write error, unsupported value): the cause is kept and
  the callback returns ScanAction.STOP_ERROR; the worker then fails with that cause.

The worker never raises: every failure is logged with the partition id and returned as a
"failed" PartitionReport so sibling partitions are unaffected.
"""

from __future__ import annotations

import logging
from enum import Enum

from setexport.core.errors import ScanError
from setexport.core.filters import FilterExpression, FilterParams
from setexport.core.schema import PartitionReport
from setexport.core.typing import PartitionId
from setexport.io.fs import makedirs, remove_quiet
from setexport.io.paths import ExportPaths, export_paths
from setexport.io.write import RowWriter, finalize_with_header
from setexport.store.client import Key, Record, ScanAction, StoreClient

from .materializer import materialize
from .registry import SchemaRegistry

logger = logging.getLogger(__name__)


class WorkerState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


class PartitionExportWorker:
    """
    Exports a single partition to "<output_dir>/<namespace>.<set>.csv".

    Args:
        client (StoreClient): Store client used for the scan.
        partition (PartitionId): Partition to export.
        expression (FilterExpression): Server-side filter for the partition's namespace.
        params (FilterParams): Run filter parameters (limit, metadata and digest flags).
        output_dir (str): Directory receiving the export file.
        uid (str | None): Token for scratch/staging names (random when omitted).

    Attributes:
        state (WorkerState): Current state.
        rows (int): Rows written so far.
        registry (SchemaRegistry): Column registry owned by this worker.
    """

    def __init__(
        self,
        client: StoreClient,
        partition: PartitionId,
        expression: FilterExpression,
        params: FilterParams,
        output_dir: str,
        uid: str | None = None,
    ) -> None:
        self.client = client
        self.partition = partition
        self.expression = expression
        self.params = params
        self.output_dir = output_dir
        self.paths: ExportPaths = export_paths(output_dir, partition, uid)
        self.registry = SchemaRegistry()
        self.state = WorkerState.IDLE
        self.rows = 0
        self.stopped_early = False
        self._writer: RowWriter | None = None
        self._error: BaseException | None = None

    def _on_record(self, key: Key, record: Record) -> ScanAction:
        assert self._writer is not None
        try:
            row = materialize(key, record, self.registry, self.params)
            self._writer.write_row(row)
        except Exception as exc:
            self._error = exc
            return ScanAction.STOP_ERROR
        self.rows += 1
        if not self.params.unlimited and self.rows >= self.params.record_limit:
            return ScanAction.STOP_LIMIT
        return ScanAction.CONTINUE

    def _scan(self) -> None:
        self.state = WorkerState.SCANNING
        with RowWriter(self.paths.scratch_path) as writer:
            self._writer = writer
            try:
                action = self.client.scan(
                    self.partition.namespace,
                    self.partition.set_name,
                    self.expression,
                    self._on_record,
                )
            except Exception as exc:
                raise ScanError(f"scan of {self.partition} failed: {exc}") from exc
            finally:
                self._writer = None
        if self._error is not None or action is ScanAction.STOP_ERROR:
            cause = self._error
            reason = f"{type(cause).__name__}: {cause}" if cause is not None else "store reported an error"
            raise ScanError(f"scan of {self.partition} stopped on {reason}") from cause
        self.stopped_early = action is ScanAction.STOP_LIMIT

    def _finalize(self) -> list[str]:
        self.state = WorkerState.FINALIZING
        columns = list(self.registry.snapshot())
        finalize_with_header(
            self.paths.scratch_path,
            self.paths.staging_path,
            self.paths.final_path,
            columns,
        )
        return columns

    def run(self) -> PartitionReport:
        """
        Export the partition.

        Returns:
            PartitionReport: status "done" with row/column details, or "failed" with the error.
        """
        pid = self.partition
        try:
            makedirs(self.output_dir, exist_ok=True)
            self._scan()
            columns = self._finalize()
        except Exception as exc:
            self.state = WorkerState.FAILED
            logger.error("Error processing %s: %s", pid, exc, exc_info=True)
            remove_quiet(self.paths.scratch_path)
            remove_quiet(self.paths.staging_path)
            return PartitionReport(
                namespace=pid.namespace,
                set_name=pid.set_name,
                status="failed",
                rows=self.rows,
                error=f"{type(exc).__name__}: {exc}",
            )
        self.state = WorkerState.DONE
        logger.debug("Namespace: %s, Set: %s, output %d records", pid.namespace, pid.set_name, self.rows)
        return PartitionReport(
            namespace=pid.namespace,
            set_name=pid.set_name,
            status="done",
            rows=self.rows,
            columns=columns,
            path=self.paths.final_path,
            stopped_early=self.stopped_early,
        )
