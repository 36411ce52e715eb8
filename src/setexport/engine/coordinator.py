"""
Export coordinator: bounded fan-out of partition workers.

A fixed-size thread pool runs one PartitionExportWorker per partition. Scans block their
worker thread, so threads (not processes) are the unit of parallelism. No ordering is imposed
between partitions, and a failed partition never cancels the others.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import Future, ThreadPoolExecutor, wait

from setexport.core.constants import AWAIT_TIMEOUT_S
from setexport.core.errors import ConfigError
from setexport.core.filters import FilterExpression, FilterParams
from setexport.core.schema import PartitionReport
from setexport.core.typing import PartitionId
from setexport.store.client import StoreClient

from .worker import PartitionExportWorker

logger = logging.getLogger(__name__)


class ExportCoordinator:
    """
    Runs partition exports on a bounded worker pool.

    Args:
        client (StoreClient): Store client shared by all workers.
        params (FilterParams): Immutable run filter parameters.
        output_dir (str): Directory receiving export files.
        concurrency (int): Pool size (>= 1).
        await_timeout_s (float): How long run() waits for the pool.

    Raises:
        ConfigError: If concurrency < 1.
    """

    def __init__(
        self,
        client: StoreClient,
        params: FilterParams,
        output_dir: str,
        concurrency: int = 1,
        await_timeout_s: float = AWAIT_TIMEOUT_S,
    ) -> None:
        if concurrency < 1:
            raise ConfigError(f"concurrency must be >= 1, got {concurrency}")
        self.client = client
        self.params = params
        self.output_dir = output_dir
        self.concurrency = concurrency
        self.await_timeout_s = await_timeout_s

    def _worker(self, partition: PartitionId, expression: FilterExpression) -> PartitionExportWorker:
        return PartitionExportWorker(
            self.client, partition, expression, self.params, self.output_dir
        )

    def run(
        self,
        partitions: Iterable[PartitionId],
        filters: Mapping[str, FilterExpression],
    ) -> list[PartitionReport]:
        """
        Export every partition and wait for all of them.

        Args:
            partitions (Iterable[PartitionId]): Partitions to export.
            filters (Mapping[str, FilterExpression]): Expression per namespace.

        Returns:
            list[PartitionReport]: One report per partition, sorted by partition.

        Raises:
            ConfigError: If a partition's namespace has no filter expression.
        """
        todo = sorted(set(partitions))
        missing = sorted({p.namespace for p in todo} - set(filters))
        if missing:
            raise ConfigError(f"no filter expression for namespace(s): {', '.join(missing)}")
        if not todo:
            logger.info("no partitions to export")
            return []

        pool = ThreadPoolExecutor(max_workers=self.concurrency, thread_name_prefix="setexport")
        futures: dict[Future[PartitionReport], PartitionId] = {}
        reports: list[PartitionReport] = []
        try:
            for pid in todo:
                worker = self._worker(pid, filters[pid.namespace])
                futures[pool.submit(worker.run)] = pid
            done, pending = wait(futures, timeout=self.await_timeout_s)
            for fut in done:
                reports.append(fut.result())
            for fut in pending:
                pid = futures[fut]
                fut.cancel()
                logger.error("Gave up waiting for %s", pid)
                reports.append(
                    PartitionReport(
                        namespace=pid.namespace,
                        set_name=pid.set_name,
                        status="failed",
                        error="timed out waiting for export",
                    )
                )
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        reports.sort(key=lambda r: (r.namespace, r.set_name))
        failed = sum(1 for r in reports if not r.ok)
        logger.info(
            "exported %d partition(s), %d failed, %d rows",
            len(reports) - failed,
            failed,
            sum(r.rows for r in reports if r.ok),
        )
        return reports
