"""
Predicate building and per-namespace storage classification.

The size bound applies to "device size" for namespaces stored on disk and "memory size" for
namespaces stored in memory. Which one applies is decided once per namespace from the
namespace configuration and memoised for the run by StorageClassifier.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping

from setexport.core.errors import DiscoveryError
from setexport.core.filters import Bound, FilterExpression, FilterParams, Metric
from setexport.store.client import StoreClient

logger = logging.getLogger(__name__)

_TRUE = {"true", "yes", "1"}


def is_in_memory(config: Mapping[str, str]) -> bool:
    """
    Decide from namespace properties whether data is held primarily in memory.

    Examples:
        >>> is_in_memory({"storage-engine": "memory"})
        True
        >>> is_in_memory({"storage-engine": "device", "data-in-memory": "true"})
        True
        >>> is_in_memory({"storage-engine": "device"})
        False
    """
    engine = str(config.get("storage-engine", "")).strip().lower()
    if engine == "memory":
        return True
    return str(config.get("data-in-memory", "")).strip().lower() in _TRUE


class StorageClassifier:
    """
    Run-scoped memo of namespace -> in-memory flag.

    Plain dict guarded by a lock; no eviction. prime() fills it for every selected namespace
    before workers start so lookups during the export are reads.
    """

    def __init__(self, client: StoreClient) -> None:
        self._client = client
        self._lock = threading.Lock()
        self._cache: dict[str, bool] = {}

    def in_memory(self, namespace: str) -> bool:
        """
        Return whether `namespace` stores data in memory, querying the store once.

        Raises:
            DiscoveryError: If the namespace configuration cannot be read.
        """
        with self._lock:
            if namespace in self._cache:
                return self._cache[namespace]
            try:
                config = self._client.namespace_config(namespace)
            except Exception as exc:
                raise DiscoveryError(
                    f"could not read configuration of namespace {namespace!r}: {exc}"
                ) from exc
            flag = is_in_memory(config)
            self._cache[namespace] = flag
            logger.debug("namespace %s in-memory=%s", namespace, flag)
            return flag

    def prime(self, namespaces: Iterable[str]) -> None:
        for ns in sorted(set(namespaces)):
            self.in_memory(ns)

    def cached(self) -> dict[str, bool]:
        with self._lock:
            return dict(self._cache)


def build_filter(namespace: str, params: FilterParams, classifier: StorageClassifier) -> FilterExpression:
    """
    Build the AND of the time and size range bounds for a namespace.

    Args:
        namespace (str): Namespace the expression will be used for.
        params (FilterParams): Run filter parameters.
        classifier (StorageClassifier): Storage classification memo.

    Returns:
        FilterExpression: start <= last_update <= end AND min <= size <= max.
    """
    size_metric = Metric.MEMORY_SIZE if classifier.in_memory(namespace) else Metric.DEVICE_SIZE
    return FilterExpression(
        (
            Bound(Metric.LAST_UPDATE, params.start_time_ns, params.end_time_ns),
            Bound(size_metric, params.min_size, params.max_size),
        )
    )


def build_filters(
    namespaces: Iterable[str], params: FilterParams, classifier: StorageClassifier
) -> dict[str, FilterExpression]:
    """Build one expression per distinct namespace, priming the classifier first."""
    distinct = sorted(set(namespaces))
    classifier.prime(distinct)
    return {ns: build_filter(ns, params, classifier) for ns in distinct}
