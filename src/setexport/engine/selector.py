"""
Partition selection.

A partition is selected iff its namespace full-matches one of the namespace patterns (or no
namespace patterns are given) AND its set name full-matches one of the set patterns (or no
set patterns are given). A literal name is a regex that matches itself.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from setexport.core.errors import ConfigError, DiscoveryError
from setexport.core.typing import PartitionId
from setexport.store.client import StoreClient

logger = logging.getLogger(__name__)


def compile_patterns(patterns: Iterable[str]) -> list[re.Pattern[str]]:
    """
    Compile filter patterns.

    Raises:
        ConfigError: If a pattern is not a valid regular expression.
    """
    out: list[re.Pattern[str]] = []
    for p in patterns:
        try:
            out.append(re.compile(p))
        except re.error as exc:
            raise ConfigError(f"invalid pattern {p!r}: {exc}") from exc
    return out


def _matches(name: str, patterns: list[re.Pattern[str]]) -> bool:
    return not patterns or any(p.fullmatch(name) for p in patterns)


def filter_partitions(
    partitions: Iterable[PartitionId],
    namespace_patterns: Iterable[str] = (),
    set_patterns: Iterable[str] = (),
) -> set[PartitionId]:
    """
    Keep the partitions matching both pattern sets.

    Examples:
        >>> parts = [PartitionId("test", "demo"), PartitionId("test", "users"), PartitionId("bar", "demo")]
        >>> sorted(str(p) for p in filter_partitions(parts, ["test"], ["d.*"]))
        ['test.demo']
    """
    ns_re = compile_patterns(namespace_patterns)
    set_re = compile_patterns(set_patterns)
    return {
        p for p in partitions if _matches(p.namespace, ns_re) and _matches(p.set_name, set_re)
    }


def select_partitions(
    client: StoreClient,
    namespace_patterns: Iterable[str] = (),
    set_patterns: Iterable[str] = (),
) -> set[PartitionId]:
    """
    Query the store for all partitions and return those matching the filters.

    Args:
        client (StoreClient): Store client.
        namespace_patterns (Iterable[str]): Namespace regexes; empty selects all namespaces.
        set_patterns (Iterable[str]): Set regexes; empty selects all sets.

    Returns:
        set[PartitionId]: Selected partitions (possibly empty).

    Raises:
        ConfigError: If a pattern is invalid (checked before the store is queried).
        DiscoveryError: If the store cannot list partitions.
    """
    ns_patterns = list(namespace_patterns)
    s_patterns = list(set_patterns)
    compile_patterns(ns_patterns + s_patterns)
    try:
        available = list(client.list_partitions())
    except Exception as exc:
        raise DiscoveryError(f"could not list partitions: {exc}") from exc
    selected = filter_partitions(available, ns_patterns, s_patterns)
    for p in sorted(selected):
        logger.debug("Added namespace %s, set %s", p.namespace, p.set_name)
    logger.info("selected %d of %d partitions", len(selected), len(available))
    return selected
