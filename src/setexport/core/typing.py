"""
Lightweight identity types and aliases shared across the package.

Notes:
    - PartitionId is immutable, hashable and ordered so that partitions can be
      collected in sets and reported deterministically.
    - Zero-IO; stdlib only.

Examples:
    >>> from setexport.core.typing import PartitionId
    >>> pid = PartitionId("test", "demo")
    >>> str(pid)
    'test.demo'
    >>> pid.file_stem
    'test.demo'
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "PartitionId",
]


@dataclass(frozen=True, order=True, slots=True)
class PartitionId:
    """
    Identity of one exportable partition (a set inside a namespace).

    Attributes:
        namespace (str): Namespace name.
        set_name (str): Set name within the namespace.
    """

    namespace: str
    set_name: str

    def __str__(self) -> str:
        return f"{self.namespace}.{self.set_name}"

    @property
    def file_stem(self) -> str:
        """Base name (without suffix) of the partition's export file."""
        return f"{self.namespace}.{self.set_name}"
