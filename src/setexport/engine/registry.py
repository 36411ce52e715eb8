"""
Per-partition schema registry.

Tracks the ordered list of discovered column names for one partition:

    [_digest] [_generation, _expiry] <first record's fields, sorted> <later fields, first-seen>

Positions are append-only: once a name has a position it never moves, names are unique, and
the list never shrinks. A dict index gives O(1) membership and position lookups. A lock
provides ordinary mutual exclusion between the writer and snapshot readers.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable

from setexport.core.constants import DIGEST_COLUMN, EXPIRY_COLUMN, GENERATION_COLUMN


class SchemaRegistry:
    """
    Ordered, append-only set of column names.

    Examples:
        >>> reg = SchemaRegistry()
        >>> reg.ensure_initialized(["b", "a"], record_metadata=True, include_digest=False)
        >>> reg.snapshot()
        ('_generation', '_expiry', 'a', 'b')
        >>> reg.append_if_new("c"), reg.append_if_new("a")
        (4, 2)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._names: list[str] = []
        self._index: dict[str, int] = {}
        self._initialized = False
        self._prefix_width = 0

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def prefix_width(self) -> int:
        """Number of reserved columns ahead of the data columns."""
        return self._prefix_width

    def __len__(self) -> int:
        with self._lock:
            return len(self._names)

    def _append(self, name: str) -> int:
        pos = self._index.get(name)
        if pos is None:
            pos = len(self._names)
            self._names.append(name)
            self._index[name] = pos
        return pos

    def is_known(self, name: str) -> bool:
        with self._lock:
            return name in self._index

    def ensure_initialized(
        self,
        first_field_names: Iterable[str],
        record_metadata: bool,
        include_digest: bool,
    ) -> None:
        """
        Populate the registry from the first record of the partition.

        Reserved columns come first (digest, then generation/expiry), then the record's field
        names in lexicographic order. No-op once initialized.
        """
        with self._lock:
            if self._initialized:
                return
            prefix: list[str] = []
            if include_digest:
                prefix.append(DIGEST_COLUMN)
            if record_metadata:
                prefix.extend((GENERATION_COLUMN, EXPIRY_COLUMN))
            for name in prefix:
                self._append(name)
            self._prefix_width = len(prefix)
            for name in sorted(first_field_names):
                self._append(name)
            self._initialized = True

    def append_if_new(self, name: str) -> int:
        """Return the position of `name`, appending it at the end if unknown."""
        with self._lock:
            return self._append(name)

    def data_columns(self) -> tuple[str, ...]:
        """Current columns after the reserved prefix."""
        with self._lock:
            return tuple(self._names[self._prefix_width :])

    def snapshot(self) -> tuple[str, ...]:
        """Current column order."""
        with self._lock:
            return tuple(self._names)
