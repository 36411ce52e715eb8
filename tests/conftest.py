from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from setexport.core.filters import FilterParams
from setexport.store.memory import MemoryStore


def _read_lines(path: str | Path) -> list[str]:
    return Path(path).read_text(encoding="utf-8").split("\n")[:-1]


@pytest.fixture
def read_lines() -> Callable[[str | Path], list[str]]:
    """Lines of a text file without the final newline."""
    return _read_lines


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def demo_store() -> MemoryStore:
    # {a,b}, {a,c}, {a} arriving in that order
    s = MemoryStore()
    s.put("test", "demo", 1, {"a": "v1", "b": "v2"}, generation=1, expiration=100)
    s.put("test", "demo", 2, {"a": "v1", "c": "v3"}, generation=2, expiration=200)
    s.put("test", "demo", 3, {"a": "v1"}, generation=3, expiration=300)
    return s


@pytest.fixture
def params() -> FilterParams:
    return FilterParams()
