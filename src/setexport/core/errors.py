"""
Core exception types raised by configuration, discovery, and scanning.

Provides typed exceptions for export-domain failures:
- ConfigError for invalid or inconsistent configuration (fatal, raised before any scan).
- DiscoveryError when the store cannot list partitions or namespace config (fatal for the run).
- ScanError for failures contained to a single partition.
- UnsupportedValueError for field values outside the closed value variant.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - File-system failures raised by the IO layer live in setexport.io.errors.
    - A record limit being reached is not an error and has no exception type.

Examples:
    Catch a configuration failure.

    >>> from setexport.core.errors import ConfigError
    >>> try:
    ...     raise ConfigError("concurrency must be >= 1")
    ... except ValueError as e:
    ...     msg = str(e)
    >>> "concurrency" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "ExportError",
    "ConfigError",
    "DiscoveryError",
    "ScanError",
    "UnsupportedValueError",
]


class ExportError(Exception):
    """Base class for all setexport failures."""


class ConfigError(ExportError, ValueError):
    """Invalid configuration (bad concurrency, unparseable date, bad pattern, bounds)."""


class DiscoveryError(ExportError):
    """The store could not be queried for partitions or namespace configuration."""


class ScanError(ExportError):
    """A single partition's scan failed; other partitions are unaffected."""


class UnsupportedValueError(ScanError, TypeError):
    """A record field holds a value outside the supported value kinds."""
