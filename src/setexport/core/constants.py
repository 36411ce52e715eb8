"""
Export defaults and reserved column names.

This module is zero-IO and uses only the Python standard library.

Notes:
    - Reserved columns always precede data columns in a fixed order:
      DIGEST_COLUMN, then GENERATION_COLUMN and EXPIRY_COLUMN.
    - Time bounds are nanoseconds since the Unix epoch; size bounds are bytes.
"""

from __future__ import annotations

__all__ = [
    "DIGEST_COLUMN",
    "GENERATION_COLUMN",
    "EXPIRY_COLUMN",
    "MAX_INT64",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_CONCURRENCY",
    "AWAIT_TIMEOUT_S",
    "OUTPUT_SUFFIX",
    "SCRATCH_SUFFIX",
    "STAGING_SUFFIX",
    "RUN_MANIFEST_NAME",
    "ACCEPTED_DATE_FORMATS",
]

DIGEST_COLUMN: str = "_digest"
GENERATION_COLUMN: str = "_generation"
EXPIRY_COLUMN: str = "_expiry"

# Upper bound used for "unbounded" time and size filters.
MAX_INT64: int = 2**63 - 1

DEFAULT_HOST: str = "127.0.0.1"
DEFAULT_PORT: int = 3000
DEFAULT_OUTPUT_DIR: str = "."
DEFAULT_CONCURRENCY: int = 1

# The coordinator waits this long for the pool; treated as "forever".
AWAIT_TIMEOUT_S: float = 365 * 24 * 3600.0

OUTPUT_SUFFIX: str = ".csv"
SCRATCH_SUFFIX: str = ".csv.tmp"
STAGING_SUFFIX: str = ".csv.part"
RUN_MANIFEST_NAME: str = "export.manifest.json"

# strptime formats accepted for --from/--to in addition to ISO-8601.
ACCEPTED_DATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y-%H:%M:%S",
    "%B %d %Y %H:%M:%S %z",
)
