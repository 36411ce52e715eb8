"""
Filter parameters and the server-side filter expression.

FilterParams holds the process-wide, immutable time/size/limit bounds derived
once from configuration. FilterExpression is the AND of inclusive range bounds
the store evaluates during a scan; it also knows how to evaluate itself against
a RecordMeta so in-process stores can apply it.

Notes:
    - Times are nanoseconds since the Unix epoch; sizes are bytes.
    - Naive timestamps are interpreted as UTC.
    - Zero-IO; stdlib only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum

from .constants import ACCEPTED_DATE_FORMATS, MAX_INT64
from .errors import ConfigError

__all__ = [
    "FilterParams",
    "Metric",
    "Bound",
    "RecordMeta",
    "FilterExpression",
    "parse_time_ns",
]

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True, slots=True)
class FilterParams:
    """
    Immutable export filter configuration.

    Attributes:
        start_time_ns (int): Inclusive lower bound on record last-update time.
        end_time_ns (int): Inclusive upper bound on record last-update time.
        min_size (int): Inclusive lower bound on the record size metric.
        max_size (int): Inclusive upper bound on the record size metric.
        record_limit (int): Rows per partition; 0 means unlimited.
        record_metadata (bool): Emit _generation/_expiry columns.
        include_digest (bool): Emit the _digest column.
    """

    start_time_ns: int = 0
    end_time_ns: int = MAX_INT64
    min_size: int = 0
    max_size: int = MAX_INT64
    record_limit: int = 0
    record_metadata: bool = False
    include_digest: bool = False

    def __post_init__(self) -> None:
        if self.record_limit < 0:
            raise ConfigError("record_limit must be >= 0 (0 = unlimited)")
        if self.start_time_ns < 0:
            raise ConfigError("start_time_ns must be >= 0")
        if self.start_time_ns > self.end_time_ns:
            raise ConfigError("start time must not be after end time")
        if self.min_size < 0:
            raise ConfigError("min_size must be >= 0")
        if self.min_size > self.max_size:
            raise ConfigError("min_size must not exceed max_size")

    @property
    def unlimited(self) -> bool:
        return self.record_limit == 0


class Metric(str, Enum):
    """Record metadata a bound can be applied to."""

    LAST_UPDATE = "last_update"
    DEVICE_SIZE = "device_size"
    MEMORY_SIZE = "memory_size"


@dataclass(frozen=True, slots=True)
class Bound:
    """Inclusive range bound ``low <= metric <= high``."""

    metric: Metric
    low: int
    high: int


@dataclass(frozen=True, slots=True)
class RecordMeta:
    """Server-side metadata a FilterExpression is evaluated against."""

    last_update_ns: int = 0
    device_size: int = 0
    memory_size: int = 0

    def value_of(self, metric: Metric) -> int:
        if metric is Metric.LAST_UPDATE:
            return self.last_update_ns
        if metric is Metric.DEVICE_SIZE:
            return self.device_size
        return self.memory_size


@dataclass(frozen=True, slots=True)
class FilterExpression:
    """
    Boolean AND of range bounds, evaluated by the store during a scan.

    Examples:
        >>> expr = FilterExpression((Bound(Metric.DEVICE_SIZE, 100, 200),))
        >>> expr.matches(RecordMeta(device_size=150))
        True
        >>> expr.matches(RecordMeta(device_size=201))
        False
    """

    bounds: tuple[Bound, ...]

    @property
    def size_metric(self) -> Metric | None:
        for b in self.bounds:
            if b.metric is not Metric.LAST_UPDATE:
                return b.metric
        return None

    def matches(self, meta: RecordMeta) -> bool:
        for b in self.bounds:
            v = meta.value_of(b.metric)
            if not (b.low <= v <= b.high):
                return False
        return True


def parse_time_ns(text: str | None) -> int | None:
    """
    Parse a user-supplied timestamp into nanoseconds since the epoch.

    Accepts ``MM/dd/yyyy-HH:mm:ss``, ``MMMM d yyyy HH:mm:ss +ZZZZ`` and ISO-8601.
    Naive values are taken as UTC; precision is truncated to milliseconds.

    Args:
        text (str | None): Timestamp text, or None.

    Returns:
        int | None: Nanoseconds since the epoch, or None when text is None/empty.

    Raises:
        ConfigError: If the text matches none of the accepted formats.

    Examples:
        >>> parse_time_ns("01/01/1970-00:00:01")
        1000000000
        >>> parse_time_ns(None) is None
        True
    """
    if text is None or not text.strip():
        return None
    raw = text.strip()
    parsed: datetime | None = None
    for fmt in ACCEPTED_DATE_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            raise ConfigError(
                f"could not parse date {raw!r}; expected one of "
                f"{', '.join(ACCEPTED_DATE_FORMATS)} or ISO-8601"
            ) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    millis = (parsed - _EPOCH) // timedelta(milliseconds=1)
    return millis * 1_000_000
