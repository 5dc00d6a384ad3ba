import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

# Range `to_datetime` can represent: 0001-01-01T00:00:00Z to 9999-12-31T23:59:59.999Z
MIN_INSTANT_MS = -62_135_596_800_000
MAX_INSTANT_MS = 253_402_300_799_999


class Clock(ABC):
    """Source of the current instant, in integer milliseconds since the epoch."""

    @abstractmethod
    def now(self) -> int:
        ...


class SystemClock(Clock):
    """Wall-clock time."""

    def now(self) -> int:
        return time.time_ns() // 1_000_000


class FixedClock(Clock):
    """Clock pinned to a caller-supplied instant.

    Parameters
    ----------
    instant_ms : int
        The instant returned by every call to `now()`.

    Notes
    -----
    - Used for deterministic expiry checks: the HTTP layer builds one per
      request from the `x-test-now-ms` header when test mode is enabled.
    """

    def __init__(self, instant_ms: int):
        self.instant_ms = int(instant_ms)

    def now(self) -> int:
        return self.instant_ms


def to_datetime(instant_ms: int) -> datetime:
    """Convert an epoch-millisecond instant to an aware UTC `datetime`.

    Instants outside `MIN_INSTANT_MS`..`MAX_INSTANT_MS` are clamped to that range.
    """

    seconds, millis = divmod(max(MIN_INSTANT_MS, min(instant_ms, MAX_INSTANT_MS)), 1000)
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=seconds, milliseconds=millis)
