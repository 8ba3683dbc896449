"""Timezone-aware datetime helpers."""

import threading
from datetime import UTC, datetime, timedelta


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_iso_datetime(value: str | None) -> datetime | None:
    """
    Parse an ISO-8601 date or datetime string.

    Empty strings and None mean "no value". A trailing ``Z`` is accepted.
    Raises ValueError for anything else that does not parse.
    """
    if value is None or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


class MonotonicClock:
    """
    Hands out strictly increasing UTC timestamps.

    Two calls within the same microsecond (or after a wall-clock step back)
    get the previous value plus one microsecond, so records stamped by one
    process keep their creation order.
    """

    _STEP = timedelta(microseconds=1)

    def __init__(self) -> None:
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = utc_now()
            if self._last is not None and current <= self._last:
                current = self._last + self._STEP
            self._last = current
            return current


audit_clock = MonotonicClock()
