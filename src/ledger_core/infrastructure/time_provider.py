from __future__ import annotations

from datetime import UTC, datetime, timedelta

from ledger_core.application.ports import TimeProvider


class SystemTimeProvider(TimeProvider):
    """Production time provider using system clock."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class ManualTimeProvider(TimeProvider):
    """Test time provider advanced explicitly or by a fixed step per reading.

    With ``step`` set, every now() call moves the clock forward, so rows
    stamped in sequence get strictly increasing timestamps.

    Note: This implementation is NOT thread-safe; the in-memory store only
    reads it while holding its data mutex.
    """

    def __init__(self, start: datetime, step: timedelta = timedelta(0)) -> None:
        self._validate_utc(start)
        self._current = start
        self._step = step

    def now(self) -> datetime:
        current = self._current
        self._current = current + self._step
        return current

    def advance(self, delta: timedelta) -> None:
        self._current = self._current + delta

    def set_time(self, new_time: datetime) -> None:
        self._validate_utc(new_time)
        self._current = new_time

    def _validate_utc(self, dt: datetime) -> None:
        if dt.tzinfo is not UTC:
            raise ValueError(f"datetime must have tzinfo=UTC, got tzinfo={dt.tzinfo}")
