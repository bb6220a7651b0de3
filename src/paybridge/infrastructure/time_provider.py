from datetime import UTC, datetime, timedelta
from threading import Lock

from paybridge.application.ports import TimeProvider


class SystemTimeProvider(TimeProvider):
    """Wall clock used to stamp created_at and verified_at in production."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedTimeProvider(TimeProvider):
    """Manually driven clock for tests.

    Webhook redeliveries are exercised from worker threads, so reads and
    moves go through a lock. The clock only moves forward: a payment is
    never verified before it was created.
    """

    def __init__(self, fixed_time: datetime) -> None:
        _require_utc(fixed_time)
        self._current = fixed_time
        self._lock = Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._current

    def set_time(self, new_time: datetime) -> None:
        """Jump to new_time; it must not be earlier than the current time."""
        _require_utc(new_time)
        with self._lock:
            self._move_to(new_time)

    def advance(self, delta: timedelta) -> None:
        with self._lock:
            self._move_to(self._current + delta)

    def _move_to(self, new_time: datetime) -> None:
        if new_time < self._current:
            raise ValueError(f"clock cannot move backwards: {new_time} < {self._current}")
        self._current = new_time


def _require_utc(dt: datetime) -> None:
    if dt.tzinfo is not UTC:
        raise ValueError(f"datetime must have tzinfo=UTC, got tzinfo={dt.tzinfo}")
