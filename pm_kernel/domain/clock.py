"""
Clock -- where "today" comes from.

Milestone countdowns depend on the current date.  Engines take ``today``
as an argument; the dashboard service asks an injected ``Clock`` for it.
``SystemClock`` is the only place the wall clock is read.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone

DEFAULT_TEST_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """
    Source of the current time.

    Guarantees:
        - ``now()`` is timezone-aware.
        - ``today()`` is the calendar date of ``now()``.
    """

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Fixed clock for tests and for rendering the dashboard "as of" a date.

    Returns the same instant on every call.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._current = fixed_time or DEFAULT_TEST_TIME

    @classmethod
    def on(cls, day: date) -> "DeterministicClock":
        """Clock at noon UTC on ``day``."""
        return cls(datetime.combine(day, datetime.min.time(), tzinfo=timezone.utc)
                   + timedelta(hours=12))

    def now(self) -> datetime:
        return self._current

