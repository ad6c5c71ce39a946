"""
Clock abstraction so date-driven rules can be tested without the wall clock.
"""
from datetime import date, datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date: ...

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock. 'Today' is the UTC calendar date, as the trips service stores dates."""

    def today(self) -> date:
        return self.now().date()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock frozen at a given moment; advance it by assigning `current`."""

    def __init__(self, current: datetime):
        self.current = current

    def today(self) -> date:
        return self.current.date()

    def now(self) -> datetime:
        return self.current
