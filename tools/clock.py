"""
Clock
Time source consumed by the engine, substitutable for deterministic tests
"""

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        ...


class SystemClock:
    """Local wall-clock time, no timezone"""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """Clock that only moves when told to"""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current

    def advance(self, **kwargs) -> datetime:
        """Move forward by a timedelta given as keyword arguments, e.g. minutes=1"""
        self.current = self.current + timedelta(**kwargs)
        return self.current


def minute_of(moment: datetime) -> str:
    """Time of day truncated to minute resolution, as HH:MM"""
    return moment.strftime("%H:%M")
