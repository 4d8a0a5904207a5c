"""
Schedule Resolver
Decides whether a medicine's schedule makes it due on a calendar date
"""

import logging
from datetime import date, timedelta
from typing import Optional

from schemas.medicine import (
    Schedule,
    DailySchedule,
    WeekDaysSchedule,
    OneTimeSchedule,
    CustomDatesSchedule,
    Weekday,
)


logger = logging.getLogger(__name__)


def is_due(schedule: Schedule, on_date: date) -> bool:
    """
    Check whether the schedule is active on the given date.

    Pure and side-effect free; whether the dose was already taken is the
    adherence ledger's concern. Schedules are assumed well formed, empty day
    or date sets being rejected when the schedule is built.

    Args:
        schedule: One of the schedule variants
        on_date: Calendar date to evaluate

    Returns:
        True when a dose is due on that date
    """
    if isinstance(schedule, DailySchedule):
        return True
    if isinstance(schedule, WeekDaysSchedule):
        return int(Weekday.of(on_date)) in schedule.days
    if isinstance(schedule, OneTimeSchedule):
        return on_date == schedule.due_date
    if isinstance(schedule, CustomDatesSchedule):
        return on_date in schedule.dates
    raise TypeError(f"Unsupported schedule type: {type(schedule)}")


def next_due_date(
    schedule: Schedule,
    start: date,
    horizon_days: int = 366
) -> Optional[date]:
    """First date on or after start when the schedule is due, if any within the horizon"""
    if isinstance(schedule, OneTimeSchedule):
        return schedule.due_date if schedule.due_date >= start else None
    if isinstance(schedule, CustomDatesSchedule):
        upcoming = [d for d in schedule.dates if d >= start]
        return min(upcoming) if upcoming else None

    for offset in range(horizon_days):
        candidate = start + timedelta(days=offset)
        if is_due(schedule, candidate):
            return candidate
    return None
