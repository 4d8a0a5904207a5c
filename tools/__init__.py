"""
Tools Package
Pure building blocks of the scheduling and adherence engine
"""

from .clock import (
    Clock,
    SystemClock,
    FixedClock,
    minute_of
)

from .schedule_resolver import (
    is_due,
    next_due_date
)

from .inventory import (
    StockUpdate,
    record_taken,
    is_low_stock
)

from .plan_limiter import can_add

__all__ = [
    # Clock
    "Clock",
    "SystemClock",
    "FixedClock",
    "minute_of",

    # Schedule Resolver
    "is_due",
    "next_due_date",

    # Inventory Tracker
    "StockUpdate",
    "record_taken",
    "is_low_stock",

    # Plan Limiter
    "can_add",
]
