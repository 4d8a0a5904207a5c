"""
Schemas Module
Pydantic models shared by the tools, services and dispatcher
"""

from schemas.actor import Actor, PlanTier
from schemas.medicine import (
    Weekday,
    DailySchedule,
    WeekDaysSchedule,
    OneTimeSchedule,
    CustomDatesSchedule,
    Schedule,
    TextInstructions,
    AudioInstructions,
    Instructions,
    Medicine,
    MedicineCreate,
    MedicineUpdate,
    MedicineStatus,
)
from schemas.report import WeeklyReport


__all__ = [
    "Actor",
    "PlanTier",
    "Weekday",
    "DailySchedule",
    "WeekDaysSchedule",
    "OneTimeSchedule",
    "CustomDatesSchedule",
    "Schedule",
    "TextInstructions",
    "AudioInstructions",
    "Instructions",
    "Medicine",
    "MedicineCreate",
    "MedicineUpdate",
    "MedicineStatus",
    "WeeklyReport",
]
