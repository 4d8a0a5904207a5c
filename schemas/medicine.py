"""
Medicine Schemas
Pydantic models for medicines, their schedules and instructions
"""

from typing import Annotated, Optional, FrozenSet, Literal, Union
from datetime import datetime, date
from enum import IntEnum
from pydantic import BaseModel, Field, ConfigDict, field_validator, field_serializer

from errors import InvalidSchedule


DOSE_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class Weekday(IntEnum):
    """Weekday numbering used by WeekDays schedules (Sunday first)"""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        # isoweekday: Monday=1 .. Sunday=7
        return cls(day.isoweekday() % 7)


# ==================== SCHEDULES ====================

class DailySchedule(BaseModel):
    """Due on every calendar date"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["daily"] = "daily"


class WeekDaysSchedule(BaseModel):
    """Due when the date's weekday is one of the listed days"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["week_days"] = "week_days"
    days: FrozenSet[int]

    @field_validator("days")
    @classmethod
    def check_days(cls, days: FrozenSet[int]) -> FrozenSet[int]:
        if not days:
            raise InvalidSchedule("week_days schedule needs at least one day")
        invalid = sorted(d for d in days if d < 0 or d > 6)
        if invalid:
            raise InvalidSchedule(f"weekday values must be 0-6, got {invalid}")
        return days

    @field_serializer("days")
    def serialize_days(self, days: FrozenSet[int]):
        return sorted(days)


class OneTimeSchedule(BaseModel):
    """Due on a single date"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["one_time"] = "one_time"
    due_date: date


class CustomDatesSchedule(BaseModel):
    """Due on each of an explicit set of dates"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["custom_dates"] = "custom_dates"
    dates: FrozenSet[date]

    @field_validator("dates")
    @classmethod
    def check_dates(cls, dates: FrozenSet[date]) -> FrozenSet[date]:
        if not dates:
            raise InvalidSchedule("custom_dates schedule needs at least one date")
        return dates

    @field_serializer("dates")
    def serialize_dates(self, dates: FrozenSet[date]):
        return sorted(d.isoformat() for d in dates)


Schedule = Annotated[
    Union[DailySchedule, WeekDaysSchedule, OneTimeSchedule, CustomDatesSchedule],
    Field(discriminator="kind")
]


# ==================== INSTRUCTIONS ====================

class TextInstructions(BaseModel):
    """Inline instruction text shown with the alert"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str = Field(default="", max_length=2000)


class AudioInstructions(BaseModel):
    """Reference to recorded voice instructions in the blob store"""
    model_config = ConfigDict(frozen=True)

    kind: Literal["audio"] = "audio"
    blob_ref: str = Field(..., min_length=1)


Instructions = Annotated[
    Union[TextInstructions, AudioInstructions],
    Field(discriminator="kind")
]


# ==================== MEDICINE ====================

class MedicineBase(BaseModel):
    """Fields a caregiver provides for a medicine"""
    name: str = Field(..., min_length=1, max_length=255)
    dose_time: str = Field(..., pattern=DOSE_TIME_PATTERN)
    stock: int = Field(..., ge=0)
    instructions: Instructions = Field(default_factory=TextInstructions)
    schedule: Schedule = Field(default_factory=DailySchedule)


class MedicineCreate(MedicineBase):
    """Input for creating a medicine for one of the caregiver's patients"""
    patient_id: str = Field(..., min_length=1)


class MedicineUpdate(BaseModel):
    """Partial update; unset fields are left unchanged"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    dose_time: Optional[str] = Field(None, pattern=DOSE_TIME_PATTERN)
    stock: Optional[int] = Field(None, ge=0)
    instructions: Optional[Instructions] = None
    schedule: Optional[Schedule] = None


class Medicine(MedicineBase):
    """A scheduled medication for one patient, owned by one caregiver"""
    model_config = ConfigDict(frozen=True)

    id: str
    patient_id: str
    caregiver_id: str
    taken_dates: FrozenSet[date] = frozenset()
    created_at: datetime

    @field_serializer("taken_dates")
    def serialize_taken_dates(self, taken_dates: FrozenSet[date]):
        return sorted(d.isoformat() for d in taken_dates)

    @property
    def audio_ref(self) -> Optional[str]:
        if isinstance(self.instructions, AudioInstructions):
            return self.instructions.blob_ref
        return None

    @property
    def last_taken_date(self) -> Optional[date]:
        return max(self.taken_dates) if self.taken_dates else None

    def to_record(self) -> dict:
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: dict) -> "Medicine":
        return cls.model_validate(record)


class MedicineStatus(BaseModel):
    """A patient's medicine as shown in their day view"""
    model_config = ConfigDict(frozen=True)

    medicine: Medicine
    due_today: bool
    taken_today: bool
    low_stock: bool
    next_due: Optional[date] = None

    @property
    def status(self) -> str:
        return "taken" if self.taken_today else "pending"
