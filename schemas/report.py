"""
Report Schemas
Pydantic models for caregiver adherence reports
"""

from typing import List
from datetime import datetime
from pydantic import BaseModel, Field


class WeeklyReport(BaseModel):
    """Taken and missed counts over the trailing report window"""
    taken_count: int = Field(..., ge=0)
    missed_count: int = Field(..., ge=0)
    total_medicines: int = Field(..., ge=0)
    period_days: int = 7
    window_start: datetime
    generated_at: datetime
    missed_medicine_ids: List[str] = Field(default_factory=list)
    low_stock_medicine_ids: List[str] = Field(default_factory=list)

    @property
    def period(self) -> str:
        return f"{self.period_days} days"
