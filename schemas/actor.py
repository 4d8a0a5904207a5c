"""
Actor Schemas
The caregiver session the engine acts on behalf of
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class PlanTier(str, Enum):
    """Caregiver subscription level"""
    FREE = "free"
    PAID = "paid"


class Actor(BaseModel):
    """Identity and plan tier of the current caregiver"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    tier: PlanTier = PlanTier.FREE
