"""
Plan Limiter
Admission rule for new medicines per caregiver plan tier
"""

from config import engine_config
from schemas.actor import PlanTier


def can_add(
    tier: PlanTier,
    current_count: int,
    free_limit: int = engine_config.FREE_PLAN_MEDICINE_LIMIT
) -> bool:
    """
    Whether a caregiver with current_count medicines may create another.

    Only checked at creation time; a later downgrade never removes
    existing medicines.
    """
    if tier == PlanTier.PAID:
        return True
    return current_count < free_limit
