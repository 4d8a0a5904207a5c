"""
Report Service
Caregiver-facing adherence reports
"""

import logging
from typing import Optional
from datetime import datetime

from errors import Result, capture
from schemas.report import WeeklyReport
from services.adherence_service import AdherenceLedger, adherence_ledger
from services.context import EngineContext
from services.medicine_service import MedicineService


logger = logging.getLogger(__name__)


class ReportService:
    """
    Service for generating caregiver adherence reports
    """

    def __init__(
        self,
        context: EngineContext,
        medicine_service: MedicineService,
        ledger: AdherenceLedger = adherence_ledger
    ):
        self.context = context
        self.medicine_service = medicine_service
        self.ledger = ledger

    def weekly_report(self, caregiver_id: str, now: Optional[datetime] = None) -> Result:
        """
        Build the trailing-window report for every medicine of a caregiver

        Args:
            caregiver_id: Caregiver whose medicines are reported
            now: Report moment; the engine clock when omitted

        Returns:
            Ok(WeeklyReport) or Err STORAGE_UNAVAILABLE
        """
        def _build() -> WeeklyReport:
            moment = now or self.context.clock.now()
            medicines = self.medicine_service.list_caregiver_medicines(caregiver_id).unwrap()
            report = self.ledger.weekly_report(medicines, moment)
            logger.info(
                f"Weekly report for caregiver {caregiver_id}: "
                f"{report.taken_count} taken, {report.missed_count} missed, "
                f"{report.total_medicines} total"
            )
            return report

        return capture(_build)
