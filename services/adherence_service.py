"""
Adherence Service
Taken/missed accounting derived from medicine history and schedules
"""

import logging
from typing import Iterable, List
from datetime import datetime, date, timedelta

from config import engine_config
from schemas.medicine import Medicine
from schemas.report import WeeklyReport
from tools.clock import minute_of
from tools.inventory import is_low_stock
from tools.schedule_resolver import is_due


logger = logging.getLogger(__name__)


class AdherenceLedger:
    """
    Ledger over each medicine's taken dates.

    Holds no state of its own; every answer is computed from the medicine
    snapshots it is given and the moment being evaluated.
    """

    def __init__(self, window_days: int = engine_config.REPORT_WINDOW_DAYS):
        self.window_days = window_days

    def is_taken_on(self, medicine: Medicine, on_date: date) -> bool:
        """Whether the dose for on_date has already been satisfied"""
        return on_date in medicine.taken_dates

    def window_start(self, now: datetime) -> datetime:
        return now - timedelta(days=self.window_days)

    def was_taken_in_window(self, medicine: Medicine, now: datetime) -> bool:
        """Whether the most recent taken date falls inside the trailing window"""
        last_taken = medicine.last_taken_date
        if last_taken is None:
            return False
        return self.window_start(now).date() <= last_taken <= now.date()

    def is_missed_today(self, medicine: Medicine, now: datetime) -> bool:
        """
        Same-day missed check.

        A medicine counts as missed when it is due today, its dose time has
        already passed, it was created inside the window and today's dose
        has not been taken. Earlier days in the window are not scanned.
        """
        today = now.date()
        if not is_due(medicine.schedule, today):
            return False
        if not medicine.dose_time < minute_of(now):
            return False
        if medicine.created_at < self.window_start(now):
            return False
        return not self.is_taken_on(medicine, today)

    def weekly_report(self, medicines: Iterable[Medicine], now: datetime) -> WeeklyReport:
        """
        Aggregate taken and missed counts over the trailing window.

        Args:
            medicines: All medicines of one caregiver
            now: Moment the report is generated for

        Returns:
            WeeklyReport counting medicines, not individual doses
        """
        medicines = list(medicines)
        taken: List[str] = []
        missed: List[str] = []
        low_stock: List[str] = []

        for medicine in medicines:
            if self.was_taken_in_window(medicine, now):
                taken.append(medicine.id)
            if self.is_missed_today(medicine, now):
                missed.append(medicine.id)
            if is_low_stock(medicine.stock):
                low_stock.append(medicine.id)

        logger.debug(
            f"Weekly report: {len(taken)} taken, {len(missed)} missed "
            f"of {len(medicines)} medicines"
        )

        return WeeklyReport(
            taken_count=len(taken),
            missed_count=len(missed),
            total_medicines=len(medicines),
            period_days=self.window_days,
            window_start=self.window_start(now),
            generated_at=now,
            missed_medicine_ids=missed,
            low_stock_medicine_ids=low_stock
        )


# Singleton instance
adherence_ledger = AdherenceLedger()
