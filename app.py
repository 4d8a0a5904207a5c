"""
MedicineReminder Engine
Composition root wiring stores, clock and services for one host session
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Union

from config import Settings, settings as default_settings
from database import create_db_engine, create_session_factory, init_db
from errors import Result
from schemas.actor import Actor
from schemas.medicine import MedicineCreate, MedicineUpdate
from services.context import EngineContext
from services.medicine_service import MedicineService
from services.report_service import ReportService
from actions.dose_alert_dispatcher import DoseAlert, DoseAlertDispatcher
from stores.memory import InMemoryRecordStore, InMemoryBlobStore
from stores.sql import SqlRecordStore, SqlBlobStore
from tools.clock import Clock, SystemClock


logger = logging.getLogger(__name__)


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure root logging from settings"""
    settings = settings or default_settings
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT
    )


class MedicineReminderApp:
    """
    One engine instance: the Admission, Report and Dispatcher APIs over a
    shared context.

    Instances share nothing, so several caregivers or patients can be driven
    side by side in one process.
    """

    def __init__(self, context: EngineContext):
        self.context = context
        self.medicines = MedicineService(context)
        self.reports = ReportService(context, self.medicines)
        self.dispatcher = DoseAlertDispatcher(context, self.medicines)

    @classmethod
    def in_memory(cls, clock: Optional[Clock] = None) -> "MedicineReminderApp":
        """Engine over process-local stores"""
        return cls(EngineContext(
            record_store=InMemoryRecordStore(),
            blob_store=InMemoryBlobStore(),
            clock=clock or SystemClock()
        ))

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None
    ) -> "MedicineReminderApp":
        """Engine over the SQL database named by DATABASE_URL"""
        settings = settings or default_settings
        engine = create_db_engine(settings.DATABASE_URL, settings.DATABASE_ECHO)
        init_db(engine)
        session_factory = create_session_factory(engine)

        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENV})")
        return cls(EngineContext(
            record_store=SqlRecordStore(session_factory),
            blob_store=SqlBlobStore(session_factory),
            clock=clock or SystemClock()
        ))

    # ==================== ADMISSION API ====================

    def create_medicine(
        self,
        actor: Actor,
        data: Union[MedicineCreate, Dict[str, Any]],
        voice_recording: Optional[bytes] = None
    ) -> Result:
        return self.medicines.create_medicine(actor, data, voice_recording)

    def update_medicine(
        self,
        actor: Actor,
        medicine_id: str,
        changes: Union[MedicineUpdate, Dict[str, Any]],
        voice_recording: Optional[bytes] = None
    ) -> Result:
        return self.medicines.update_medicine(actor, medicine_id, changes, voice_recording)

    def delete_medicine(self, actor: Actor, medicine_id: str) -> Result:
        return self.medicines.delete_medicine(actor, medicine_id)

    def record_taken(self, medicine_id: str, on_date: Optional[date] = None) -> Result:
        return self.medicines.record_taken(medicine_id, on_date)

    def patient_schedule(self, patient_id: str, on_date: Optional[date] = None) -> Result:
        return self.medicines.patient_schedule(patient_id, on_date)

    # ==================== REPORT API ====================

    def weekly_report(self, caregiver_id: str, now: Optional[datetime] = None) -> Result:
        return self.reports.weekly_report(caregiver_id, now)

    # ==================== DISPATCHER API ====================

    def start_monitoring(self, patient_id: str) -> Result:
        return self.dispatcher.start_monitoring(patient_id)

    def stop_monitoring(self, patient_id: str) -> None:
        self.dispatcher.stop_monitoring(patient_id)

    def confirm_taken(self, patient_id: str) -> Result:
        return self.dispatcher.confirm_taken(patient_id)

    def tick(self, now: Optional[datetime] = None) -> Dict[str, Result]:
        return self.dispatcher.tick(now)

    def current_alert(self, patient_id: str) -> Optional[DoseAlert]:
        return self.dispatcher.current_alert(patient_id)

    def shutdown(self) -> None:
        """Stop monitoring every patient, closing any open alerts"""
        self.dispatcher.stop_all()
        logger.info("Engine shut down")
