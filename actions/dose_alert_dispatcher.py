"""
Dose Alert Dispatcher
Per-patient alert state machine driven by host clock ticks
"""

import logging
from typing import List, Dict, Any, Optional, Callable
from dataclasses import dataclass, field
from datetime import datetime, date, timedelta
from enum import Enum
import uuid

from config import engine_config
from errors import Ok, Err, Result, ErrorKind, NotFound, StorageUnavailable
from schemas.medicine import Medicine
from services.adherence_service import AdherenceLedger, adherence_ledger
from services.context import EngineContext
from services.medicine_service import MedicineService
from tools.clock import minute_of
from tools.schedule_resolver import is_due


logger = logging.getLogger(__name__)


class AlertState(str, Enum):
    """Dispatcher state for one patient"""
    IDLE = "idle"
    ALERTING = "alerting"


@dataclass(frozen=True)
class DoseAlert:
    """One actionable, not yet confirmed dose"""
    id: str
    patient_id: str
    medicine_id: str
    medicine_name: str
    dose_time: str
    due_date: date
    stock: int
    raised_at: datetime
    instruction_text: Optional[str] = None
    voice: Optional[bytes] = None
    voice_expires_at: Optional[datetime] = None

    @property
    def has_voice(self) -> bool:
        return self.voice is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "medicine_id": self.medicine_id,
            "medicine_name": self.medicine_name,
            "dose_time": self.dose_time,
            "due_date": self.due_date.isoformat(),
            "stock": self.stock,
            "raised_at": self.raised_at.isoformat(),
            "instruction_text": self.instruction_text,
            "has_voice": self.has_voice,
            "voice_expires_at": self.voice_expires_at.isoformat() if self.voice_expires_at else None
        }


AlertListener = Callable[[Optional[DoseAlert]], None]


@dataclass
class PatientSession:
    """Monitoring state of a single patient"""
    patient_id: str
    started_at: datetime
    alert: Optional[DoseAlert] = None

    @property
    def state(self) -> AlertState:
        return AlertState.ALERTING if self.alert else AlertState.IDLE


class DoseAlertDispatcher:
    """
    Dispatcher deciding when a patient should be alerted to take a dose

    Responsibilities:
    - Track which patients are being monitored
    - On each tick, surface at most one due, untaken medicine per patient
    - Record confirmations through the medicine service
    - Notify subscribers whenever a patient's current alert changes

    The dispatcher owns no timers; the host calls tick() on its own cadence
    (once a minute in practice). Matching is on the exact dose minute, so a
    tick that skips a minute never raises that dose later.
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
        self._sessions: Dict[str, PatientSession] = {}
        self._listeners: Dict[str, List[AlertListener]] = {}

    # ==================== OBSERVATION ====================

    def subscribe(self, patient_id: str, listener: AlertListener) -> Callable[[], None]:
        """
        Register a listener for a patient's current alert

        Returns:
            Callable removing the listener again
        """
        self._listeners.setdefault(patient_id, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(patient_id, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _notify(self, patient_id: str, alert: Optional[DoseAlert]) -> None:
        for listener in list(self._listeners.get(patient_id, [])):
            try:
                listener(alert)
            except Exception as e:
                logger.error(f"Alert listener for patient {patient_id} failed: {e}")

    def current_alert(self, patient_id: str) -> Optional[DoseAlert]:
        session = self._sessions.get(patient_id)
        return session.alert if session else None

    def state(self, patient_id: str) -> AlertState:
        session = self._sessions.get(patient_id)
        return session.state if session else AlertState.IDLE

    def is_monitoring(self, patient_id: str) -> bool:
        return patient_id in self._sessions

    @property
    def monitored_patients(self) -> List[str]:
        return list(self._sessions)

    # ==================== LIFECYCLE ====================

    def start_monitoring(self, patient_id: str, now: Optional[datetime] = None) -> Result:
        """
        Begin monitoring a patient and check for a due dose right away

        Starting an already monitored patient changes nothing.

        Returns:
            Ok(current alert or None), or Err if the first check failed
        """
        if patient_id in self._sessions:
            return Ok(self._sessions[patient_id].alert)

        moment = now or self.context.clock.now()
        self._sessions[patient_id] = PatientSession(patient_id=patient_id, started_at=moment)
        logger.info(f"Started monitoring patient {patient_id}")
        return self._check(self._sessions[patient_id], moment)

    def stop_monitoring(self, patient_id: str) -> None:
        """Stop monitoring; an open alert is dropped without recording anything"""
        session = self._sessions.pop(patient_id, None)
        if session is None:
            return

        logger.info(f"Stopped monitoring patient {patient_id}")
        if session.alert is not None:
            self._notify(patient_id, None)

    def stop_all(self) -> None:
        for patient_id in list(self._sessions):
            self.stop_monitoring(patient_id)

    # ==================== TICKS ====================

    def tick(self, now: Optional[datetime] = None) -> Dict[str, Result]:
        """
        Evaluate every monitored patient at one moment

        Returns:
            Per patient, Ok(alert) when an alert is open after the tick,
            Ok(None) when idle, or Err when its medicines could not be read
        """
        moment = now or self.context.clock.now()
        return {
            patient_id: self._check(session, moment)
            for patient_id, session in list(self._sessions.items())
        }

    def _check(self, session: PatientSession, now: datetime) -> Result:
        if session.alert is not None:
            # One open alert at a time
            return Ok(session.alert)

        listed = self.medicine_service.list_patient_medicines(session.patient_id)
        if not listed.ok:
            logger.error(f"Alert check for patient {session.patient_id} failed: {listed.detail}")
            return listed

        medicine = self.find_due_medicine(listed.value, now)
        if medicine is None:
            return Ok(None)

        session.alert = self._build_alert(session.patient_id, medicine, now)
        logger.info(
            f"Alert {session.alert.id}: {medicine.name} due at {medicine.dose_time} "
            f"for patient {session.patient_id}"
        )
        self._notify(session.patient_id, session.alert)
        return Ok(session.alert)

    def find_due_medicine(self, medicines: List[Medicine], now: datetime) -> Optional[Medicine]:
        """First medicine due today, at this exact minute, and not yet taken today"""
        today = now.date()
        current_minute = minute_of(now)

        for medicine in medicines:
            if medicine.dose_time != current_minute:
                continue
            if not is_due(medicine.schedule, today):
                continue
            if self.ledger.is_taken_on(medicine, today):
                continue
            return medicine
        return None

    def _build_alert(self, patient_id: str, medicine: Medicine, now: datetime) -> DoseAlert:
        instruction_text = None
        voice = None
        voice_expires_at = None

        if medicine.audio_ref:
            try:
                voice = self.medicine_service.load_voice_instructions(medicine)
                voice_expires_at = now + timedelta(minutes=engine_config.VOICE_PLAYBACK_MINUTES)
            except (NotFound, StorageUnavailable) as e:
                logger.warning(f"Voice instructions for {medicine.id} unavailable, using fallback: {e.detail}")
                instruction_text = engine_config.FALLBACK_INSTRUCTION
        else:
            instruction_text = medicine.instructions.text or engine_config.FALLBACK_INSTRUCTION

        return DoseAlert(
            id=str(uuid.uuid4())[:8],
            patient_id=patient_id,
            medicine_id=medicine.id,
            medicine_name=medicine.name,
            dose_time=medicine.dose_time,
            due_date=now.date(),
            stock=medicine.stock,
            raised_at=now,
            instruction_text=instruction_text,
            voice=voice,
            voice_expires_at=voice_expires_at
        )

    # ==================== TRANSITIONS ====================

    def confirm_taken(self, patient_id: str) -> Result:
        """
        Patient confirms the open alert's dose was taken

        Without an open alert this is a no-op returning Ok(None).

        Returns:
            Ok(StockUpdate) on success. On Err STORAGE_UNAVAILABLE the alert
            stays open so the caller may retry; on Err NOT_FOUND (medicine
            deleted meanwhile) the alert is closed.
        """
        session = self._sessions.get(patient_id)
        if session is None or session.alert is None:
            return Ok(None)

        alert = session.alert
        result = self.medicine_service.record_taken(alert.medicine_id, alert.due_date)

        if not result.ok and result.kind != ErrorKind.NOT_FOUND:
            logger.error(f"Could not confirm alert {alert.id}: {result.detail}")
            return result

        session.alert = None
        self._notify(patient_id, None)

        if isinstance(result, Err):
            logger.warning(f"Medicine {alert.medicine_id} vanished before alert {alert.id} was confirmed")
        else:
            logger.info(f"Alert {alert.id} confirmed for patient {patient_id}")
        return result

    def dismiss(self, patient_id: str) -> bool:
        """
        Close the open alert without recording a dose

        Returns:
            True if an alert was open
        """
        session = self._sessions.get(patient_id)
        if session is None or session.alert is None:
            return False

        logger.info(f"Alert {session.alert.id} dismissed for patient {patient_id}")
        session.alert = None
        self._notify(patient_id, None)
        return True
