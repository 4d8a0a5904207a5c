"""
Medicine Service
Admission, ownership-checked updates and dose recording for medicines
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Union
from datetime import date, timedelta

from pydantic import ValidationError

from config import CollectionNames, engine_config
from errors import (
    Ok, Err, Result, ErrorKind, capture,
    MedicineEngineError, NotFound, PermissionDenied, PlanLimitExceeded,
    InvalidInput, StorageUnavailable,
)
from schemas.actor import Actor
from schemas.medicine import (
    Medicine, MedicineCreate, MedicineUpdate, MedicineStatus, AudioInstructions,
)
from services.context import EngineContext
from tools import inventory
from tools.inventory import StockUpdate
from tools.plan_limiter import can_add
from tools.schedule_resolver import is_due, next_due_date


logger = logging.getLogger(__name__)


def _validation_detail(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in error.errors()
    )


def _reject_audio_reference(instructions: Any) -> None:
    """Voice instructions are attached as recordings, never as raw blob references"""
    if isinstance(instructions, AudioInstructions):
        raise InvalidInput("audio instructions must be supplied as a voice recording")


class MedicineService:
    """
    Service for medicine lifecycle operations

    Every operation returns Ok or Err; storage and ownership failures are
    never raised to the caller.
    """

    collection = CollectionNames.MEDICINES

    def __init__(self, context: EngineContext):
        self.context = context

    @property
    def store(self):
        return self.context.record_store

    # ==================== READS ====================

    def _parse(self, record: Dict[str, Any]) -> Medicine:
        try:
            return Medicine.from_record(record)
        except ValidationError as e:
            logger.error(f"Unreadable medicine record {record.get('id')}: {_validation_detail(e)}")
            raise StorageUnavailable(f"medicine record {record.get('id')} is corrupt") from e

    def _load(self, medicine_id: str) -> Medicine:
        return self._parse(self.store.get(self.collection, medicine_id))

    def _query(self, **fields: Any) -> List[Medicine]:
        records = self.store.query(
            self.collection,
            lambda r: all(r.get(k) == v for k, v in fields.items())
        )
        return [self._parse(r) for r in records]

    def get_medicine(self, medicine_id: str) -> Result:
        """Get medicine by ID"""
        return capture(lambda: self._load(medicine_id))

    def list_patient_medicines(self, patient_id: str) -> Result:
        """All medicines of a patient, in the order they were created"""
        return capture(lambda: self._query(patient_id=patient_id))

    def list_caregiver_medicines(self, caregiver_id: str) -> Result:
        """All medicines a caregiver created, across their patients"""
        return capture(lambda: self._query(caregiver_id=caregiver_id))

    def patient_schedule(self, patient_id: str, on_date: Optional[date] = None) -> Result:
        """
        Day view of a patient's medicines, ordered by dose time

        Args:
            patient_id: Patient whose medicines are listed
            on_date: Day to describe; today by default

        Returns:
            Ok(List[MedicineStatus]) or Err STORAGE_UNAVAILABLE
        """
        def _build() -> List[MedicineStatus]:
            day = on_date or self.context.clock.now().date()
            medicines = sorted(self._query(patient_id=patient_id), key=lambda m: m.dose_time)
            statuses = []
            for medicine in medicines:
                taken_today = day in medicine.taken_dates
                # Once today's dose is taken the next one is tomorrow at the earliest
                upcoming_from = day + timedelta(days=1) if taken_today else day
                statuses.append(MedicineStatus(
                    medicine=medicine,
                    due_today=is_due(medicine.schedule, day),
                    taken_today=taken_today,
                    low_stock=inventory.is_low_stock(medicine.stock),
                    next_due=next_due_date(medicine.schedule, upcoming_from)
                ))
            return statuses

        return capture(_build)

    # ==================== ADMISSION ====================

    def create_medicine(
        self,
        actor: Actor,
        data: Union[MedicineCreate, Dict[str, Any]],
        voice_recording: Optional[bytes] = None
    ) -> Result:
        """
        Create a medicine for one of the actor's patients

        Args:
            actor: Caregiver creating the medicine
            data: Medicine fields, as a model or a plain dict
            voice_recording: Optional recorded instructions; stored in the
                blob store and replacing any text instructions

        Returns:
            Ok(Medicine), or Err with PLAN_LIMIT_EXCEEDED, INVALID_SCHEDULE,
            INVALID_INPUT or STORAGE_UNAVAILABLE. Nothing is written on Err.
        """
        try:
            if not isinstance(data, MedicineCreate):
                data = MedicineCreate.model_validate(data)
            _reject_audio_reference(data.instructions)
            return Ok(self._create(actor, data, voice_recording))
        except ValidationError as e:
            return Err(ErrorKind.INVALID_INPUT, _validation_detail(e))
        except MedicineEngineError as e:
            return Err(e.kind, e.detail)

    def _create(
        self,
        actor: Actor,
        data: MedicineCreate,
        voice_recording: Optional[bytes]
    ) -> Medicine:
        current_count = len(self._query(caregiver_id=actor.id))
        if not can_add(actor.tier, current_count):
            logger.warning(
                f"Caregiver {actor.id} on {actor.tier.value} plan blocked at "
                f"{current_count} medicines"
            )
            raise PlanLimitExceeded(
                f"Free plan limit reached ({engine_config.FREE_PLAN_MEDICINE_LIMIT} medicines max)"
            )

        instructions = data.instructions
        if voice_recording is not None:
            instructions = AudioInstructions(blob_ref=self.context.blob_store.put(voice_recording))

        medicine = Medicine(
            id=uuid.uuid4().hex,
            patient_id=data.patient_id,
            caregiver_id=actor.id,
            name=data.name,
            dose_time=data.dose_time,
            stock=data.stock,
            instructions=instructions,
            schedule=data.schedule,
            created_at=self.context.clock.now()
        )

        try:
            self.store.put(self.collection, medicine.to_record())
        except StorageUnavailable:
            if voice_recording is not None:
                self._release_blob(medicine.audio_ref)
            raise

        logger.info(f"Added medicine {medicine.name} ({medicine.id}) for patient {medicine.patient_id}")
        return medicine

    # ==================== MUTATIONS ====================

    def _load_owned(self, actor: Actor, medicine_id: str) -> Medicine:
        medicine = self._load(medicine_id)
        if medicine.caregiver_id != actor.id:
            raise PermissionDenied(f"medicine {medicine_id} belongs to another caregiver")
        return medicine

    def update_medicine(
        self,
        actor: Actor,
        medicine_id: str,
        changes: Union[MedicineUpdate, Dict[str, Any]],
        voice_recording: Optional[bytes] = None
    ) -> Result:
        """
        Update name, dose time, stock, instructions or schedule

        Args:
            actor: Caregiver owning the medicine
            medicine_id: Medicine to change
            changes: Fields to change; unset fields are left alone
            voice_recording: New recorded instructions replacing the current
                ones; the previous recording is released once the change
                is saved

        Returns:
            Ok(updated Medicine), or Err NOT_FOUND / PERMISSION_DENIED /
            INVALID_SCHEDULE / INVALID_INPUT / STORAGE_UNAVAILABLE
        """
        try:
            if not isinstance(changes, MedicineUpdate):
                changes = MedicineUpdate.model_validate(changes)
            _reject_audio_reference(changes.instructions)
            return Ok(self._update(actor, medicine_id, changes, voice_recording))
        except ValidationError as e:
            return Err(ErrorKind.INVALID_INPUT, _validation_detail(e))
        except MedicineEngineError as e:
            return Err(e.kind, e.detail)

    def _update(
        self,
        actor: Actor,
        medicine_id: str,
        changes: MedicineUpdate,
        voice_recording: Optional[bytes]
    ) -> Medicine:
        medicine = self._load_owned(actor, medicine_id)

        updates = {
            name: getattr(changes, name)
            for name in changes.model_fields_set
            if getattr(changes, name) is not None
        }
        if not updates and voice_recording is None:
            return medicine

        new_ref = None
        if voice_recording is not None:
            new_ref = self.context.blob_store.put(voice_recording)
            updates["instructions"] = AudioInstructions(blob_ref=new_ref)

        try:
            updated = Medicine.model_validate({**dict(medicine), **updates})
            self.store.put(self.collection, updated.to_record())
        except ValidationError as e:
            if new_ref:
                self._release_blob(new_ref)
            raise InvalidInput(_validation_detail(e)) from e
        except MedicineEngineError:
            if new_ref:
                self._release_blob(new_ref)
            raise

        previous_ref = medicine.audio_ref
        if previous_ref and previous_ref != updated.audio_ref:
            self._release_blob(previous_ref)

        logger.info(f"Updated medicine {medicine_id}: {sorted(updates)}")
        return updated

    def delete_medicine(self, actor: Actor, medicine_id: str) -> Result:
        """
        Delete a medicine and release its recorded voice instructions

        Returns:
            Ok(deleted Medicine), or Err NOT_FOUND / PERMISSION_DENIED /
            STORAGE_UNAVAILABLE
        """
        def _delete() -> Medicine:
            medicine = self._load_owned(actor, medicine_id)
            self.store.delete(self.collection, medicine_id)
            if medicine.audio_ref:
                self._release_blob(medicine.audio_ref)
            logger.info(f"Deleted medicine {medicine.name} ({medicine_id})")
            return medicine

        return capture(_delete)

    def _release_blob(self, ref: str) -> None:
        """Delete a voice blob no medicine refers to any more"""
        try:
            self.context.blob_store.delete(ref)
        except NotFound:
            logger.debug(f"Voice blob {ref} already gone")
        except StorageUnavailable as e:
            logger.warning(f"Could not release voice blob {ref}: {e.detail}")

    # ==================== DOSES ====================

    def record_taken(self, medicine_id: str, on_date: Optional[date] = None) -> Result:
        """
        Record a dose as taken on a date (today by default)

        Idempotent per date: the stock is only decremented and the record
        only written the first time.

        Returns:
            Ok(StockUpdate) or Err NOT_FOUND / STORAGE_UNAVAILABLE
        """
        def _record() -> StockUpdate:
            taken_on = on_date or self.context.clock.now().date()
            medicine = self._load(medicine_id)
            updated, update = inventory.record_taken(medicine, taken_on)

            if update.recorded:
                self.store.put(self.collection, updated.to_record())
                logger.info(
                    f"Medicine {medicine.name} ({medicine_id}) taken on {taken_on}, "
                    f"stock {update.new_stock}"
                )
            if update.low_stock:
                logger.warning(f"Low stock for medicine {medicine_id}: {update.new_stock} left")
            return update

        return capture(_record)

    def load_voice_instructions(self, medicine: Medicine) -> Optional[bytes]:
        """
        Fetch recorded instructions for a medicine

        Raises:
            NotFound: the blob no longer exists
            StorageUnavailable: the blob store could not be reached
        """
        if medicine.audio_ref is None:
            return None
        return self.context.blob_store.get(medicine.audio_ref)
