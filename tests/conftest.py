"""
Pytest Configuration and Shared Fixtures
========================================

Shared fixtures for the MedicineReminder tests: a fixed clock, in-memory
and SQLite backed engine contexts, caregivers and sample medicines.
"""

import os
import sys
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict

import pytest
from sqlalchemy.orm import sessionmaker

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import MedicineReminderApp
from database import create_db_engine, create_session_factory, init_db, drop_db
from schemas.actor import Actor, PlanTier
from schemas.medicine import Medicine, DailySchedule, TextInstructions
from services.context import EngineContext
from stores.memory import InMemoryRecordStore, InMemoryBlobStore
from tools.clock import FixedClock
from tests import TEST_DATABASE_URL


# ==================== CLOCK FIXTURES ====================

@pytest.fixture
def now() -> datetime:
    """Monday 08:00 local time"""
    return datetime(2024, 5, 6, 8, 0)


@pytest.fixture
def clock(now: datetime) -> FixedClock:
    return FixedClock(now)


# ==================== CONTEXT FIXTURES ====================

@pytest.fixture
def context(clock: FixedClock) -> EngineContext:
    """Engine context over fresh in-memory stores"""
    return EngineContext(
        record_store=InMemoryRecordStore(),
        blob_store=InMemoryBlobStore(),
        clock=clock
    )


@pytest.fixture
def engine_app(context: EngineContext) -> MedicineReminderApp:
    return MedicineReminderApp(context)


@pytest.fixture(scope="function")
def sql_engine():
    """In-memory SQLite engine with all tables created"""
    engine = create_db_engine(TEST_DATABASE_URL, echo=False)
    init_db(engine)

    yield engine

    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session_factory(sql_engine) -> sessionmaker:
    return create_session_factory(sql_engine)


# ==================== ACTOR FIXTURES ====================

@pytest.fixture
def caregiver() -> Actor:
    return Actor(id="caregiver-1", tier=PlanTier.FREE)


@pytest.fixture
def paid_caregiver() -> Actor:
    return Actor(id="caregiver-paid", tier=PlanTier.PAID)


@pytest.fixture
def other_caregiver() -> Actor:
    return Actor(id="caregiver-2", tier=PlanTier.PAID)


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def medicine_data() -> Dict[str, Any]:
    """Input for creating a daily 08:00 medicine"""
    return {
        "patient_id": "patient-1",
        "name": "Metformin",
        "dose_time": "08:00",
        "stock": 30,
        "instructions": {"kind": "text", "text": "Take with breakfast"},
        "schedule": {"kind": "daily"},
    }


@pytest.fixture
def make_medicine(now: datetime) -> Callable[..., Medicine]:
    """Factory building Medicine snapshots without going through a store"""
    def _make(**overrides: Any) -> Medicine:
        fields = {
            "id": uuid.uuid4().hex,
            "patient_id": "patient-1",
            "caregiver_id": "caregiver-1",
            "name": "Metformin",
            "dose_time": "08:00",
            "stock": 30,
            "instructions": TextInstructions(text="Take with breakfast"),
            "schedule": DailySchedule(),
            "taken_dates": frozenset(),
            "created_at": now - timedelta(days=1),
        }
        fields.update(overrides)
        return Medicine(**fields)

    return _make


# ==================== PYTEST CONFIGURATION ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
