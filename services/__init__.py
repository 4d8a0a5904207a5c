"""
Services Module
Business logic layer for the MedicineReminder engine
"""

from services.context import EngineContext
from services.adherence_service import AdherenceLedger, adherence_ledger
from services.medicine_service import MedicineService
from services.report_service import ReportService


__all__ = [
    # Context
    "EngineContext",
    # Service classes
    "AdherenceLedger",
    "MedicineService",
    "ReportService",
    # Stateless singleton
    "adherence_ledger",
]
