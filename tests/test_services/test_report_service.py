"""
Tests for Report Service
"""

import pytest
from datetime import timedelta

from errors import ErrorKind, StorageUnavailable
from services.medicine_service import MedicineService
from services.report_service import ReportService
from stores.memory import InMemoryRecordStore


@pytest.fixture
def medicines(context):
    return MedicineService(context)


@pytest.fixture
def reports(context, medicines):
    return ReportService(context, medicines)


class UnreachableStore(InMemoryRecordStore):
    def query(self, collection, predicate):
        raise StorageUnavailable("store offline")


class TestWeeklyReport:
    """Tests for caregiver weekly reports"""

    @pytest.mark.integration
    def test_report_for_caregiver_only(self, reports, medicines, caregiver, other_caregiver, medicine_data, clock):
        mine = medicines.create_medicine(caregiver, {**medicine_data, "dose_time": "07:00"}).value
        medicines.create_medicine(other_caregiver, {**medicine_data, "dose_time": "07:00"})
        clock.advance(hours=2)

        report = reports.weekly_report(caregiver.id).value

        assert report.total_medicines == 1
        assert report.missed_count == 1
        assert report.missed_medicine_ids == [mine.id]
        assert report.generated_at == clock.now()

    @pytest.mark.integration
    def test_taken_after_record(self, reports, medicines, caregiver, medicine_data, clock):
        medicine = medicines.create_medicine(caregiver, {**medicine_data, "dose_time": "07:00"}).value
        medicines.record_taken(medicine.id)
        clock.advance(hours=2)

        report = reports.weekly_report(caregiver.id).value

        assert report.taken_count == 1
        assert report.missed_count == 0

    def test_explicit_moment(self, reports, medicines, caregiver, medicine_data, clock):
        medicines.create_medicine(caregiver, medicine_data)
        later = clock.now() + timedelta(days=10)

        report = reports.weekly_report(caregiver.id, now=later).value

        assert report.total_medicines == 1
        assert report.missed_count == 0

    def test_unknown_caregiver_is_empty(self, reports):
        report = reports.weekly_report("nobody").value
        assert report.total_medicines == 0

    def test_storage_unavailable_surfaced(self, context):
        context.record_store = UnreachableStore()
        reports = ReportService(context, MedicineService(context))

        result = reports.weekly_report("caregiver-1")

        assert result.kind == ErrorKind.STORAGE_UNAVAILABLE
