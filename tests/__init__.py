"""
MedicineReminder Test Suite
===========================

Test Structure:
- test_tools/: schedule resolver, inventory tracker, plan limiter, clock
- test_services/: adherence ledger, medicine and report services
- test_actions/: dose alert dispatcher
- test_stores/: in-memory and SQLAlchemy stores
- test_app.py: end-to-end scenarios through the composition root
- test_errors.py: error kinds and Ok/Err results
- conftest.py: Shared pytest fixtures

Running Tests:
    pytest
    pytest tests/test_tools/
    pytest -m "unit"
    pytest -m "integration"
"""

from datetime import date

# Test configuration
TEST_DATABASE_URL = "sqlite:///:memory:"

# 2024-05-06 is a Monday
MONDAY = date(2024, 5, 6)
TUESDAY = date(2024, 5, 7)
WEDNESDAY = date(2024, 5, 8)

__all__ = [
    "TEST_DATABASE_URL",
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
]
