"""
Tests for Record and Blob Stores
Both backends are checked against the same contract
"""

import pytest
from unittest.mock import patch
from sqlalchemy.exc import OperationalError

from errors import NotFound, StorageUnavailable
from stores.memory import InMemoryRecordStore, InMemoryBlobStore
from stores.sql import SqlRecordStore, SqlBlobStore


# ==================== FIXTURES ====================

@pytest.fixture(params=["memory", "sql"])
def record_store(request):
    if request.param == "memory":
        return InMemoryRecordStore()
    return SqlRecordStore(request.getfixturevalue("session_factory"))


@pytest.fixture(params=["memory", "sql"])
def blob_store(request):
    if request.param == "memory":
        return InMemoryBlobStore()
    return SqlBlobStore(request.getfixturevalue("session_factory"))


# ==================== RECORD STORE TESTS ====================

class TestRecordStore:
    """Contract tests for record stores"""

    @pytest.mark.database
    def test_put_then_get(self, record_store):
        record_store.put("medicines", {"id": "m1", "name": "Metformin", "stock": 3})

        assert record_store.get("medicines", "m1") == {"id": "m1", "name": "Metformin", "stock": 3}

    @pytest.mark.database
    def test_get_returns_snapshot(self, record_store):
        record_store.put("medicines", {"id": "m1", "tags": ["a"]})

        snapshot = record_store.get("medicines", "m1")
        snapshot["tags"].append("b")

        assert record_store.get("medicines", "m1")["tags"] == ["a"]

    @pytest.mark.database
    def test_put_replaces_whole_record(self, record_store):
        record_store.put("medicines", {"id": "m1", "name": "A", "stock": 3})
        record_store.put("medicines", {"id": "m1", "name": "B"})

        assert record_store.get("medicines", "m1") == {"id": "m1", "name": "B"}

    @pytest.mark.database
    def test_query_in_insertion_order(self, record_store):
        for record_id, owner in [("m1", "a"), ("m2", "b"), ("m3", "a")]:
            record_store.put("medicines", {"id": record_id, "owner": owner})
        record_store.put("medicines", {"id": "m1", "owner": "a", "touched": True})

        found = record_store.query("medicines", lambda r: r["owner"] == "a")

        assert [r["id"] for r in found] == ["m1", "m3"]

    @pytest.mark.database
    def test_collections_are_separate(self, record_store):
        record_store.put("medicines", {"id": "x"})

        assert record_store.query("other", lambda r: True) == []
        with pytest.raises(NotFound):
            record_store.get("other", "x")

    @pytest.mark.database
    def test_delete(self, record_store):
        record_store.put("medicines", {"id": "m1"})
        record_store.delete("medicines", "m1")

        with pytest.raises(NotFound):
            record_store.get("medicines", "m1")
        with pytest.raises(NotFound):
            record_store.delete("medicines", "m1")

    def test_record_requires_id(self, record_store):
        with pytest.raises(ValueError):
            record_store.put("medicines", {"name": "no id"})


# ==================== BLOB STORE TESTS ====================

class TestBlobStore:
    """Contract tests for blob stores"""

    @pytest.mark.database
    def test_round_trip_and_delete(self, blob_store):
        ref = blob_store.put(b"\x00voice\xff")

        assert blob_store.get(ref) == b"\x00voice\xff"

        blob_store.delete(ref)
        with pytest.raises(NotFound):
            blob_store.get(ref)

    @pytest.mark.database
    def test_refs_are_unique(self, blob_store):
        assert blob_store.put(b"a") != blob_store.put(b"a")

    @pytest.mark.database
    def test_delete_missing(self, blob_store):
        with pytest.raises(NotFound):
            blob_store.delete("missing")


# ==================== FAILURE TRANSLATION ====================

class TestSqlFailures:

    @pytest.mark.database
    def test_driver_error_becomes_storage_unavailable(self, session_factory):
        store = SqlRecordStore(session_factory)
        error = OperationalError("SELECT", {}, Exception("database is locked"))

        with patch("stores.sql.session_scope", side_effect=error):
            with pytest.raises(StorageUnavailable):
                store.get("medicines", "m1")

    @pytest.mark.database
    def test_missing_tables_become_storage_unavailable(self, sql_engine):
        from database import create_session_factory, drop_db

        drop_db(sql_engine)
        store = SqlBlobStore(create_session_factory(sql_engine))

        with pytest.raises(StorageUnavailable):
            store.put(b"voice")
