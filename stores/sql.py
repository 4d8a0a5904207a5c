"""
SQL Stores
SQLAlchemy backed record and blob stores
"""

import copy
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Generator, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from database import session_scope
from errors import NotFound, StorageUnavailable
from models import RecordRow, BlobRow
from stores.base import Record, Predicate


logger = logging.getLogger(__name__)


@contextmanager
def _guarded_session(session_factory: sessionmaker, operation: str) -> Generator[Session, None, None]:
    """Open a unit of work and surface driver failures as StorageUnavailable"""
    try:
        with session_scope(session_factory) as session:
            yield session
    except SQLAlchemyError as e:
        logger.error(f"Storage failure during {operation}: {e}")
        raise StorageUnavailable(f"{operation} failed: {e.__class__.__name__}") from e


class SqlRecordStore:
    """
    Record store persisting JSON snapshots in the records table.

    Records must be JSON serializable. Query predicates run in Python over
    the collection, which is adequate for a single caregiver's data set.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _find(self, session: Session, collection: str, record_id: str) -> RecordRow:
        return session.query(RecordRow).filter(
            RecordRow.collection == collection,
            RecordRow.record_id == record_id
        ).first()

    def get(self, collection: str, record_id: str) -> Record:
        with _guarded_session(self.session_factory, "get") as session:
            row = self._find(session, collection, record_id)
            if row is None:
                raise NotFound(f"{collection}/{record_id} not found")
            return copy.deepcopy(row.data)

    def query(self, collection: str, predicate: Predicate) -> List[Record]:
        with _guarded_session(self.session_factory, "query") as session:
            rows = session.query(RecordRow).filter(
                RecordRow.collection == collection
            ).order_by(RecordRow.seq).all()
            return [copy.deepcopy(row.data) for row in rows if predicate(row.data)]

    def put(self, collection: str, record: Record) -> Record:
        if "id" not in record:
            raise ValueError("record must carry an 'id'")
        snapshot = copy.deepcopy(record)

        with _guarded_session(self.session_factory, "put") as session:
            row = self._find(session, collection, snapshot["id"])
            if row is None:
                session.add(RecordRow(
                    collection=collection,
                    record_id=snapshot["id"],
                    data=snapshot
                ))
            else:
                row.data = snapshot
                row.updated_at = datetime.utcnow()
        return copy.deepcopy(snapshot)

    def delete(self, collection: str, record_id: str) -> None:
        with _guarded_session(self.session_factory, "delete") as session:
            row = self._find(session, collection, record_id)
            if row is None:
                raise NotFound(f"{collection}/{record_id} not found")
            session.delete(row)


class SqlBlobStore:
    """Blob store persisting binary payloads in the blobs table"""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def put(self, data: bytes) -> str:
        ref = uuid.uuid4().hex
        with _guarded_session(self.session_factory, "blob put") as session:
            session.add(BlobRow(id=ref, data=bytes(data)))
        logger.debug(f"Stored blob {ref} ({len(data)} bytes)")
        return ref

    def get(self, ref: str) -> bytes:
        with _guarded_session(self.session_factory, "blob get") as session:
            row = session.get(BlobRow, ref)
            if row is None:
                raise NotFound(f"blob {ref} not found")
            return bytes(row.data)

    def delete(self, ref: str) -> None:
        with _guarded_session(self.session_factory, "blob delete") as session:
            row = session.get(BlobRow, ref)
            if row is None:
                raise NotFound(f"blob {ref} not found")
            session.delete(row)
