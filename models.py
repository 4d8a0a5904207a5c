"""
Database Models
SQLAlchemy ORM rows backing the generic record store and the blob store
"""

from sqlalchemy import Column, Integer, String, DateTime, LargeBinary, JSON, UniqueConstraint, Index
from datetime import datetime

from database import Base


class RecordRow(Base):
    """One record snapshot in a named collection"""
    __tablename__ = "records"

    # Autoincrement sequence keeps insertion order stable across updates
    seq = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(100), nullable=False)
    record_id = Column(String(64), nullable=False)
    data = Column(JSON, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("collection", "record_id", name="uq_record_collection_id"),
        Index("ix_records_collection", "collection"),
    )

    def __repr__(self):
        return f"<RecordRow {self.collection}/{self.record_id}>"


class BlobRow(Base):
    """Opaque binary payload, e.g. recorded voice instructions"""
    __tablename__ = "blobs"

    id = Column(String(64), primary_key=True)
    data = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<BlobRow {self.id} ({len(self.data or b'')} bytes)>"
