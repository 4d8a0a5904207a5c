"""
Stores Package
Record and blob storage backends consumed by the engine
"""

from .base import RecordStore, BlobStore, Record, Predicate
from .memory import InMemoryRecordStore, InMemoryBlobStore
from .sql import SqlRecordStore, SqlBlobStore


__all__ = [
    "RecordStore",
    "BlobStore",
    "Record",
    "Predicate",
    "InMemoryRecordStore",
    "InMemoryBlobStore",
    "SqlRecordStore",
    "SqlBlobStore",
]
