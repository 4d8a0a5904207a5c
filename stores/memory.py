"""
In-Memory Stores
Dictionary backed record and blob stores for tests and single-process hosts
"""

import copy
import logging
import uuid
from typing import Dict, List

from errors import NotFound
from stores.base import Record, Predicate


logger = logging.getLogger(__name__)


class InMemoryRecordStore:
    """Record store keeping snapshots in insertion-ordered dicts"""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Record]] = {}

    def get(self, collection: str, record_id: str) -> Record:
        records = self._collections.get(collection, {})
        if record_id not in records:
            raise NotFound(f"{collection}/{record_id} not found")
        return copy.deepcopy(records[record_id])

    def query(self, collection: str, predicate: Predicate) -> List[Record]:
        records = self._collections.get(collection, {})
        return [copy.deepcopy(r) for r in records.values() if predicate(r)]

    def put(self, collection: str, record: Record) -> Record:
        if "id" not in record:
            raise ValueError("record must carry an 'id'")
        snapshot = copy.deepcopy(record)
        # Replacing an existing key keeps its original position
        self._collections.setdefault(collection, {})[snapshot["id"]] = snapshot
        return copy.deepcopy(snapshot)

    def delete(self, collection: str, record_id: str) -> None:
        records = self._collections.get(collection, {})
        if record_id not in records:
            raise NotFound(f"{collection}/{record_id} not found")
        del records[record_id]

    def count(self, collection: str) -> int:
        return len(self._collections.get(collection, {}))


class InMemoryBlobStore:
    """Blob store for voice recordings held in process memory"""

    def __init__(self):
        self._blobs: Dict[str, bytes] = {}

    def put(self, data: bytes) -> str:
        ref = uuid.uuid4().hex
        self._blobs[ref] = bytes(data)
        logger.debug(f"Stored blob {ref} ({len(data)} bytes)")
        return ref

    def get(self, ref: str) -> bytes:
        if ref not in self._blobs:
            raise NotFound(f"blob {ref} not found")
        return self._blobs[ref]

    def delete(self, ref: str) -> None:
        if ref not in self._blobs:
            raise NotFound(f"blob {ref} not found")
        del self._blobs[ref]

    def __contains__(self, ref: str) -> bool:
        return ref in self._blobs

    def __len__(self) -> int:
        return len(self._blobs)
