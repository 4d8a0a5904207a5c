"""
Engine Context
Collaborators handed explicitly to every service instead of module globals
"""

from dataclasses import dataclass, field

from stores.base import RecordStore, BlobStore
from stores.memory import InMemoryRecordStore, InMemoryBlobStore
from tools.clock import Clock, SystemClock


@dataclass
class EngineContext:
    """Record store, blob store and clock shared by one engine instance"""
    record_store: RecordStore = field(default_factory=InMemoryRecordStore)
    blob_store: BlobStore = field(default_factory=InMemoryBlobStore)
    clock: Clock = field(default_factory=SystemClock)
