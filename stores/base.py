"""
Storage Contracts
Protocols for the key-based record store and the blob store
"""

from typing import Any, Callable, Dict, List, Protocol


Record = Dict[str, Any]
Predicate = Callable[[Record], bool]


class RecordStore(Protocol):
    """
    Synchronous key-based record store.

    Records are plain dict snapshots carrying an "id" key. Reads return
    copies, writes replace the whole record (last writer wins). Missing ids
    raise NotFound; backend failures raise StorageUnavailable.
    """

    def get(self, collection: str, record_id: str) -> Record:
        ...

    def query(self, collection: str, predicate: Predicate) -> List[Record]:
        """Matching records in insertion order"""
        ...

    def put(self, collection: str, record: Record) -> Record:
        ...

    def delete(self, collection: str, record_id: str) -> None:
        ...


class BlobStore(Protocol):
    """Opaque binary storage addressed by a generated reference"""

    def put(self, data: bytes) -> str:
        ...

    def get(self, ref: str) -> bytes:
        ...

    def delete(self, ref: str) -> None:
        ...
