"""Services package."""

from ledger.services.identity import new_id
from ledger.services.storage import (
    Collection,
    InMemoryBackend,
    JsonFileBackend,
    RecordStore,
    SerializationError,
    SnapshotError,
    StorageBackend,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Identity
    "new_id",
    # Storage services
    "Collection",
    "InMemoryBackend",
    "JsonFileBackend",
    "RecordStore",
    "SerializationError",
    "SnapshotError",
    "StorageBackend",
    "StorageError",
    "StorageUnavailableError",
]
