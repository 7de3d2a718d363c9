"""
Storage Services Package

Provides the abstract backend interface, concrete backends, the typed
record store built on top of them, and the snapshot codec.
"""

from ledger.services.storage.interface import (
    SerializationError,
    SnapshotError,
    StorageBackend,
    StorageError,
    StorageUnavailableError,
)
from ledger.services.storage.backends import InMemoryBackend, JsonFileBackend
from ledger.services.storage.registry import (
    COLLECTION_SPECS,
    Collection,
    CollectionSpec,
)
from ledger.services.storage.snapshot import (
    Snapshot,
    decode_snapshot,
    encode_snapshot,
)
from ledger.services.storage.store import RecordStore

__all__ = [
    # Interface
    "StorageBackend",
    # Exceptions
    "SerializationError",
    "SnapshotError",
    "StorageError",
    "StorageUnavailableError",
    # Backends
    "InMemoryBackend",
    "JsonFileBackend",
    # Collections
    "COLLECTION_SPECS",
    "Collection",
    "CollectionSpec",
    # Snapshots
    "Snapshot",
    "decode_snapshot",
    "encode_snapshot",
    # Store
    "RecordStore",
]
