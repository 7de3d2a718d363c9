"""
Abstract Storage Interface

DESIGN DECISION: The store talks to the persistence medium only through
this interface. This allows us to:
1. Use a JSON file on disk for real use
2. Use in-memory storage for testing
3. Swap in another medium without touching the store or analytics

The interface is intentionally tiny: read a raw document by key,
write raw documents by key. Everything typed lives above it.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Optional


class StorageBackend(ABC):
    """
    Abstract key -> raw text storage.

    Any backend (JSON file, in-memory, ...) must implement these methods.
    Failures are raised as StorageError; the store decides how to degrade.
    """

    @abstractmethod
    def read(self, key: str) -> Optional[str]:
        """
        Read the raw document stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored text, or None if nothing was ever written

        Raises:
            StorageError: If the medium cannot be read
        """
        pass

    @abstractmethod
    def write(self, key: str, raw: str) -> None:
        """
        Store a raw document under a key, replacing any previous value.

        Raises:
            StorageError: If the write fails. A failed write leaves
                the previous value in place.
        """
        pass

    def write_many(self, documents: Mapping[str, str]) -> None:
        """
        Store several documents at once.

        Implementations must apply all of them or none. The default
        is only correct for backends whose single writes cannot fail
        part-way through a batch; override it otherwise.

        Raises:
            StorageError: If the batch fails
        """
        for key, raw in documents.items():
            self.write(key, raw)

    def contains(self, key: str) -> bool:
        """Check if anything was ever written under a key."""
        return self.read(key) is not None


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageUnavailableError(StorageError):
    """The persistence medium cannot be reached or opened."""
    pass


class SerializationError(StorageError):
    """A document could not be encoded or decoded."""
    pass


class SnapshotError(StorageError):
    """A snapshot document is malformed or contains invalid records."""
    pass
