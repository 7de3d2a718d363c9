"""
Storage Backend Implementations

InMemoryBackend: a dict, for tests and throwaway sessions.
JsonFileBackend: every key in one JSON document on disk.

TRADEOFFS of the single-file layout:
- Every write rewrites the whole file (fine for one person's ledger)
- A batch of keys lands in one os.replace, so write_many is atomic
- No concurrent writers; the store assumes it is the only one
"""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Optional, Union

import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.services.storage.interface import (
    SerializationError,
    StorageBackend,
    StorageUnavailableError,
)


logger = structlog.get_logger(__name__)


class InMemoryBackend(StorageBackend):
    """Keeps documents in a dict for the lifetime of the object."""

    def __init__(self, documents: Optional[Mapping[str, str]] = None):
        self._documents: dict[str, str] = dict(documents or {})

    def read(self, key: str) -> Optional[str]:
        return self._documents.get(key)

    def write(self, key: str, raw: str) -> None:
        self._documents[key] = raw

    def write_many(self, documents: Mapping[str, str]) -> None:
        self._documents.update(documents)

    def keys(self) -> list[str]:
        return list(self._documents)


class JsonFileBackend(StorageBackend):
    """
    Stores all keys in a single JSON object file: {key: raw_document}.

    The file is loaded lazily on first access and cached afterwards.
    Writes go to a temporary file which then replaces the original,
    so readers never see a half-written file.
    """

    def __init__(
        self,
        path: Union[str, Path],
        retry_attempts: int = 3,
    ):
        self._path = Path(path)
        self._retry_attempts = retry_attempts
        self._documents: Optional[dict[str, str]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        """Read the file once; later calls use the cache."""
        if self._documents is not None:
            return self._documents

        if not self._path.exists():
            self._documents = {}
            return self._documents

        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageUnavailableError(f"Failed to read {self._path}: {e}") from e

        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as e:
            raise SerializationError(f"{self._path} is not valid JSON: {e}") from e

        if not isinstance(data, dict) or not all(
            isinstance(value, str) for value in data.values()
        ):
            raise SerializationError(
                f"{self._path} must contain an object of string documents"
            )

        self._documents = data
        return self._documents

    def _write_file(self, documents: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            with tmp_path.open("w", encoding="utf-8") as handle:
                json.dump(documents, handle, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self._path)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

    def _flush(self, documents: dict[str, str]) -> None:
        """Write the whole document set, retrying transient OS errors."""
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self._retry_attempts),
                wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
                retry=retry_if_exception_type(OSError),
                reraise=True,
            ):
                with attempt:
                    self._write_file(documents)
        except OSError as e:
            logger.warning(
                "file_backend_write_failed",
                path=str(self._path),
                attempts=self._retry_attempts,
                error=str(e),
            )
            raise StorageUnavailableError(f"Failed to write {self._path}: {e}") from e

        self._documents = documents

    def read(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def write(self, key: str, raw: str) -> None:
        self.write_many({key: raw})

    def write_many(self, documents: Mapping[str, str]) -> None:
        updated = dict(self._load())
        updated.update(documents)
        self._flush(updated)
