"""
Tests for the JSON file backend

Each test works in its own tmp_path; the user's ledger is never touched.
"""

import json

import pytest

from conftest import make_transaction
from ledger.services.storage import (
    Collection,
    JsonFileBackend,
    RecordStore,
    SerializationError,
    StorageUnavailableError,
)


class TestJsonFileBackend:
    """Tests for reading and writing the ledger file."""

    def test_missing_file_reads_none(self, tmp_path):
        """Test that a fresh path behaves like an empty medium."""
        backend = JsonFileBackend(tmp_path / "ledger.json")
        assert backend.read("anything") is None
        assert backend.contains("anything") is False

    def test_write_creates_file_and_parents(self, tmp_path):
        """Test that the data directory is created on first write."""
        path = tmp_path / "nested" / "dir" / "ledger.json"
        backend = JsonFileBackend(path)
        backend.write("daily-expenses-loans", "[]")

        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == {"daily-expenses-loans": "[]"}
        assert not (path.parent / "ledger.json.tmp").exists()

    def test_data_survives_reopen(self, tmp_path):
        """Test that a second backend on the same file sees the writes."""
        path = tmp_path / "ledger.json"
        JsonFileBackend(path).write_many({"a": "[1]", "b": "[2]"})

        reopened = JsonFileBackend(path)
        assert reopened.read("a") == "[1]"
        assert reopened.read("b") == "[2]"

    def test_write_keeps_other_keys(self, tmp_path):
        """Test that writing one key does not drop the others."""
        backend = JsonFileBackend(tmp_path / "ledger.json")
        backend.write("a", "[1]")
        backend.write("b", "[2]")
        backend.write("a", "[3]")

        assert backend.read("a") == "[3]"
        assert backend.read("b") == "[2]"

    def test_invalid_json_file_raises(self, tmp_path):
        """Test that a corrupt file is reported, not replaced."""
        path = tmp_path / "ledger.json"
        path.write_text("{broken", encoding="utf-8")

        with pytest.raises(SerializationError):
            JsonFileBackend(path).read("a")

    def test_non_string_documents_rejected(self, tmp_path):
        """Test that the file must map keys to text documents."""
        path = tmp_path / "ledger.json"
        path.write_text(json.dumps({"a": [1, 2]}), encoding="utf-8")

        with pytest.raises(SerializationError):
            JsonFileBackend(path).read("a")

    def test_unwritable_location_raises(self, tmp_path):
        """Test that write errors surface as StorageUnavailableError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")
        backend = JsonFileBackend(blocker / "ledger.json", retry_attempts=1)

        with pytest.raises(StorageUnavailableError):
            backend.write("a", "[]")
        assert backend.read("a") is None

    def test_failed_replace_leaves_no_temp_file(self, tmp_path, monkeypatch):
        """Test that the temporary file is removed when the swap fails."""
        path = tmp_path / "ledger.json"
        backend = JsonFileBackend(path, retry_attempts=1)
        backend.write("a", "[]")

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("ledger.services.storage.backends.os.replace", failing_replace)

        with pytest.raises(StorageUnavailableError):
            backend.write("b", "[]")
        assert not (tmp_path / "ledger.json.tmp").exists()
        assert json.loads(path.read_text(encoding="utf-8")) == {"a": "[]"}
        assert backend.read("b") is None


class TestStoreOnFile:
    """Tests for RecordStore over a real file."""

    def test_store_persists_across_instances(self, tmp_path):
        """Test that records written by one store are read by the next."""
        path = tmp_path / "ledger.json"
        store = RecordStore.open_or_create(JsonFileBackend(path))
        store.upsert(Collection.TRANSACTIONS, make_transaction(id="a"))

        reopened = RecordStore.open_or_create(JsonFileBackend(path))
        assert [t.id for t in reopened.get_all(Collection.TRANSACTIONS)] == ["a"]
        assert len(reopened.get_all(Collection.CATEGORIES)) == 10

    def test_corrupt_file_is_not_overwritten(self, tmp_path):
        """Test that opening a corrupt file degrades without losing it."""
        path = tmp_path / "ledger.json"
        path.write_text("{broken", encoding="utf-8")

        store = RecordStore.open_or_create(JsonFileBackend(path))
        assert store.get_all(Collection.TRANSACTIONS) == []
        assert store.upsert(Collection.TRANSACTIONS, make_transaction(id="a")) is False
        assert path.read_text(encoding="utf-8") == "{broken"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
