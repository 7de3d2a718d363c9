"""
Integration tests for transaction entry and component wiring

Flows run against InMemoryBackend (or a tmp_path file) so nothing
outside the test touches disk.
"""

import pytest
from datetime import date
from decimal import Decimal

from ledger.config import Settings
from ledger.models.audit import AuditEventType
from ledger.models.records import Budget, Shop, TransactionDraft
from ledger.orchestrator import (
    TransactionEntryFlow,
    create_app_components,
    create_backend,
)
from ledger.services.storage import (
    Collection,
    InMemoryBackend,
    JsonFileBackend,
    RecordStore,
)


@pytest.fixture
def seeded_store(backend, audit_logger):
    store = RecordStore.open_or_create(backend, audit_logger=audit_logger)
    store.upsert(Collection.SHOPS, Shop(id="s1", name="Corner Cafe", category="Food & Dining"))
    store.upsert(Collection.BUDGETS, Budget(
        id="b1",
        category="Food & Dining",
        amount=Decimal("200"),
        start_date=date(2024, 5, 1),
        end_date=date(2024, 5, 31),
    ))
    return store


@pytest.fixture
def flow(seeded_store, audit_logger):
    return TransactionEntryFlow(seeded_store, audit_logger=audit_logger)


def _draft(**overrides):
    data = dict(
        amount=Decimal("12.50"),
        category="Food & Dining",
        description="Flat white and a croissant",
        date=date(2024, 5, 2),
        shop="Corner Cafe",
    )
    data.update(overrides)
    return TransactionDraft(**data)


class TestTransactionEntryFlow:
    """Tests for draft -> validate -> save -> refresh."""

    def test_submit_valid_draft(self, flow, seeded_store, audit_logger):
        """Test that a valid draft is stored with a fresh id."""
        transaction, result = flow.submit(_draft())

        assert result.is_valid is True
        assert transaction is not None
        assert transaction.id
        stored = seeded_store.get(Collection.TRANSACTIONS, transaction.id)
        assert stored.to_document() == transaction.to_document()

        events = audit_logger.of_type(AuditEventType.TRANSACTION_SUBMITTED)
        assert len(events) == 1
        assert events[0].details["persisted"] is True

    def test_submit_refreshes_shop_and_budget(self, flow, seeded_store):
        """Test that cached totals follow the new transaction."""
        flow.submit(_draft())
        flow.submit(_draft(amount=Decimal("7.50"), date=date(2024, 5, 6)))

        shop = seeded_store.get(Collection.SHOPS, "s1")
        assert shop.total_spent == Decimal("20.00")
        assert shop.last_visit == date(2024, 5, 6)
        assert seeded_store.get(Collection.BUDGETS, "b1").spent == Decimal("20.00")

    def test_refresh_can_be_disabled(self, seeded_store, audit_logger):
        """Test that caches stay untouched when refresh is off."""
        flow = TransactionEntryFlow(seeded_store, audit_logger=audit_logger, refresh_caches=False)
        flow.submit(_draft())
        assert seeded_store.get(Collection.SHOPS, "s1").total_spent == Decimal("0")

    def test_invalid_draft_not_stored(self, flow, seeded_store, audit_logger):
        """Test that validation failures never reach the store."""
        transaction, result = flow.submit(TransactionDraft())

        assert transaction is None
        assert result.is_valid is False
        assert seeded_store.get_all(Collection.TRANSACTIONS) == []

        event = audit_logger.of_type(AuditEventType.VALIDATION_FAILED)[0]
        assert event.details["errors"]["amount"] == "Amount must be greater than 0"

    def test_unknown_category_not_stored(self, flow, seeded_store):
        """Test that the category reference is checked against the store."""
        transaction, result = flow.submit(_draft(category="Pets"))
        assert transaction is None
        assert "category" in result.errors_by_field()
        assert seeded_store.get_all(Collection.TRANSACTIONS) == []

    def test_edit_keeps_identity(self, flow, seeded_store):
        """Test that resubmitting with an id replaces the record."""
        original, _ = flow.submit(_draft())
        edited, _ = flow.submit(_draft(id=original.id, amount=Decimal("15")))

        assert edited.id == original.id
        stored = seeded_store.get_all(Collection.TRANSACTIONS)
        assert len(stored) == 1
        assert stored[0].amount == Decimal("15")

    def test_write_failure_reported(self, flaky_backend, audit_logger):
        """Test that a dropped write returns no transaction but a valid result."""
        store = RecordStore.open_or_create(flaky_backend, audit_logger=audit_logger)
        flow = TransactionEntryFlow(store, audit_logger=audit_logger)
        flaky_backend.fail_writes = True

        transaction, result = flow.submit(_draft(shop=None))

        assert transaction is None
        assert result.is_valid is True
        event = audit_logger.of_type(AuditEventType.TRANSACTION_SUBMITTED)[0]
        assert event.details["persisted"] is False


class TestCacheInvalidation:
    """Tests that edits and deletes keep cached totals in step."""

    @pytest.fixture
    def store_with_two_of_each(self, seeded_store):
        seeded_store.upsert(Collection.SHOPS, Shop(id="s2", name="Bakery", category="Food & Dining"))
        seeded_store.upsert(Collection.BUDGETS, Budget(
            id="b2",
            category="Shopping",
            amount=Decimal("300"),
            start_date=date(2024, 5, 1),
            end_date=date(2024, 5, 31),
        ))
        return seeded_store

    def test_edit_moving_shop_refreshes_old_shop(self, store_with_two_of_each, audit_logger):
        """Test that the shop a transaction left no longer counts it."""
        store = store_with_two_of_each
        flow = TransactionEntryFlow(store, audit_logger=audit_logger)

        original, _ = flow.submit(_draft(amount=Decimal("10")))
        flow.submit(_draft(id=original.id, amount=Decimal("10"), shop="Bakery"))

        old_shop = store.get(Collection.SHOPS, "s1")
        new_shop = store.get(Collection.SHOPS, "s2")
        assert old_shop.total_spent == Decimal("0")
        assert old_shop.last_visit is None
        assert new_shop.total_spent == Decimal("10")
        assert new_shop.last_visit == date(2024, 5, 2)

    def test_edit_moving_category_refreshes_old_budget(self, store_with_two_of_each, audit_logger):
        """Test that the budget of the old category drops the amount."""
        store = store_with_two_of_each
        flow = TransactionEntryFlow(store, audit_logger=audit_logger)

        original, _ = flow.submit(_draft(amount=Decimal("40")))
        flow.submit(_draft(id=original.id, amount=Decimal("25"), category="Shopping"))

        assert store.get(Collection.BUDGETS, "b1").spent == Decimal("0")
        assert store.get(Collection.BUDGETS, "b2").spent == Decimal("25")

    def test_delete_refreshes_caches(self, flow, seeded_store):
        """Test that deleting a transaction removes it from shop and budget totals."""
        kept, _ = flow.submit(_draft(amount=Decimal("5"), date=date(2024, 5, 1)))
        removed, _ = flow.submit(_draft(amount=Decimal("15"), date=date(2024, 5, 9)))

        assert flow.delete(removed.id) is True

        shop = seeded_store.get(Collection.SHOPS, "s1")
        assert shop.total_spent == Decimal("5")
        assert shop.last_visit == date(2024, 5, 1)
        assert seeded_store.get(Collection.BUDGETS, "b1").spent == Decimal("5")
        assert [t.id for t in seeded_store.get_all(Collection.TRANSACTIONS)] == [kept.id]

    def test_delete_unknown_id(self, flow):
        """Test that deleting a missing transaction is a no-op."""
        assert flow.delete("missing") is False


class TestComponentFactory:
    """Tests for wiring components from configuration."""

    def test_memory_backend_from_env(self, monkeypatch):
        """Test LEDGER_STORAGE_BACKEND=memory."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "memory")
        assert isinstance(create_backend(Settings()), InMemoryBackend)

    def test_file_backend_from_env(self, monkeypatch, tmp_path):
        """Test the file backend and its configured path."""
        path = tmp_path / "ledger.json"
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "file")
        monkeypatch.setenv("LEDGER_STORAGE_DATA_PATH", str(path))

        backend = create_backend(Settings())
        assert isinstance(backend, JsonFileBackend)
        assert backend.path == path

    def test_create_app_components(self, monkeypatch, tmp_path):
        """Test that the factory opens a seeded store and a working flow."""
        path = tmp_path / "ledger.json"
        monkeypatch.setenv("LEDGER_STORAGE_DATA_PATH", str(path))
        monkeypatch.setenv("LEDGER_LOG_JSON_OUTPUT", "false")

        store, flow = create_app_components(settings=Settings())

        assert path.exists()
        assert len(store.get_all(Collection.CATEGORIES)) == 10
        transaction, result = flow.submit(_draft(shop=None))
        assert result.is_valid is True
        assert store.get(Collection.TRANSACTIONS, transaction.id) is not None

    def test_explicit_backend_wins(self, monkeypatch):
        """Test that a passed backend replaces the configured one."""
        monkeypatch.setenv("LEDGER_STORAGE_BACKEND", "file")
        backend = InMemoryBackend()

        store, _ = create_app_components(settings=Settings(), backend=backend)

        assert "daily-expenses-categories" in backend.keys()
        assert len(store.get_all(Collection.CATEGORIES)) == 10


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
