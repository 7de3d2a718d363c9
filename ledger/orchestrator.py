"""
Main Orchestrator for Daily Ledger

Ties the store, validation and analytics together for the
presentation layer:
1. Transaction entry (draft -> validate -> save -> refresh caches)
2. Component wiring from configuration

DESIGN DECISION: The orchestrator enforces the boundaries:
- No transaction is stored without passing validation
- Cached aggregates touched by a saved or deleted transaction are refreshed
- Every step is audited
"""

from typing import Optional

from ledger.analytics.aggregates import refresh_budget, refresh_shop
from ledger.audit import AuditLogger, configure_logging
from ledger.config import Settings, get_settings
from ledger.models.audit import AuditEventBuilder
from ledger.models.records import Transaction, TransactionDraft
from ledger.models.validation import ValidationResult
from ledger.services.identity import new_id
from ledger.services.storage import (
    Collection,
    InMemoryBackend,
    JsonFileBackend,
    RecordStore,
    StorageBackend,
)
from ledger.validation import TransactionValidator


class TransactionEntryFlow:
    """
    Orchestrates adding, editing or deleting a transaction.

    Flow:
    1. Validate the draft against the stored categories
    2. Build the Transaction (new id unless the draft carries one)
    3. Upsert it
    4. Refresh the shops and budgets of both the old and new version
    """

    def __init__(
        self,
        store: RecordStore,
        audit_logger: Optional[AuditLogger] = None,
        refresh_caches: bool = True,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._refresh_caches = refresh_caches

    def submit(
        self,
        draft: TransactionDraft,
    ) -> tuple[Optional[Transaction], ValidationResult]:
        """
        Validate and save a transaction draft.

        Returns:
            (transaction, validation_result)

        transaction is None if validation failed or the write was
        dropped by the store; check validation_result.is_valid to
        tell the two apart.
        """
        categories = self._store.get_all(Collection.CATEGORIES)
        result = TransactionValidator(categories).validate(draft)

        if not result.is_valid:
            self._audit_logger.log(AuditEventBuilder.validation_failed(
                record_id=draft.id,
                errors=result.errors_by_field(),
            ))
            return None, result

        transaction = draft.to_transaction(new_id())
        previous = self._store.get(Collection.TRANSACTIONS, transaction.id)
        persisted = self._store.upsert(Collection.TRANSACTIONS, transaction)

        self._audit_logger.log(AuditEventBuilder.transaction_submitted(
            record_id=transaction.id,
            kind=transaction.kind.value,
            amount=str(transaction.amount),
            persisted=persisted,
        ))

        if not persisted:
            return None, result

        if self._refresh_caches:
            self.refresh_affected(transaction, previous)

        return transaction, result

    def delete(self, record_id: str) -> bool:
        """
        Delete a transaction and refresh the caches it counted in.

        Returns:
            True if the transaction was removed
        """
        removed = self._store.get(Collection.TRANSACTIONS, record_id)
        if removed is None:
            return False
        if not self._store.delete(Collection.TRANSACTIONS, record_id):
            return False

        if self._refresh_caches:
            self.refresh_affected(removed)
        return True

    def refresh_affected(self, *touched: Optional[Transaction]) -> None:
        """
        Recompute cached totals on every shop and budget the given
        transactions touch.

        Pass both the old and the new version of an edited transaction
        so the shop or category it moved away from is refreshed too.
        """
        touched = [t for t in touched if t is not None]
        shop_names = {t.shop for t in touched if t.shop}
        categories = {t.category for t in touched}
        transactions = self._store.get_all(Collection.TRANSACTIONS)

        if shop_names:
            for shop in self._store.get_all(Collection.SHOPS):
                if shop.name in shop_names:
                    self._store.upsert(Collection.SHOPS, refresh_shop(shop, transactions))

        for budget in self._store.get_all(Collection.BUDGETS):
            if budget.category in categories:
                self._store.upsert(Collection.BUDGETS, refresh_budget(budget, transactions))


def create_backend(settings: Optional[Settings] = None) -> StorageBackend:
    """Build the storage backend named in configuration."""
    storage = (settings or get_settings()).storage
    if storage.backend == "memory":
        return InMemoryBackend()
    return JsonFileBackend(
        storage.data_path,
        retry_attempts=storage.write_retry_attempts,
    )


def create_app_components(
    settings: Optional[Settings] = None,
    backend: Optional[StorageBackend] = None,
) -> tuple[RecordStore, TransactionEntryFlow]:
    """
    Factory function to create all application components.

    Args:
        settings: Configuration; defaults to get_settings()
        backend: Use this backend instead of the configured one

    Returns:
        (store, transaction_entry_flow)
    """
    settings = settings or get_settings()
    configure_logging(settings.logging)

    audit_logger = AuditLogger()
    store = RecordStore.open_or_create(
        backend or create_backend(settings),
        audit_logger=audit_logger,
        key_prefix=settings.storage.key_prefix,
    )
    entry_flow = TransactionEntryFlow(store, audit_logger=audit_logger)

    return store, entry_flow
