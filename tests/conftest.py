"""
Shared fixtures.

No test touches the user's real ledger file: stores run on
InMemoryBackend, file backend tests use tmp_path.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest

from ledger.audit import AuditLogger
from ledger.models.audit import AuditEvent, AuditEventType
from ledger.models.records import Transaction, TransactionKind
from ledger.services.storage import (
    InMemoryBackend,
    RecordStore,
    StorageBackend,
    StorageUnavailableError,
)


class RecordingAuditLogger(AuditLogger):
    """Keeps events in memory so tests can assert on them."""

    def __init__(self):
        super().__init__()
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    def of_type(self, event_type: AuditEventType) -> list[AuditEvent]:
        return [e for e in self.events if e.event_type == event_type]


class FlakyBackend(StorageBackend):
    """In-memory backend whose reads or writes can be switched to fail."""

    def __init__(self):
        self.inner = InMemoryBackend()
        self.fail_reads = False
        self.fail_writes = False

    def read(self, key: str) -> Optional[str]:
        if self.fail_reads:
            raise StorageUnavailableError("medium unavailable")
        return self.inner.read(key)

    def write(self, key: str, raw: str) -> None:
        if self.fail_writes:
            raise StorageUnavailableError("quota exceeded")
        self.inner.write(key, raw)

    def write_many(self, documents) -> None:
        if self.fail_writes:
            raise StorageUnavailableError("quota exceeded")
        self.inner.write_many(documents)


def make_transaction(
    id: str = "t1",
    kind: TransactionKind = TransactionKind.EXPENSE,
    amount: str = "10",
    category: str = "Food & Dining",
    description: str = "Lunch",
    on: date = date(2024, 5, 15),
    shop: Optional[str] = None,
    **extra,
) -> Transaction:
    return Transaction(
        id=id,
        kind=kind,
        amount=Decimal(amount),
        category=category,
        description=description,
        date=on,
        shop=shop,
        **extra,
    )


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def backend() -> InMemoryBackend:
    return InMemoryBackend()


@pytest.fixture
def store(backend, audit_logger) -> RecordStore:
    return RecordStore(backend, audit_logger=audit_logger)


@pytest.fixture
def flaky_backend() -> FlakyBackend:
    return FlakyBackend()


@pytest.fixture
def flaky_store(flaky_backend, audit_logger) -> RecordStore:
    return RecordStore(flaky_backend, audit_logger=audit_logger)
