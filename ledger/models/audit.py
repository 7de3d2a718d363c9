"""
Audit Models for Daily Ledger

Every store mutation and every degraded storage operation is logged.
This provides:
1. Traceability of what changed in the ledger
2. Diagnosis of storage failures that were swallowed to keep the caller alive

DESIGN DECISION: Storage failures are recovered locally, so the audit
trail is the ONLY place they become visible. Never drop them silently.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Record lifecycle
    RECORD_UPSERTED = "record_upserted"
    RECORD_DELETED = "record_deleted"
    COLLECTION_SEEDED = "collection_seeded"

    # Storage medium
    STORAGE_READ_FAILED = "storage_read_failed"
    STORAGE_WRITE_FAILED = "storage_write_failed"

    # Snapshots
    SNAPSHOT_EXPORTED = "snapshot_exported"
    SNAPSHOT_IMPORTED = "snapshot_imported"
    SNAPSHOT_IMPORT_FAILED = "snapshot_import_failed"

    # Entry flows
    VALIDATION_FAILED = "validation_failed"
    TRANSACTION_SUBMITTED = "transaction_submitted"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What is this about? entity_type is the collection name.
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.record_upserted("transactions", "lx3k9...", replaced=False)
        event = AuditEventBuilder.storage_write_failed("daily-expenses-shops", str(exc))
    """

    @staticmethod
    def record_upserted(
        collection: str,
        record_id: str,
        replaced: bool,
    ) -> AuditEvent:
        action = "replaced" if replaced else "added"
        return AuditEvent(
            event_type=AuditEventType.RECORD_UPSERTED,
            entity_type=collection,
            entity_id=record_id,
            description=f"Record {action} in {collection}",
            details={"replaced": replaced},
        )

    @staticmethod
    def record_deleted(collection: str, record_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            entity_type=collection,
            entity_id=record_id,
            description=f"Record deleted from {collection}",
        )

    @staticmethod
    def collection_seeded(collection: str, record_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_SEEDED,
            entity_type=collection,
            description=f"Seeded {collection} with defaults",
            details={"record_count": record_count},
        )

    @staticmethod
    def storage_read_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_READ_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not read {key}; using default value",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def storage_write_failed(key: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_WRITE_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Could not write {key}; change dropped",
            details={"key": key},
            error_message=error_message,
        )

    @staticmethod
    def snapshot_exported(section_counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_EXPORTED,
            description="Snapshot exported",
            details={"sections": section_counts},
        )

    @staticmethod
    def snapshot_imported(sections: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_IMPORTED,
            description=f"Snapshot imported ({len(sections)} sections replaced)",
            details={"sections": sections},
        )

    @staticmethod
    def snapshot_import_failed(error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            description="Snapshot rejected; store left unchanged",
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(
        record_id: Optional[str],
        errors: dict[str, str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="transactions",
            entity_id=record_id,
            description=f"Transaction rejected with {len(errors)} field errors",
            details={"errors": errors},
        )

    @staticmethod
    def transaction_submitted(
        record_id: str,
        kind: str,
        amount: str,
        persisted: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_SUBMITTED,
            severity=AuditSeverity.INFO if persisted else AuditSeverity.ERROR,
            entity_type="transactions",
            entity_id=record_id,
            description=f"{kind.capitalize()} of {amount} submitted",
            details={"kind": kind, "amount": amount, "persisted": persisted},
        )
