"""
Snapshot Import/Export Codec

A snapshot is the whole store as one JSON document:

    {
      "transactions": [...], "categories": [...], "shops": [...],
      "savingsGoals": [...], "budgets": [...], "groceryLists": [...],
      "loans": [...], "settings": {...}, "exportDate": "..."
    }

Any subset of sections may be present on import. A missing or null
section means "leave that collection alone"; an empty list means
"replace it with nothing". Unknown keys are ignored.

DESIGN DECISION: Decoding validates EVERY record before anything is
written, so a bad record anywhere rejects the whole snapshot.
"""

from datetime import datetime
from typing import Optional, Union

from pydantic import ValidationError, field_validator, model_validator

from ledger.models.records import (
    AppSettings,
    Budget,
    Category,
    GroceryList,
    LedgerModel,
    LedgerRecord,
    Loan,
    SavingsGoal,
    Shop,
    Transaction,
)
from ledger.services.storage.registry import Collection, COLLECTION_SPECS
from ledger.services.storage.interface import SnapshotError


class Snapshot(LedgerModel):
    """The export document. Every section is optional."""

    transactions: Optional[list[Transaction]] = None
    categories: Optional[list[Category]] = None
    shops: Optional[list[Shop]] = None
    savings_goals: Optional[list[SavingsGoal]] = None
    budgets: Optional[list[Budget]] = None
    grocery_lists: Optional[list[GroceryList]] = None
    loans: Optional[list[Loan]] = None
    settings: Optional[AppSettings] = None
    export_date: Optional[datetime] = None

    @field_validator('export_date', mode='wrap')
    @classmethod
    def lenient_export_date(cls, v, handler):
        """exportDate is informational; an unparseable one reads as None."""
        try:
            return handler(v)
        except ValidationError:
            return None

    @model_validator(mode='after')
    def validate_unique_ids(self) -> 'Snapshot':
        """Ids must be unique within each section."""
        for collection in Collection:
            records = self.section(collection)
            if records is None:
                continue
            ids = [record.id for record in records]
            if len(set(ids)) != len(ids):
                raise ValueError(f"Duplicate ids in {collection.value}")
        return self

    def section(self, collection: Collection) -> Optional[list[LedgerRecord]]:
        """Records for a collection, or None if the section is absent."""
        return getattr(self, COLLECTION_SPECS[collection].field_name)

    def present_sections(self) -> list[str]:
        names = [c.value for c in Collection if self.section(c) is not None]
        if self.settings is not None:
            names.append("settings")
        return names


def encode_snapshot(snapshot: Snapshot) -> str:
    """Render a snapshot as indented camelCase JSON."""
    return snapshot.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def decode_snapshot(blob: Union[str, bytes]) -> Snapshot:
    """
    Parse and fully validate a snapshot document.

    Raises:
        SnapshotError: On malformed JSON, a non-object document,
            or any invalid record
    """
    if not isinstance(blob, (str, bytes, bytearray)):
        raise SnapshotError(
            f"Snapshot must be JSON text, got {type(blob).__name__}"
        )
    try:
        return Snapshot.model_validate_json(blob)
    except ValidationError as e:
        raise SnapshotError(
            f"Invalid snapshot ({e.error_count()} errors): {e}"
        ) from e
