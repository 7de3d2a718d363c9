"""
Collection registry.

Maps each named collection to its record model, storage key and
default contents, and knows how to turn a collection into the raw
text a backend stores (a JSON array of camelCase documents).
"""

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum

from ledger.models.defaults import default_categories
from ledger.models.records import (
    AppSettings,
    Budget,
    Category,
    GroceryList,
    LedgerRecord,
    Loan,
    SavingsGoal,
    Shop,
    Transaction,
)
from ledger.services.storage.interface import SerializationError


SETTINGS_KEY = "settings"


class Collection(str, Enum):
    """
    Named, identity-keyed collections.

    Values are the section names used in snapshots.
    """
    TRANSACTIONS = "transactions"
    CATEGORIES = "categories"
    SHOPS = "shops"
    SAVINGS_GOALS = "savingsGoals"
    BUDGETS = "budgets"
    GROCERY_LISTS = "groceryLists"
    LOANS = "loans"

    @property
    def spec(self) -> "CollectionSpec":
        return COLLECTION_SPECS[self]


@dataclass(frozen=True)
class CollectionSpec:
    collection: Collection
    model: type[LedgerRecord]
    key: str
    field_name: str
    default: Callable[[], list] = list

    def encode(self, records: Sequence[LedgerRecord]) -> str:
        return json.dumps([record.to_document() for record in records])

    def decode(self, raw: str) -> list:
        """
        Parse stored text back into records.

        Raises:
            SerializationError: If the text is not a JSON array of valid records
        """
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise SerializationError(
                    f"{self.collection.value} must be stored as a JSON array"
                )
            return [self.model.model_validate(item) for item in data]
        except (ValueError, TypeError) as e:
            # json.JSONDecodeError and pydantic.ValidationError are ValueErrors
            raise SerializationError(
                f"Failed to decode {self.collection.value}: {e}"
            ) from e


COLLECTION_SPECS: dict[Collection, CollectionSpec] = {
    spec.collection: spec
    for spec in (
        CollectionSpec(Collection.TRANSACTIONS, Transaction, "transactions", "transactions"),
        CollectionSpec(
            Collection.CATEGORIES,
            Category,
            "categories",
            "categories",
            default=default_categories,
        ),
        CollectionSpec(Collection.SHOPS, Shop, "shops", "shops"),
        CollectionSpec(Collection.SAVINGS_GOALS, SavingsGoal, "savings-goals", "savings_goals"),
        CollectionSpec(Collection.BUDGETS, Budget, "budgets", "budgets"),
        CollectionSpec(Collection.GROCERY_LISTS, GroceryList, "grocery-lists", "grocery_lists"),
        CollectionSpec(Collection.LOANS, Loan, "loans", "loans"),
    )
}


def encode_settings(settings: AppSettings) -> str:
    return json.dumps(settings.to_document())


def decode_settings(raw: str) -> AppSettings:
    """
    Raises:
        SerializationError: If the text is not a valid settings document
    """
    try:
        return AppSettings.model_validate_json(raw)
    except ValueError as e:
        raise SerializationError(f"Failed to decode settings: {e}") from e
