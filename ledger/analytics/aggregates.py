"""
Cached aggregate refresh.

Shop.total_spent, Shop.last_visit, Budget.spent and
GroceryList.total_estimated are stored for compatibility with existing
ledgers, but the store never updates them. These functions recompute
them from the source records.

INVALIDATION RULE: after saving or deleting a transaction, refresh the
shops named on it and every budget for its category, for the old
version as well as the new one; after editing a grocery list, refresh
the list. refresh_* return new copies; persist them with
RecordStore.upsert.
"""

from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Optional

from ledger.models.records import (
    Budget,
    GroceryList,
    Shop,
    Transaction,
    TransactionKind,
)


def _shop_expenses(transactions: Sequence[Transaction], shop_name: str) -> list[Transaction]:
    return [
        t for t in transactions
        if t.kind == TransactionKind.EXPENSE and t.shop == shop_name
    ]


def shop_total_spent(transactions: Sequence[Transaction], shop_name: str) -> Decimal:
    """Sum of expenses recorded against a shop name."""
    return sum((t.amount for t in _shop_expenses(transactions, shop_name)), Decimal("0"))


def shop_last_visit(transactions: Sequence[Transaction], shop_name: str) -> Optional[date]:
    """Most recent expense date at a shop, or None if never visited."""
    dates = [t.date for t in _shop_expenses(transactions, shop_name)]
    return max(dates) if dates else None


def refresh_shop(shop: Shop, transactions: Sequence[Transaction]) -> Shop:
    return shop.model_copy(update={
        "total_spent": shop_total_spent(transactions, shop.name),
        "last_visit": shop_last_visit(transactions, shop.name),
    })


def budget_spent(transactions: Sequence[Transaction], budget: Budget) -> Decimal:
    """Expenses in the budget's category dated within its start..end days."""
    return sum(
        (
            t.amount
            for t in transactions
            if t.kind == TransactionKind.EXPENSE
            and t.category == budget.category
            and budget.start_date <= t.date <= budget.end_date
        ),
        Decimal("0"),
    )


def refresh_budget(budget: Budget, transactions: Sequence[Transaction]) -> Budget:
    return budget.model_copy(update={"spent": budget_spent(transactions, budget)})


def refresh_grocery_list(grocery_list: GroceryList) -> GroceryList:
    return grocery_list.model_copy(update={
        "total_estimated": grocery_list.computed_total_estimated,
    })
