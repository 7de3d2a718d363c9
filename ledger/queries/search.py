"""
Transaction Search

Deterministic filtering over already-loaded transactions.
Results always keep the order they were given in.
"""

from collections.abc import Sequence
from datetime import date
from typing import Optional

from ledger.models.records import Transaction, TransactionKind


def matches_query(transaction: Transaction, query: str) -> bool:
    """
    Case-insensitive substring match on description, category or shop.

    An empty query matches everything. A missing shop never matches.
    """
    needle = query.lower()
    if not needle:
        return True
    if needle in transaction.description.lower():
        return True
    if needle in transaction.category.lower():
        return True
    return transaction.shop is not None and needle in transaction.shop.lower()


def search_transactions(
    transactions: Sequence[Transaction],
    query: str,
) -> list[Transaction]:
    """Transactions matching a free-text query, in original order."""
    return [t for t in transactions if matches_query(t, query)]


def filter_transactions(
    transactions: Sequence[Transaction],
    kind: Optional[TransactionKind] = None,
    category: Optional[str] = None,
    shop: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    query: Optional[str] = None,
    limit: Optional[int] = None,
) -> list[Transaction]:
    """
    List transactions with optional filters.

    Args:
        kind: Only income or only expenses
        category: Exact category name
        shop: Shop name (partial, case-insensitive)
        date_from: On or after this day
        date_to: On or before this day
        query: Free text, as in search_transactions
        limit: Maximum number of results

    Returns:
        Matching transactions in original order
    """
    results = []
    for t in transactions:
        if kind and t.kind != kind:
            continue
        if category and t.category != category:
            continue
        if shop and (t.shop is None or shop.lower() not in t.shop.lower()):
            continue
        if date_from and t.date < date_from:
            continue
        if date_to and t.date > date_to:
            continue
        if query and not matches_query(t, query):
            continue
        results.append(t)
        if limit is not None and len(results) >= limit:
            break
    return results
