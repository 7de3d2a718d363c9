"""Search and display helpers."""

from ledger.queries.formatting import category_color, format_currency, format_date
from ledger.queries.search import (
    filter_transactions,
    matches_query,
    search_transactions,
)

__all__ = [
    "category_color",
    "filter_transactions",
    "format_currency",
    "format_date",
    "matches_query",
    "search_transactions",
]
