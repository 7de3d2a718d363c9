"""Derived analytics: pure functions over already-loaded records."""

from ledger.analytics.aggregates import (
    budget_spent,
    refresh_budget,
    refresh_grocery_list,
    refresh_shop,
    shop_last_visit,
    shop_total_spent,
)
from ledger.analytics.finance import (
    budget_utilization,
    category_totals,
    date_range,
    filter_by_date_range,
    group_by_category,
    previous_month,
    summarize,
)
from ledger.analytics.recurrence import (
    due_recurring,
    next_occurrence,
    project_occurrences,
)

__all__ = [
    # Aggregates
    "budget_spent",
    "refresh_budget",
    "refresh_grocery_list",
    "refresh_shop",
    "shop_last_visit",
    "shop_total_spent",
    # Finance
    "budget_utilization",
    "category_totals",
    "date_range",
    "filter_by_date_range",
    "group_by_category",
    "previous_month",
    "summarize",
    # Recurrence
    "due_recurring",
    "next_occurrence",
    "project_occurrences",
]
