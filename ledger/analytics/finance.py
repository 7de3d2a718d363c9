"""
Financial Derivations

Pure functions that fold transactions (and budgets) into summary values.
Nothing here touches storage: callers load records from the store and
pass them in. All money is Decimal; percentages are Decimal too.
"""

import calendar
from collections.abc import Iterable, Sequence
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional, Union

from ledger.models.records import (
    Budget,
    BudgetPeriod,
    Transaction,
    TransactionKind,
)
from ledger.models.summary import DateRange, FinancialSummary, RangePeriod, to_local_naive


ZERO = Decimal("0")
HUNDRED = Decimal("100")
END_OF_DAY = time(23, 59, 59, 999000)


def previous_month(year: int, month: int) -> tuple[int, int]:
    """The (year, month) before the given one; January rolls back a year."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def _in_month(transaction: Transaction, year: int, month: int) -> bool:
    return transaction.date.year == year and transaction.date.month == month


def _month_totals(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
) -> tuple[Decimal, Decimal]:
    """(income, expenses) for one calendar month."""
    income = ZERO
    expenses = ZERO
    for transaction in transactions:
        if not _in_month(transaction, year, month):
            continue
        if transaction.kind == TransactionKind.INCOME:
            income += transaction.amount
        else:
            expenses += transaction.amount
    return income, expenses


def summarize(
    transactions: Sequence[Transaction],
    reference: Optional[date] = None,
    budgets: Optional[Sequence[Budget]] = None,
) -> FinancialSummary:
    """
    Summarize the month containing `reference` (default: today).

    monthly_trend is the percent change of balance against the previous
    month, measured against the absolute previous balance. It is 0 when
    the previous balance is exactly 0.

    savings_total is max(0, balance); savings goals are not netted in.
    """
    reference = reference or date.today()

    income, expenses = _month_totals(transactions, reference.year, reference.month)
    balance = income - expenses

    prev_income, prev_expenses = _month_totals(
        transactions, *previous_month(reference.year, reference.month)
    )
    previous_balance = prev_income - prev_expenses

    if previous_balance == 0:
        trend = ZERO
    else:
        trend = (balance - previous_balance) / abs(previous_balance) * HUNDRED

    utilization = (
        budget_utilization(transactions, budgets, reference) if budgets else ZERO
    )

    return FinancialSummary(
        total_income=income,
        total_expenses=expenses,
        balance=balance,
        savings_total=max(ZERO, balance),
        budget_utilization=utilization,
        monthly_trend=trend,
    )


def budget_utilization(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    reference: Optional[date] = None,
) -> Decimal:
    """
    Percent of this month's monthly budgets already spent.

    Only budgets with a MONTHLY period count. Spending is the sum of
    expense transactions in the budget's category during the month of
    `reference` (default: today).

    Returns 0 when there are no budgets or their total is 0.
    """
    if not budgets:
        return ZERO

    reference = reference or date.today()
    total_budget = ZERO
    total_spent = ZERO

    for budget in budgets:
        if budget.period != BudgetPeriod.MONTHLY:
            continue
        total_budget += budget.amount
        total_spent += sum(
            (
                t.amount
                for t in transactions
                if t.kind == TransactionKind.EXPENSE
                and t.category == budget.category
                and _in_month(t, reference.year, reference.month)
            ),
            ZERO,
        )

    if total_budget == 0:
        return ZERO
    return total_spent / total_budget * HUNDRED


def date_range(
    period: Union[RangePeriod, str],
    today: Optional[date] = None,
) -> DateRange:
    """
    The current week, month or year as a closed interval.

    Weeks start on Sunday. start is 00:00:00.000 of the first day and
    end is 23:59:59.999 of the last day; compare inclusively.
    """
    period = RangePeriod(period)
    if today is None:
        today = date.today()
    elif isinstance(today, datetime):
        today = today.date()

    if period == RangePeriod.WEEK:
        days_since_sunday = (today.weekday() + 1) % 7
        first = today - timedelta(days=days_since_sunday)
        last = first + timedelta(days=6)
    elif period == RangePeriod.MONTH:
        first = today.replace(day=1)
        last = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    else:
        first = date(today.year, 1, 1)
        last = date(today.year, 12, 31)

    return DateRange(
        start=datetime.combine(first, time.min),
        end=datetime.combine(last, END_OF_DAY),
    )


def _as_bound(value: date, end: bool) -> datetime:
    if isinstance(value, datetime):
        return to_local_naive(value)
    return datetime.combine(value, END_OF_DAY if end else time.min)


def filter_by_date_range(
    transactions: Sequence[Transaction],
    start: date,
    end: date,
) -> list[Transaction]:
    """
    Transactions dated within [start, end], both ends inclusive.

    Plain dates cover their whole day. Aware datetimes are compared in
    local time.
    """
    lower = _as_bound(start, end=False)
    upper = _as_bound(end, end=True)
    return [
        t for t in transactions
        if lower <= datetime.combine(t.date, time.min) <= upper
    ]


def group_by_category(
    transactions: Sequence[Transaction],
) -> dict[str, list[Transaction]]:
    """Group by category name, keeping the original order in each group."""
    groups: dict[str, list[Transaction]] = {}
    for transaction in transactions:
        groups.setdefault(transaction.category, []).append(transaction)
    return groups


def category_totals(
    transactions: Sequence[Transaction],
    kind: TransactionKind = TransactionKind.EXPENSE,
) -> dict[str, Decimal]:
    """Total amount per category for one kind of transaction."""
    totals: dict[str, Decimal] = {}
    for category, group in group_by_category(transactions).items():
        amounts = [t.amount for t in group if t.kind == kind]
        if amounts:
            totals[category] = sum(amounts, ZERO)
    return totals
