"""
Recurring transaction projection.

Month and year steps keep the day-of-month and let any overflow roll
forward into the following month, the way JavaScript's Date does:

    2024-01-31 + 1 month -> "2024-02-31" -> 2024-03-02
    2024-02-29 + 1 year  -> "2025-02-29" -> 2025-03-01

Stored ledgers were produced with that arithmetic, so it is kept
rather than clamped to the last day of the month.
"""

from collections.abc import Sequence
from datetime import date, timedelta
from typing import Optional, Union

from ledger.models.records import RecurringPeriod, Transaction


DateLike = Union[date, str]


def _as_date(value: DateLike) -> date:
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def _roll(year: int, month: int, day: int) -> date:
    """Build a date, spilling an out-of-range day into the next month(s)."""
    return date(year, month, 1) + timedelta(days=day - 1)


def add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    year, month_index = divmod(index, 12)
    return _roll(year, month_index + 1, day.day)


def add_years(day: date, years: int) -> date:
    return _roll(day.year + years, day.month, day.day)


def next_occurrence(
    last_date: DateLike,
    period: Union[RecurringPeriod, str],
) -> date:
    """
    The date a recurring transaction happens next.

    Args:
        last_date: Date of the last occurrence (date or ISO string)
        period: daily, weekly, monthly or yearly

    Returns:
        The following occurrence
    """
    day = _as_date(last_date)
    period = RecurringPeriod(period)

    if period == RecurringPeriod.DAILY:
        return day + timedelta(days=1)
    if period == RecurringPeriod.WEEKLY:
        return day + timedelta(days=7)
    if period == RecurringPeriod.MONTHLY:
        return add_months(day, 1)
    return add_years(day, 1)


def project_occurrences(
    last_date: DateLike,
    period: Union[RecurringPeriod, str],
    until: DateLike,
    limit: Optional[int] = None,
) -> list[date]:
    """
    Every occurrence after `last_date` up to and including `until`.

    Each step starts from the previous result, so a rolled-over
    monthly date stays on its new day (Jan 31 -> Mar 2 -> Apr 2).
    """
    end = _as_date(until)
    occurrences: list[date] = []
    current = _as_date(last_date)
    while limit is None or len(occurrences) < limit:
        current = next_occurrence(current, period)
        if current > end:
            break
        occurrences.append(current)
    return occurrences


def due_recurring(
    transactions: Sequence[Transaction],
    today: Optional[date] = None,
) -> list[tuple[Transaction, date]]:
    """
    Recurring transactions whose next occurrence is on or before today.

    Returns (transaction, next_date) pairs in the original order.
    Transactions flagged recurring without a period are skipped.
    """
    today = today or date.today()
    due = []
    for transaction in transactions:
        if not transaction.recurring or transaction.recurring_period is None:
            continue
        upcoming = next_occurrence(transaction.date, transaction.recurring_period)
        if upcoming <= today:
            due.append((transaction, upcoming))
    return due
