"""
Derived Value Models

Outputs of the analytics package. These are never persisted;
they are recomputed from records every time they are needed.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


def to_local_naive(value: datetime) -> datetime:
    """Aware instants become naive local time; naive ones pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class RangePeriod(str, Enum):
    """Calendar windows understood by date_range."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class FinancialSummary(BaseModel):
    """
    Month-level overview of income and spending.

    savings_total is max(0, balance). It does NOT look at SavingsGoal
    records; that simplification is intentional.
    """

    total_income: Decimal = Field(default=Decimal("0"))
    total_expenses: Decimal = Field(default=Decimal("0"))
    balance: Decimal = Field(default=Decimal("0"))
    savings_total: Decimal = Field(default=Decimal("0"), ge=0)
    budget_utilization: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Percent of monthly budgets spent"
    )
    monthly_trend: Decimal = Field(
        default=Decimal("0"),
        description="Percent change of balance against the previous month"
    )


class DateRange(BaseModel):
    """
    Closed interval [start, end].

    Compare inclusively on both ends: end is 23:59:59.999 of its day.
    """

    start: datetime
    end: datetime

    @field_validator('start', 'end')
    @classmethod
    def normalise_timezone(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Range end cannot be before start")
        return self

    def contains(self, value: date) -> bool:
        """Check if a day (or instant) falls inside the range."""
        if not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)
        else:
            value = to_local_naive(value)
        return self.start <= value <= self.end
