"""
Core Record Models for Daily Ledger

These models define the strict schemas for every record the store persists.
They are designed to:
1. Enforce record-local invariants at construction time
2. Provide clear validation error messages
3. Serialize to the camelCase document format used for storage and snapshots

DESIGN DECISION: Cross-record rules (a transaction's category must exist)
are NOT enforced here. Models only know about themselves; the validation
package checks references against the rest of the ledger.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Direction of money for a transaction or category."""
    INCOME = "income"
    EXPENSE = "expense"


class RecurringPeriod(str, Enum):
    """How often a recurring transaction repeats."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BudgetPeriod(str, Enum):
    """
    Period a budget ceiling applies to.

    Only MONTHLY budgets take part in budget utilization.
    """
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class GoalPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class LoanType(str, Enum):
    PERSONAL = "personal"
    MORTGAGE = "mortgage"
    AUTO = "auto"
    STUDENT = "student"
    CREDIT_CARD = "credit_card"
    OTHER = "other"


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


# =============================================================================
# MONEY
# =============================================================================

def _decimal_to_number(value: Decimal) -> Union[int, float]:
    """JSON numbers: whole values as int, the rest as float."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


# Decimal in Python, a plain JSON number on disk and in snapshots.
Money = Annotated[Decimal, PlainSerializer(_decimal_to_number, when_used="json")]


# =============================================================================
# BASE
# =============================================================================

class LedgerModel(BaseModel):
    """
    Shared configuration for everything that is written to storage.

    Field names are snake_case in Python and camelCase on disk.
    Either spelling is accepted when parsing.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_document(self) -> dict:
        """Convert to the JSON-compatible dict stored by backends."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LedgerRecord(LedgerModel):
    """A record that lives in a collection and is keyed by its id."""

    id: str = Field(
        ...,
        min_length=1,
        description="Identity, unique within its collection"
    )


# =============================================================================
# TRANSACTIONS & CATEGORIES
# =============================================================================

class Transaction(LedgerRecord):
    """
    A single income or expense entry.

    `category` holds the category NAME, not its id.
    """

    kind: TransactionKind = Field(
        ...,
        alias="type",
        description="income or expense"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Amount, always positive; direction comes from kind"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Name of the category"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
    )
    date: dt.date = Field(
        ...,
        description="Day the transaction happened"
    )
    shop: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Name of the shop, if any"
    )
    tags: Optional[list[str]] = None
    recurring: bool = False
    recurring_period: Optional[RecurringPeriod] = None

    @field_validator('shop', mode='before')
    @classmethod
    def blank_shop_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('tags')
    @classmethod
    def tags_are_unique(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        """Tags behave as a set; duplicates are rejected, not merged."""
        if v is not None and len(set(v)) != len(v):
            raise ValueError("Tags must not contain duplicates")
        return v

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind == TransactionKind.EXPENSE


class TransactionDraft(LedgerModel):
    """
    Transaction data as submitted by a form.

    CRITICAL: This is PROPOSED data, NOT verified.
    Every field is optional because the user may have left it blank.
    It becomes a Transaction only after passing TransactionValidator.
    """

    id: Optional[str] = None
    kind: TransactionKind = Field(
        default=TransactionKind.EXPENSE,
        alias="type",
    )
    amount: Optional[Money] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    shop: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    recurring: bool = False
    recurring_period: Optional[RecurringPeriod] = None

    def to_transaction(self, record_id: str) -> Transaction:
        """
        Build the confirmed Transaction.

        An existing draft id wins over `record_id` so edits keep their identity.
        Raises pydantic.ValidationError if required fields are missing.
        """
        return Transaction(
            id=self.id or record_id,
            kind=self.kind,
            amount=self.amount,
            category=self.category,
            description=self.description,
            date=self.date,
            shop=self.shop,
            tags=self.tags or None,
            recurring=self.recurring,
            recurring_period=self.recurring_period if self.recurring else None,
        )


class Category(LedgerRecord):
    """
    A spending or income category.

    Names are expected to be unique per kind; lookups rely on it.
    """

    name: str = Field(..., min_length=1, max_length=100)
    kind: TransactionKind = Field(..., alias="type")
    color: str = Field(..., min_length=1, description="CSS color, e.g. #ef4444")
    icon: str = Field(..., min_length=1)
    budget: Optional[Money] = Field(
        default=None,
        ge=0,
        description="Optional budget ceiling for this category"
    )


# =============================================================================
# SHOPS, GOALS, BUDGETS
# =============================================================================

class Shop(LedgerRecord):
    """
    A place where money is spent.

    total_spent and last_visit are CACHED values. The store never
    recomputes them; see ledger.analytics.aggregates.refresh_shop.
    """

    name: str = Field(..., min_length=1, max_length=200)
    category: str
    address: Optional[str] = Field(default=None, max_length=500)
    phone: Optional[str] = Field(default=None, max_length=50)
    website: Optional[str] = Field(default=None, max_length=200)
    notes: Optional[str] = Field(default=None, max_length=1000)
    total_spent: Money = Field(default=Decimal("0"), ge=0)
    last_visit: Optional[dt.date] = None


class SavingsGoal(LedgerRecord):
    """A target amount to save by a deadline."""

    name: str = Field(..., min_length=1, max_length=200)
    target_amount: Money = Field(..., gt=0)
    current_amount: Money = Field(default=Decimal("0"), ge=0)
    deadline: dt.date
    category: str
    description: Optional[str] = Field(default=None, max_length=1000)
    priority: GoalPriority = GoalPriority.MEDIUM
    is_completed: bool = False

    @property
    def progress_percentage(self) -> Decimal:
        """Saved share of the target, in percent (may exceed 100)."""
        return self.current_amount / self.target_amount * 100

    @property
    def is_consistent(self) -> bool:
        """A completed goal should not report more than its target."""
        return not (self.is_completed and self.current_amount > self.target_amount)


class Budget(LedgerRecord):
    """
    A spending ceiling for one category over a period.

    `spent` is a CACHED value; see ledger.analytics.aggregates.refresh_budget.
    """

    category: str = Field(..., min_length=1)
    amount: Money = Field(..., gt=0, description="Budget ceiling")
    spent: Money = Field(default=Decimal("0"), ge=0)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    start_date: dt.date
    end_date: dt.date

    @model_validator(mode='after')
    def validate_dates(self) -> 'Budget':
        if self.end_date < self.start_date:
            raise ValueError("Budget end date cannot be before start date")
        return self


# =============================================================================
# GROCERY LISTS
# =============================================================================

class GroceryItem(LedgerRecord):
    """One line on a grocery list."""

    name: str = Field(..., min_length=1, max_length=200)
    category: str
    quantity: Money = Field(..., ge=0)
    unit: str = Field(..., max_length=20)
    estimated_price: Optional[Money] = Field(default=None, ge=0)
    is_purchased: bool = False
    notes: Optional[str] = Field(default=None, max_length=500)


class GroceryList(LedgerRecord):
    """
    An ordered list of grocery items.

    total_estimated is CACHED; computed_total_estimated is the source of truth.
    """

    name: str = Field(..., min_length=1, max_length=200)
    items: list[GroceryItem] = Field(default_factory=list)
    total_estimated: Money = Field(default=Decimal("0"), ge=0)
    total_actual: Optional[Money] = Field(default=None, ge=0)
    created_date: dt.date
    completed_date: Optional[dt.date] = None
    is_completed: bool = False

    @model_validator(mode='after')
    def validate_dates(self) -> 'GroceryList':
        if self.completed_date and self.completed_date < self.created_date:
            raise ValueError("Completed date cannot be before created date")
        return self

    @property
    def computed_total_estimated(self) -> Decimal:
        """Sum of the items' estimated prices (items without one count as 0)."""
        return sum(
            (item.estimated_price for item in self.items if item.estimated_price is not None),
            Decimal("0"),
        )


# =============================================================================
# LOANS
# =============================================================================

class Loan(LedgerRecord):
    """A debt being paid down."""

    name: str = Field(..., min_length=1, max_length=200)
    total_amount: Money = Field(..., gt=0)
    remaining_amount: Money = Field(..., ge=0)
    interest_rate: Money = Field(..., ge=0, description="Annual rate in percent")
    monthly_payment: Money = Field(..., ge=0)
    start_date: dt.date
    end_date: dt.date
    lender: str
    loan_type: LoanType = Field(default=LoanType.PERSONAL, alias="type")
    next_payment_date: dt.date

    @model_validator(mode='after')
    def validate_amounts_and_dates(self) -> 'Loan':
        if self.remaining_amount > self.total_amount:
            raise ValueError("Remaining amount cannot exceed total amount")
        if self.end_date < self.start_date:
            raise ValueError("Loan end date cannot be before start date")
        return self

    @property
    def paid_amount(self) -> Decimal:
        return self.total_amount - self.remaining_amount


# =============================================================================
# SETTINGS SINGLETON
# =============================================================================

class AppSettings(LedgerModel):
    """User preferences. Exactly one instance per store."""

    currency: str = Field(default="USD", min_length=3, max_length=3)
    date_format: str = "MM/dd/yyyy"
    theme: Theme = Theme.SYSTEM
    notifications: bool = True
    backup_enabled: bool = False
    language: str = "en"
