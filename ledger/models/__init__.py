"""
Data Models Package

This package contains all Pydantic models used in Daily Ledger.
All data flowing into the store must conform to these schemas.
"""

from ledger.models.records import (
    AppSettings,
    Budget,
    BudgetPeriod,
    Category,
    GoalPriority,
    GroceryItem,
    GroceryList,
    LedgerModel,
    LedgerRecord,
    Loan,
    LoanType,
    Money,
    RecurringPeriod,
    SavingsGoal,
    Shop,
    Theme,
    Transaction,
    TransactionDraft,
    TransactionKind,
)
from ledger.models.summary import DateRange, FinancialSummary, RangePeriod
from ledger.models.validation import ValidationIssue, ValidationResult
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "AppSettings",
    "Budget",
    "BudgetPeriod",
    "Category",
    "GoalPriority",
    "GroceryItem",
    "GroceryList",
    "LedgerModel",
    "LedgerRecord",
    "Loan",
    "LoanType",
    "Money",
    "RecurringPeriod",
    "SavingsGoal",
    "Shop",
    "Theme",
    "Transaction",
    "TransactionDraft",
    "TransactionKind",
    # Derived values
    "DateRange",
    "FinancialSummary",
    "RangePeriod",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
