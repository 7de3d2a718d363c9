"""Validation package."""

from ledger.validation.validator import (
    TransactionValidator,
    validate_amount,
    validate_record,
)

__all__ = ["TransactionValidator", "validate_amount", "validate_record"]
