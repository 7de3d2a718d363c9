"""
Tests for the two-stage transaction validator
"""

import pytest
from datetime import date
from decimal import Decimal

from ledger.models.defaults import default_categories
from ledger.models.records import (
    Budget,
    RecurringPeriod,
    TransactionDraft,
    TransactionKind,
)
from ledger.validation import TransactionValidator, validate_amount, validate_record


@pytest.fixture
def validator():
    return TransactionValidator(default_categories())


def _draft(**overrides):
    data = dict(
        amount=Decimal("12.50"),
        category="Food & Dining",
        description="Lunch",
        date=date(2024, 5, 2),
    )
    data.update(overrides)
    return TransactionDraft(**data)


class TestSchemaStage:
    """Tests for stage 1: required fields and ranges."""

    def test_empty_draft_reports_every_field(self, validator):
        """Test the messages forms show for a blank submission."""
        result = validator.validate(TransactionDraft())

        assert result.is_valid is False
        assert result.schema_valid is False
        assert result.semantic_valid is False
        assert result.errors_by_field() == {
            "amount": "Amount must be greater than 0",
            "category": "Category is required",
            "description": "Description is required",
            "date": "Date is required",
        }

    def test_non_positive_amount(self, validator):
        """Test zero and negative amounts."""
        for amount in (Decimal("0"), Decimal("-3")):
            result = validator.validate(_draft(amount=amount))
            assert result.errors_by_field() == {"amount": "Amount must be greater than 0"}

    def test_blank_description(self, validator):
        """Test that whitespace is not a description."""
        result = validator.validate(_draft(description="   "))
        assert "description" in result.errors_by_field()

    def test_duplicate_tags(self, validator):
        """Test that repeated tags are reported."""
        result = validator.validate(_draft(tags=["work", "work"]))
        assert result.errors_by_field() == {"tags": "Tags must be unique"}

    def test_model_limits_are_reported(self, validator):
        """Test that length limits surface as field issues."""
        result = validator.validate(_draft(description="x" * 501))
        assert result.is_valid is False
        assert "description" in result.errors_by_field()

    def test_semantic_stage_skipped_on_schema_errors(self, validator):
        """Test that reference checks wait for a well-formed draft."""
        result = validator.validate(_draft(amount=None, category="Nope"))
        assert list(result.errors_by_field()) == ["amount"]


class TestSemanticStage:
    """Tests for stage 2: references to the rest of the ledger."""

    def test_valid_draft(self, validator):
        """Test a complete draft passes both stages."""
        result = validator.validate(_draft())
        assert result.is_valid is True
        assert result.issues == []

    def test_unknown_category(self, validator):
        """Test that the category must exist."""
        result = validator.validate(_draft(category="Pets"))
        assert result.schema_valid is True
        assert result.is_valid is False
        assert result.errors_by_field() == {
            "category": "'Pets' is not a known expense category",
        }

    def test_category_of_other_kind(self, validator):
        """Test that an income category cannot hold an expense."""
        result = validator.validate(_draft(category="Salary"))
        assert result.is_valid is False

        income = validator.validate(_draft(category="Salary", kind=TransactionKind.INCOME))
        assert income.is_valid is True

    def test_recurring_needs_period(self, validator):
        """Test that recurring drafts say how often."""
        result = validator.validate(_draft(recurring=True))
        assert result.errors_by_field() == {
            "recurring_period": "Recurring transactions need a period",
        }

        ok = validator.validate(_draft(recurring=True, recurring_period=RecurringPeriod.WEEKLY))
        assert ok.is_valid is True

    def test_blank_shop_is_only_a_warning(self, validator):
        """Test that a blank shop does not block saving."""
        result = validator.validate(_draft(shop="  "))
        assert result.is_valid is True
        assert len(result.warnings) == 1

    def test_no_categories_skips_reference_check(self):
        """Test the validator without a category list."""
        result = TransactionValidator().validate(_draft(category="Anything"))
        assert result.is_valid is True


class TestHelpers:
    """Tests for the standalone validation helpers."""

    @pytest.mark.parametrize("text, expected", [
        ("12.50", True),
        (" 3 ", True),
        ("0", False),
        ("-1", False),
        ("abc", False),
        ("", False),
        ("NaN", False),
        ("Infinity", False),
    ])
    def test_validate_amount(self, text, expected):
        """Test parsing user-typed amounts."""
        assert validate_amount(text) is expected

    def test_validate_record_ok(self):
        """Test a valid budget document."""
        result = validate_record(Budget, {
            "id": "b7",
            "category": "Food & Dining",
            "amount": "400",
            "startDate": "2024-05-01",
            "endDate": "2024-05-31",
        })
        assert result.is_valid is True
        assert result.record_id == "b7"

    def test_validate_record_reports_fields(self):
        """Test that pydantic errors become field issues."""
        result = validate_record(Budget, {
            "id": "b1",
            "category": "Food & Dining",
            "amount": "-1",
            "startDate": "2024-05-01",
            "endDate": "2024-05-31",
        })
        assert result.is_valid is False
        assert "amount" in result.errors_by_field()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
