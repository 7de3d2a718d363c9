"""
Two-Stage Validation Pipeline

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Value ranges (amount must be positive)

STAGE 2 - SEMANTIC VALIDATION:
- The category exists for the transaction's kind
- Recurring transactions say how often they repeat

Stage 2 only runs if stage 1 passes.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them, keyed by field, for the form to display.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError

from ledger.models.records import Category, LedgerModel, TransactionDraft
from ledger.models.validation import ValidationIssue, ValidationResult


def validate_amount(text: str) -> bool:
    """Check that user-typed text is a positive number."""
    try:
        value = Decimal(str(text).strip())
    except (InvalidOperation, ValueError):
        return False
    return value.is_finite() and value > 0


def _issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    """One error-level issue per pydantic error, keyed by dotted field path."""
    return [
        ValidationIssue(
            field=".".join(str(part) for part in detail["loc"]) or "__root__",
            issue_type=detail["type"],
            message=detail["msg"],
            severity="error",
        )
        for detail in error.errors()
    ]


class TransactionValidator:
    """
    Validates transaction drafts before they reach the store.

    The store itself does not check category references; this does.
    """

    def __init__(self, categories: Optional[Sequence[Category]] = None):
        """
        Initialize validator.

        Args:
            categories: Known categories for reference checks.
                        If None, the category reference check is skipped.
        """
        self._categories = categories

    def _validate_schema(
        self,
        draft: TransactionDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: required fields and value ranges.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if draft.amount is None or draft.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing" if draft.amount is None else "invalid_value",
                message="Amount must be greater than 0",
                severity="error",
            ))

        if not draft.category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
            ))

        if not draft.description or not draft.description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message="Description is required",
                severity="error",
            ))

        if draft.date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))

        if len(set(draft.tags)) != len(draft.tags):
            issues.append(ValidationIssue(
                field="tags",
                issue_type="duplicate",
                message="Tags must be unique",
                severity="error",
            ))

        if not issues:
            # Remaining limits (lengths, enum values) come from the model itself.
            try:
                draft.to_transaction("draft")
            except ValidationError as e:
                issues.extend(_issues_from_error(e))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        draft: TransactionDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: references to the rest of the ledger.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if self._categories is not None:
            known = {c.name for c in self._categories if c.kind == draft.kind}
            if draft.category not in known:
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="unknown_reference",
                    message=f"'{draft.category}' is not a known {draft.kind.value} category",
                    severity="error",
                ))

        if draft.recurring and draft.recurring_period is None:
            issues.append(ValidationIssue(
                field="recurring_period",
                issue_type="missing",
                message="Recurring transactions need a period",
                severity="error",
            ))

        if draft.shop is not None and not draft.shop.strip():
            issues.append(ValidationIssue(
                field="shop",
                issue_type="blank",
                message="Shop name is blank and will be ignored",
                severity="warning",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate(self, draft: TransactionDraft) -> ValidationResult:
        """
        Run the full two-stage pipeline.

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(draft)
        all_issues.extend(schema_issues)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(draft)
            all_issues.extend(semantic_issues)

        return ValidationResult(
            record_id=draft.id,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
        )


def validate_record(
    model: type[LedgerModel],
    data: Mapping[str, Any],
) -> ValidationResult:
    """
    Check raw data against any record model.

    Pydantic errors are turned into field-keyed issues so every record
    form can report problems the same way transactions do.
    """
    record_id = data.get("id")
    if record_id is not None:
        record_id = str(record_id)
    try:
        model.model_validate(data)
    except ValidationError as e:
        return ValidationResult(
            record_id=record_id,
            schema_valid=False,
            semantic_valid=False,
            is_valid=False,
            issues=_issues_from_error(e),
        )

    return ValidationResult(
        record_id=record_id,
        schema_valid=True,
        semantic_valid=True,
        is_valid=True,
    )
