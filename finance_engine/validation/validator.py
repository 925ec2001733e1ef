"""
Two-Stage Record Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Type checking and required fields
- Record invariants (non-negative amounts, recurring goals need a
  frequency, target date not before creation)
- This catches malformed form input

STAGE 2 - SEMANTIC VALIDATION:
- Transaction dates far in the future
- Suspiciously large amounts
- Goals whose target date has already passed
- Budget entries already overspent
- Budget categories recorded twice
- This catches plausible-but-probably-wrong input

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; only schema errors block a record from being saved.
"""

from datetime import date, timedelta
from typing import Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from finance_engine.config import get_settings
from finance_engine.engine.errors import ValidationError
from finance_engine.models.records import (
    RECORD_MODELS,
    BudgetEntry,
    FinancialGoal,
    RecordType,
    Transaction,
)
from finance_engine.models.results import ValidationIssue, ValidationResult
from finance_engine.services.storage import SnapshotStorageInterface, StorageError


class RecordValidator:
    """
    Validates raw record data through a two-stage pipeline.

    Stage 1: Schema validation (can run without storage)
    Stage 2: Semantic validation (uses storage for duplicate checks)
    """

    def __init__(
        self,
        storage: Optional[SnapshotStorageInterface] = None,
    ):
        """
        Initialize validator.

        Args:
            storage: Storage interface for duplicate checking.
                     If None, duplicate checking is skipped.
        """
        self._storage = storage
        self._settings = get_settings().validation

    def _validate_schema(
        self,
        record_type: RecordType,
        data: Union[dict, BaseModel],
    ) -> tuple[Optional[BaseModel], list[ValidationIssue]]:
        """
        Stage 1: Parse the data into its record model.

        Returns: (record_or_None, list_of_issues)
        """
        model = RECORD_MODELS[record_type]
        if isinstance(data, model):
            return data, []

        if isinstance(data, BaseModel):
            data = data.model_dump()

        try:
            return model.model_validate(data), []
        except PydanticValidationError as e:
            issues = []
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"])
                issues.append(ValidationIssue(
                    field=location or "record",
                    issue_type="missing" if error["type"] == "missing" else "invalid_value",
                    message=error["msg"],
                    severity="error",
                ))
            return None, issues

    def _validate_semantic(
        self,
        record: BaseModel,
    ) -> list[ValidationIssue]:
        """
        Stage 2: Plausibility checks on a parsed record.

        All issues raised here are warnings.
        """
        issues = []
        today = date.today()
        max_amount = self._settings.max_reasonable_amount

        if isinstance(record, Transaction):
            max_future_date = today + timedelta(
                days=self._settings.future_date_tolerance_days
            )
            if record.transaction_date > max_future_date:
                issues.append(ValidationIssue(
                    field="transaction_date",
                    issue_type="future_date",
                    message=f"Transaction date ({record.transaction_date}) is in the future",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))
            if record.amount > max_amount:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message=f"Amount ({record.amount:,.2f}) seems unusually high",
                    severity="warning",
                    suggested_fix="Please verify this amount is correct",
                ))
            if record.amount == 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message="Amount is zero",
                    severity="warning",
                ))

        elif isinstance(record, BudgetEntry):
            if record.amount_spent > record.expense_amount and not record.is_income_baseline:
                issues.append(ValidationIssue(
                    field="amount_spent",
                    issue_type="over_budget",
                    message=(
                        f"{record.category} is already over budget "
                        f"({record.amount_spent:,.2f} of {record.expense_amount:,.2f})"
                    ),
                    severity="warning",
                ))
            if record.expense_amount > record.income > 0:
                issues.append(ValidationIssue(
                    field="expense_amount",
                    issue_type="suspicious_value",
                    message="Budgeted amount is larger than the period income",
                    severity="warning",
                    suggested_fix="Please verify the budgeted amount",
                ))

        elif isinstance(record, FinancialGoal):
            if record.target_date < today:
                issues.append(ValidationIssue(
                    field="target_date",
                    issue_type="past_date",
                    message=f"Target date ({record.target_date}) has already passed",
                    severity="warning",
                    suggested_fix="Consider moving the target date forward",
                ))
            if record.target_amount > max_amount:
                issues.append(ValidationIssue(
                    field="target_amount",
                    issue_type="suspicious_value",
                    message=f"Target ({record.target_amount:,.2f}) seems unusually high",
                    severity="warning",
                    suggested_fix="Please verify this amount is correct",
                ))

        return issues

    async def _check_duplicates(
        self,
        record: BaseModel,
    ) -> list[ValidationIssue]:
        """
        Check for a budget category that is already recorded.

        This requires storage access.
        """
        issues = []

        if self._storage is None or not isinstance(record, BudgetEntry):
            return issues
        if record.is_income_baseline:
            return issues

        try:
            existing = await self._storage.list_records(RecordType.BUDGET)
        except StorageError:
            # Duplicate detection is advisory; storage problems surface on save
            return issues

        for entry in existing:
            if entry.id != record.id and entry.category.lower() == record.category.lower():
                issues.append(ValidationIssue(
                    field="category",
                    issue_type="potential_duplicate",
                    message=f"A budget entry for {record.category} already exists",
                    severity="warning",
                    suggested_fix="Update the existing entry instead",
                ))
                break

        return issues

    async def validate(
        self,
        record_type: RecordType,
        data: Union[dict, BaseModel],
        check_duplicates: bool = True,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            record_type: Which record model the data should become
            data: Raw field values (snake_case or camelCase) or a record
            check_duplicates: Whether to check for duplicates (requires storage)

        Returns:
            ValidationResult with all issues found and the parsed record
        """
        all_issues = []

        # Stage 1: Schema validation
        record, schema_issues = self._validate_schema(record_type, data)
        all_issues.extend(schema_issues)
        schema_valid = record is not None

        # Only run stage 2 if stage 1 passes
        semantic_valid = False
        if schema_valid:
            semantic_issues = self._validate_semantic(record)
            if check_duplicates:
                semantic_issues.extend(await self._check_duplicates(record))
            all_issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        warnings = [i.message for i in all_issues if i.severity == "warning"]

        return ValidationResult(
            record_type=record_type.value,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            record=record,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Generate a short summary of validation results for display."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if not result.schema_valid:
            lines.append("Some fields need fixing:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.field}: {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)


def ensure_valid(result: ValidationResult) -> BaseModel:
    """
    Return the parsed record, or raise if validation failed.

    Raises:
        ValidationError: carrying the blocking issues
    """
    if not result.is_valid or result.record is None:
        errors = [i for i in result.issues if i.severity == "error"]
        summary = "; ".join(f"{i.field}: {i.message}" for i in errors)
        raise ValidationError(
            f"Invalid {result.record_type}: {summary or 'validation failed'}",
            issues=errors,
        )
    return result.record
