"""
Result Models for Finance Engine

Everything the engine hands back to its callers is one of these models.
Presentation code renders them verbatim and performs no financial
computation of its own.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from finance_engine.models.records import Frequency


RESULT_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
)


# =============================================================================
# ENGINE RESULTS
# =============================================================================

class Summary(BaseModel):
    """Period totals."""
    model_config = RESULT_CONFIG

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    net_balance: Decimal = Decimal("0")


class CategoryTotal(BaseModel):
    """Spending recorded against one category."""
    model_config = RESULT_CONFIG

    category: str
    total: Decimal = Decimal("0")


class BudgetLine(BaseModel):
    """Budgeted and actual amounts for one category."""
    model_config = RESULT_CONFIG

    budgeted: Decimal = Field(ge=0)
    actual: Decimal = Field(ge=0)


class CategoryComparison(BaseModel):
    """Spend-vs-budget outcome for one category."""
    model_config = RESULT_CONFIG

    category: str
    budgeted: Decimal
    actual: Decimal
    over_budget: bool

    @property
    def overspend(self) -> Decimal:
        """How far actual spend exceeds the budget (zero when within it)."""
        return max(self.actual - self.budgeted, Decimal("0"))


class RecurringItem(BaseModel):
    """A recurring contribution normalized to a monthly rate."""
    model_config = RESULT_CONFIG

    source_id: Optional[UUID] = None
    name: str
    amount: Decimal
    frequency: Frequency
    monthly_equivalent: Decimal


class RecurringSummary(BaseModel):
    """All recurring contributions and their combined monthly rate."""
    model_config = RESULT_CONFIG

    items: list[RecurringItem] = Field(default_factory=list)
    total_monthly: Decimal = Decimal("0")


class GoalProgress(BaseModel):
    """
    How far a goal has come and how long is left.

    monthly_contribution, months_to_target and on_track are only set for
    recurring goals.
    """
    model_config = RESULT_CONFIG

    goal_id: UUID
    name: str
    saved_amount: Decimal
    target_amount: Decimal
    remaining_amount: Decimal
    percent: Decimal = Field(ge=0, le=100)
    time_left_months: int = Field(ge=0)
    overdue: bool = False
    completed: bool = False
    monthly_contribution: Optional[Decimal] = None
    months_to_target: Optional[int] = None
    on_track: Optional[bool] = None

    def is_at_risk(self, threshold: Decimal = Decimal("50")) -> bool:
        """Callers flag goals below the threshold percentage as at risk."""
        return self.percent < threshold


class AnalyticsReport(BaseModel):
    """Every figure derived from one snapshot."""
    model_config = RESULT_CONFIG

    report_id: UUID = Field(default_factory=uuid4)
    generated_at: datetime = Field(default_factory=datetime.utcnow)
    as_of: date

    transaction_summary: Summary
    budget_summary: Summary
    category_spending: list[CategoryTotal] = Field(default_factory=list)
    comparisons: list[CategoryComparison] = Field(default_factory=list)
    recurring: RecurringSummary = Field(default_factory=RecurringSummary)
    goals: list[GoalProgress] = Field(default_factory=list)
    at_risk_goals: list[UUID] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @property
    def over_budget_categories(self) -> list[str]:
        return [c.category for c in self.comparisons if c.over_budget]


class AnalyticsResult(BaseModel):
    """
    Outcome of building a report.

    On failure the report is absent and error_type names the engine error.
    """
    model_config = RESULT_CONFIG

    success: bool
    report: Optional[AnalyticsReport] = None
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class OperationResult(BaseModel):
    """Outcome of a create/update/delete on stored records."""
    model_config = RESULT_CONFIG

    success: bool
    error: Optional[str] = None
    record: Optional[Any] = None


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'suspicious_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage record validation.

    Stage 1: Schema validation (types, required fields, invariants)
    Stage 2: Semantic validation (plausibility checks)
    """

    record_type: str
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )

    schema_valid: bool
    semantic_valid: bool
    is_valid: bool

    # Parsed record, present when schema validation passed
    record: Optional[Any] = None

    issues: list[ValidationIssue] = Field(default_factory=list)

    # Warnings don't block but should be shown
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    def issues_as_dicts(self) -> list[dict]:
        return [
            {"field": i.field, "type": i.issue_type, "message": i.message}
            for i in self.issues
        ]
