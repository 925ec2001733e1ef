"""
Core Record Models for Finance Engine

These models define the strict schemas for the records a user keeps:
transactions, budget entries, financial goals and categories.
They are designed to:
1. Enforce the record invariants at construction time
2. Keep money in Decimal, never float
3. Serialize with the camelCase field names the stored documents use
4. Stay immutable once recorded (updates go through model_copy)

DESIGN DECISION: Income vs expense is carried by an explicit `kind` on
transactions. The workflow `status` (pending/successful/failed) is a
separate field and never decides which side of the ledger an amount is on.

Constructing a record directly raises pydantic's ValidationError when an
invariant is broken. Raw input should go through RecordValidator, whose
ensure_valid() reports the same failures as the engine's ValidationError.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


INCOME_SENTINEL_CATEGORY = "Income"

RECORD_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    str_strip_whitespace=True,
    frozen=True,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionKind(str, Enum):
    """Which side of the ledger a transaction sits on."""
    INCOME = "Income"
    EXPENSE = "Expense"


class TransactionStatus(str, Enum):
    """
    Workflow state of a transaction.

    Failed transactions never moved money and are left out of totals.
    """
    PENDING = "Pending"
    SUCCESSFUL = "Successful"
    FAILED = "Failed"


class Frequency(str, Enum):
    """How often a recurring contribution is made."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class RecordType(str, Enum):
    """The three record collections kept in storage."""
    TRANSACTION = "transaction"
    BUDGET = "budget"
    GOAL = "goal"


# =============================================================================
# RECORDS
# =============================================================================

class Category(BaseModel):
    """A spending category. The color is a display hint only."""
    model_config = RECORD_CONFIG

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    color: str = Field(
        default="#808080",
        description="Display color"
    )


DEFAULT_CATEGORIES = (
    Category(name="Rent", color="#FF6347"),
    Category(name="Food", color="#1E90FF"),
    Category(name="Groceries", color="#FFD700"),
    Category(name="Utilities", color="#8A2BE2"),
    Category(name="Entertainment", color="#FF4500"),
    Category(name="Others", color="#FF1493"),
)


class Transaction(BaseModel):
    """A single recorded transaction."""
    model_config = RECORD_CONFIG

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    company_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Counterparty of the transaction"
    )
    transaction_date: date = Field(
        ...,
        description="Date the transaction happened"
    )
    kind: TransactionKind = Field(
        ...,
        description="Income or expense"
    )
    status: TransactionStatus = Field(
        default=TransactionStatus.SUCCESSFUL,
        description="Workflow state"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount moved (always non-negative; kind gives the sign)"
    )
    category: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Spending category, if assigned"
    )

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @property
    def counts_toward_totals(self) -> bool:
        return self.status != TransactionStatus.FAILED


class BudgetEntry(BaseModel):
    """
    One category's budgeted-vs-actual pairing for a period.

    Every entry carries the period's income baseline. An entry whose
    category is "Income" is a legacy baseline row, not a spending category.
    """
    model_config = RECORD_CONFIG

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique budget entry ID"
    )
    income: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Income baseline for the period"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    expense_amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Amount budgeted for the category"
    )
    amount_spent: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        decimal_places=2,
        description="Amount actually spent so far"
    )

    @property
    def is_income_baseline(self) -> bool:
        return self.category.lower() == INCOME_SENTINEL_CATEGORY.lower()


class FinancialGoal(BaseModel):
    """
    A savings goal, optionally funded by a recurring contribution.

    Recurring goals must say how much (income_amount) and how often
    (frequency); one-off goals must leave both empty.
    """
    model_config = RECORD_CONFIG

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique goal ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
    )
    target_amount: Decimal = Field(
        ...,
        gt=0,
        decimal_places=2,
        description="Amount to save"
    )
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
    )
    recurring: bool = False
    income_amount: Optional[Decimal] = Field(
        default=None,
        gt=0,
        decimal_places=2,
        description="Recurring contribution amount"
    )
    frequency: Optional[Frequency] = None
    target_date: date = Field(
        ...,
        description="Date the goal should be reached by"
    )
    created_on: date = Field(
        default_factory=date.today,
        description="Date the goal was set"
    )

    @field_validator('frequency', mode='before')
    @classmethod
    def normalize_frequency(cls, v):
        """Accept 'Weekly', 'WEEKLY' and 'weekly' alike."""
        if isinstance(v, str):
            return v.strip().lower() or None
        return v

    @model_validator(mode='after')
    def validate_recurrence(self) -> 'FinancialGoal':
        """Validate recurrence fields and date relationships."""
        if self.recurring:
            if self.income_amount is None:
                raise ValueError("Recurring goals need an income amount")
            if self.frequency is None:
                raise ValueError("Recurring goals need a frequency")
        elif self.income_amount is not None or self.frequency is not None:
            raise ValueError(
                "Non-recurring goals cannot have an income amount or frequency"
            )

        if self.target_date < self.created_on:
            raise ValueError("Target date cannot be before the creation date")

        return self


class Snapshot(BaseModel):
    """
    An immutable, point-in-time read of all stored records.

    Serializes to the export document {financialGoals, transactions, budgets}.
    """
    model_config = RECORD_CONFIG

    financial_goals: list[FinancialGoal] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    budgets: list[BudgetEntry] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.financial_goals or self.transactions or self.budgets)


RECORD_MODELS: dict[RecordType, type[BaseModel]] = {
    RecordType.TRANSACTION: Transaction,
    RecordType.BUDGET: BudgetEntry,
    RecordType.GOAL: FinancialGoal,
}


def record_type_of(record: BaseModel) -> RecordType:
    """Look up the RecordType of a record instance."""
    for record_type, model in RECORD_MODELS.items():
        if isinstance(record, model):
            return record_type
    raise TypeError(f"Not a stored record: {type(record).__name__}")
