"""
Data Models Package

This package contains all Pydantic models used in the Finance Engine.
All data flowing through the system must conform to these schemas.
"""

from finance_engine.models.records import (
    DEFAULT_CATEGORIES,
    INCOME_SENTINEL_CATEGORY,
    RECORD_MODELS,
    BudgetEntry,
    Category,
    FinancialGoal,
    Frequency,
    RecordType,
    Snapshot,
    Transaction,
    TransactionKind,
    TransactionStatus,
    record_type_of,
)
from finance_engine.models.results import (
    AnalyticsReport,
    AnalyticsResult,
    BudgetLine,
    CategoryComparison,
    CategoryTotal,
    GoalProgress,
    OperationResult,
    RecurringItem,
    RecurringSummary,
    Summary,
    ValidationIssue,
    ValidationResult,
)
from finance_engine.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "DEFAULT_CATEGORIES",
    "INCOME_SENTINEL_CATEGORY",
    "RECORD_MODELS",
    "BudgetEntry",
    "Category",
    "FinancialGoal",
    "Frequency",
    "RecordType",
    "Snapshot",
    "Transaction",
    "TransactionKind",
    "TransactionStatus",
    "record_type_of",
    # Result models
    "AnalyticsReport",
    "AnalyticsResult",
    "BudgetLine",
    "CategoryComparison",
    "CategoryTotal",
    "GoalProgress",
    "OperationResult",
    "RecurringItem",
    "RecurringSummary",
    "Summary",
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
