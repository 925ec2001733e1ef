"""
Budget & goal analytics engine.

Pure functions over immutable snapshots: no I/O, no logging, no shared
state. Errors are raised immediately; nothing is partially computed.
"""

from finance_engine.engine.aggregator import (
    combine,
    spending_by_category,
    summarize,
    summarize_budget,
)
from finance_engine.engine.comparator import budget_lines, compare
from finance_engine.engine.errors import (
    DivisionByZeroError,
    EngineError,
    InvalidFrequencyError,
    ValidationError,
)
from finance_engine.engine.goals import months_between, percent_complete, progress
from finance_engine.engine.recommendations import recommend
from finance_engine.engine.recurrence import (
    MONTHLY_MULTIPLIERS,
    analyze_recurring,
    monthly_equivalent,
    parse_frequency,
    total_recurring_monthly,
)
from finance_engine.engine.report import build_report

__all__ = [
    # Aggregator
    "combine",
    "spending_by_category",
    "summarize",
    "summarize_budget",
    # Comparator
    "budget_lines",
    "compare",
    # Errors
    "DivisionByZeroError",
    "EngineError",
    "InvalidFrequencyError",
    "ValidationError",
    # Goals
    "months_between",
    "percent_complete",
    "progress",
    # Recommendations
    "recommend",
    # Recurrence
    "MONTHLY_MULTIPLIERS",
    "analyze_recurring",
    "monthly_equivalent",
    "parse_frequency",
    "total_recurring_monthly",
    # Report
    "build_report",
]
