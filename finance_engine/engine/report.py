"""
Report Builder

Runs every engine component once over a snapshot and packages the
figures into a single AnalyticsReport. Views render the report; they
never recompute totals themselves.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Union
from uuid import UUID

from finance_engine.engine.aggregator import (
    spending_by_category,
    summarize,
    summarize_budget,
)
from finance_engine.engine.comparator import budget_lines, compare
from finance_engine.engine.goals import progress
from finance_engine.engine.recommendations import recommend
from finance_engine.engine.recurrence import analyze_recurring
from finance_engine.models.records import Category, Snapshot
from finance_engine.models.results import AnalyticsReport


def build_report(
    snapshot: Snapshot,
    now: Union[date, datetime],
    saved_amounts: Optional[Mapping[UUID, Decimal]] = None,
    at_risk_threshold: Decimal = Decimal("50"),
    categories: Iterable[Union[Category, str]] = (),
) -> AnalyticsReport:
    """
    Derive every figure for one snapshot.

    Goals missing from `saved_amounts` are treated as having nothing
    saved yet. `at_risk_threshold` only decides which goals are listed in
    `at_risk_goals`; the encouragement rule always uses its own 50%.
    """
    saved_amounts = saved_amounts or {}
    as_of = now.date() if isinstance(now, datetime) else now

    transaction_summary = summarize(snapshot.transactions)
    budget_summary = summarize_budget(snapshot.budgets)
    comparisons = compare(budget_lines(snapshot.budgets))
    recurring = analyze_recurring(snapshot.financial_goals)
    goals = [
        progress(goal, saved_amounts.get(goal.id, Decimal("0")), as_of)
        for goal in snapshot.financial_goals
    ]

    return AnalyticsReport(
        as_of=as_of,
        transaction_summary=transaction_summary,
        budget_summary=budget_summary,
        category_spending=spending_by_category(snapshot.transactions, categories),
        comparisons=comparisons,
        recurring=recurring,
        goals=goals,
        at_risk_goals=[
            goal.goal_id for goal in goals if goal.is_at_risk(at_risk_threshold)
        ],
        recommendations=recommend(transaction_summary, comparisons, goals),
    )
