"""
Recommendation Generator

Rule-based advice derived from the period's figures.

Order is fixed: over-budget categories first (in comparator order),
then the net-balance warning, then goal encouragement.
"""

from decimal import Decimal
from typing import Iterable, Sequence

from finance_engine.models.results import CategoryComparison, GoalProgress, Summary


ENCOURAGEMENT_THRESHOLD = Decimal("50")

NEGATIVE_BALANCE_WARNING = (
    "Warning: spending exceeds income by {shortfall} this period."
)
GOAL_ENCOURAGEMENT = (
    "Keep going: none of your goals has reached {threshold}% yet, "
    "and regular contributions will get you there."
)


def _format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _format_percent(value: Decimal) -> str:
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def category_advice(comparison: CategoryComparison) -> str:
    return (
        f"Review spending in {comparison.category}: "
        f"{_format_amount(comparison.actual)} spent against a budget of "
        f"{_format_amount(comparison.budgeted)}."
    )


def recommend(
    summary: Summary,
    comparisons: Sequence[CategoryComparison],
    goals: Iterable[GoalProgress] = (),
    threshold: Decimal = ENCOURAGEMENT_THRESHOLD,
) -> list[str]:
    """Advisory strings for the period, in a deterministic order."""
    advice = [
        category_advice(comparison)
        for comparison in comparisons
        if comparison.over_budget
    ]

    if summary.net_balance < 0:
        advice.append(NEGATIVE_BALANCE_WARNING.format(
            shortfall=_format_amount(-summary.net_balance)
        ))

    if not any(goal.percent >= threshold for goal in goals):
        advice.append(GOAL_ENCOURAGEMENT.format(threshold=_format_percent(threshold)))

    return advice
