"""
Goal Progress Calculator

Works out how far a goal has come and how much time is left.
For recurring goals it also projects when the contributions will reach
the target and whether that lands before the target date.
"""

from datetime import date, datetime
from decimal import ROUND_CEILING, Decimal
from typing import Union

from finance_engine.engine.errors import DivisionByZeroError, ValidationError
from finance_engine.engine.recurrence import (
    frequency_of,
    quantize_cents,
    raw_monthly_equivalent,
)
from finance_engine.models.records import FinancialGoal
from finance_engine.models.results import GoalProgress


HUNDRED = Decimal("100")


def _as_date(value: Union[date, datetime]) -> date:
    # datetime is a date subclass; compare calendar days only
    if isinstance(value, datetime):
        return value.date()
    return value


def months_between(start: date, end: date) -> int:
    """
    Whole calendar months from start to end.

    Negative when end is before start. A month only counts once its
    day-of-month has been reached, so Jan 31 -> Feb 28 is 0.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if months > 0 and end.day < start.day:
        months -= 1
    elif months < 0 and end.day > start.day:
        months += 1
    return months


def percent_complete(saved_amount: Decimal, target_amount: Decimal) -> Decimal:
    """Saved amount as a percentage of the target, clamped to 0..100."""
    if target_amount <= 0:
        raise DivisionByZeroError(
            f"Goal target must be positive, got {target_amount}"
        )
    percent = HUNDRED * Decimal(saved_amount) / Decimal(target_amount)
    percent = min(max(percent, Decimal("0")), HUNDRED)
    return quantize_cents(percent)


def progress(
    goal: FinancialGoal,
    saved_amount: Decimal,
    now: Union[date, datetime],
) -> GoalProgress:
    """
    Progress of one goal as of `now`.

    `saved_amount` is whatever has been put aside so far; how it is
    tracked is up to the caller.
    """
    if saved_amount < 0:
        raise ValidationError(
            f"Saved amount for {goal.name} cannot be negative: {saved_amount}"
        )

    today = _as_date(now)
    percent = percent_complete(saved_amount, goal.target_amount)
    remaining = max(goal.target_amount - Decimal(saved_amount), Decimal("0"))
    completed = remaining == 0

    overdue = today > goal.target_date
    time_left = 0 if overdue else max(0, months_between(today, goal.target_date))

    monthly_contribution = None
    months_to_target = None
    on_track = None
    if goal.recurring:
        raw_monthly = raw_monthly_equivalent(
            goal.income_amount or Decimal("0"), frequency_of(goal)
        )
        monthly_contribution = quantize_cents(raw_monthly)
        if completed:
            months_to_target = 0
        elif raw_monthly <= 0:
            raise DivisionByZeroError(
                f"Recurring contribution for {goal.name} is zero"
            )
        else:
            months_to_target = int(
                (remaining / raw_monthly).to_integral_value(rounding=ROUND_CEILING)
            )
        on_track = completed or (not overdue and months_to_target <= time_left)

    return GoalProgress(
        goal_id=goal.id,
        name=goal.name,
        saved_amount=Decimal(saved_amount),
        target_amount=goal.target_amount,
        remaining_amount=remaining,
        percent=percent,
        time_left_months=time_left,
        overdue=overdue,
        completed=completed,
        monthly_contribution=monthly_contribution,
        months_to_target=months_to_target,
        on_track=on_track,
    )
