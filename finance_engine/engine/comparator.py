"""
Comparator

Compares actual spend against the budgeted amount per category.
Output order follows the input mapping's insertion order; nothing is
re-sorted and nothing is filtered out.
"""

from decimal import Decimal
from typing import Iterable, Mapping, Union

from pydantic import ValidationError as PydanticValidationError

from finance_engine.engine.errors import ValidationError
from finance_engine.models.records import BudgetEntry
from finance_engine.models.results import BudgetLine, CategoryComparison


def _as_budget_line(category: str, line: Union[BudgetLine, Mapping]) -> BudgetLine:
    if isinstance(line, BudgetLine):
        return line
    try:
        return BudgetLine.model_validate(line)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Invalid budget line for {category}: {e.error_count()} errors",
            issues=e.errors(),
        ) from e


def compare(
    lines: Mapping[str, Union[BudgetLine, Mapping]],
) -> list[CategoryComparison]:
    """
    Flag categories whose actual spend exceeds the budget.

    Values may be BudgetLine models or {budgeted, actual} mappings.
    """
    comparisons = []
    for category, raw in lines.items():
        line = _as_budget_line(category, raw)
        comparisons.append(CategoryComparison(
            category=category,
            budgeted=line.budgeted,
            actual=line.actual,
            over_budget=line.actual > line.budgeted,
        ))
    return comparisons


def budget_lines(entries: Iterable[BudgetEntry]) -> dict[str, BudgetLine]:
    """
    Group budget entries into one line per category.

    Categories match case-insensitively and repeats are summed under the
    first-seen spelling. The "Income" baseline row is skipped.
    """
    names: dict[str, str] = {}
    budgeted: dict[str, Decimal] = {}
    actual: dict[str, Decimal] = {}

    for entry in entries:
        if entry.is_income_baseline:
            continue
        key = entry.category.casefold()
        names.setdefault(key, entry.category)
        budgeted[key] = budgeted.get(key, Decimal("0")) + entry.expense_amount
        actual[key] = actual.get(key, Decimal("0")) + entry.amount_spent

    return {
        names[key]: BudgetLine(budgeted=budgeted[key], actual=actual[key])
        for key in names
    }
