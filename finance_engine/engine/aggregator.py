"""
Aggregator

Turns a period's transactions or budget entries into totals.
All arithmetic is Decimal; amounts are never converted to float.
"""

from decimal import Decimal
from typing import Iterable, Sequence, Union

from finance_engine.engine.errors import ValidationError
from finance_engine.models.records import (
    BudgetEntry,
    Category,
    Transaction,
    TransactionKind,
)
from finance_engine.models.results import CategoryTotal, Summary


UNCATEGORIZED = "Uncategorized"

ZERO = Decimal("0")


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """
    Total income, expenses and net balance for a set of transactions.

    Failed transactions are skipped. Empty input gives an all-zero summary.
    """
    total_income = ZERO
    total_expenses = ZERO

    for transaction in transactions:
        if transaction.amount < 0:
            raise ValidationError(
                f"Transaction {transaction.id} has a negative amount"
            )
        if not transaction.counts_toward_totals:
            continue
        if transaction.kind == TransactionKind.INCOME:
            total_income += transaction.amount
        else:
            total_expenses += transaction.amount

    return Summary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_balance=total_income - total_expenses,
    )


def summarize_budget(entries: Sequence[BudgetEntry]) -> Summary:
    """
    Income baseline, spend and income left for a budget period.

    Every entry repeats the period's income; entries that carry a
    non-zero income must agree on it. Legacy "Income" rows only
    contribute the baseline, never spend.
    """
    baselines = {entry.income for entry in entries if entry.income > 0}
    if len(baselines) > 1:
        raise ValidationError(
            "Budget entries disagree on the period income: "
            + ", ".join(str(b) for b in sorted(baselines))
        )
    income = baselines.pop() if baselines else ZERO

    spent = ZERO
    for entry in entries:
        if entry.amount_spent < 0:
            raise ValidationError(
                f"Budget entry {entry.id} has a negative amount spent"
            )
        if not entry.is_income_baseline:
            spent += entry.amount_spent

    return Summary(
        total_income=income,
        total_expenses=spent,
        net_balance=income - spent,
    )


def combine(first: Summary, second: Summary) -> Summary:
    """Add two summaries of disjoint record sets."""
    total_income = first.total_income + second.total_income
    total_expenses = first.total_expenses + second.total_expenses
    return Summary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_balance=total_income - total_expenses,
    )


def spending_by_category(
    transactions: Iterable[Transaction],
    categories: Iterable[Union[Category, str]] = (),
) -> list[CategoryTotal]:
    """
    Expense totals per category.

    Known categories come first, in the order given, with zero where
    nothing was spent. Other categories follow in first-seen order.
    """
    totals: dict[str, Decimal] = {}
    for category in categories:
        name = category.name if isinstance(category, Category) else category
        totals.setdefault(name, ZERO)

    for transaction in transactions:
        if transaction.kind != TransactionKind.EXPENSE:
            continue
        if not transaction.counts_toward_totals:
            continue
        name = transaction.category or UNCATEGORIZED
        totals[name] = totals.get(name, ZERO) + transaction.amount

    return [
        CategoryTotal(category=name, total=total)
        for name, total in totals.items()
    ]
