"""
Recurrence Analyzer

Normalizes recurring contributions to a per-month rate so amounts paid
on different schedules can be compared and added up.

Any record exposing `recurring`, `income_amount` and `frequency` can be
analyzed; financial goals are the main source.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

from finance_engine.engine.errors import InvalidFrequencyError, ValidationError
from finance_engine.models.records import Frequency
from finance_engine.models.results import RecurringItem, RecurringSummary


CENT = Decimal("0.01")

MONTHLY_MULTIPLIERS: dict[Frequency, Decimal] = {
    Frequency.DAILY: Decimal(365) / Decimal(12),
    Frequency.WEEKLY: Decimal(52) / Decimal(12),
    Frequency.MONTHLY: Decimal(1),
    Frequency.QUARTERLY: Decimal(1) / Decimal(3),
}


def quantize_cents(value: Decimal) -> Decimal:
    """Round to cents; amounts too large to represent are rejected."""
    try:
        return value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount is too large to compute with: {value}") from None


def parse_frequency(frequency: Union[Frequency, str, None]) -> Frequency:
    """Resolve a Frequency from the enum or its name in any case."""
    if isinstance(frequency, Frequency):
        return frequency
    if isinstance(frequency, str):
        try:
            return Frequency(frequency.strip().lower())
        except ValueError:
            raise InvalidFrequencyError(frequency) from None
    raise InvalidFrequencyError(frequency)


def raw_monthly_equivalent(
    amount: Decimal,
    frequency: Union[Frequency, str, None],
) -> Decimal:
    """Monthly rate before rounding; use when summing several rates."""
    if amount < 0:
        raise ValidationError(f"Recurring amount cannot be negative: {amount}")
    return Decimal(amount) * MONTHLY_MULTIPLIERS[parse_frequency(frequency)]


def monthly_equivalent(
    amount: Decimal,
    frequency: Union[Frequency, str, None],
) -> Decimal:
    """
    Convert a recurring amount to its monthly rate, rounded to cents.

    >>> monthly_equivalent(Decimal("1200"), Frequency.QUARTERLY)
    Decimal('400.00')
    """
    return quantize_cents(raw_monthly_equivalent(amount, frequency))


def _recurring_items(items: Iterable) -> list:
    return [item for item in items if getattr(item, "recurring", False)]


def frequency_of(item) -> Frequency:
    """Frequency of a recurring item; a missing one is an error."""
    frequency: Optional[Frequency] = getattr(item, "frequency", None)
    if frequency is None:
        raise InvalidFrequencyError(
            None,
            f"{getattr(item, 'name', 'Item')} is recurring but has no frequency",
        )
    return parse_frequency(frequency)


def total_recurring_monthly(items: Iterable) -> Decimal:
    """
    Combined monthly rate of every recurring item.

    Unrounded terms are summed and the total rounded once.
    """
    total = Decimal("0")
    for item in _recurring_items(items):
        amount = item.income_amount or Decimal("0")
        total += raw_monthly_equivalent(amount, frequency_of(item))
    return quantize_cents(total)


def analyze_recurring(items: Iterable) -> RecurringSummary:
    """Per-item monthly equivalents plus the combined total."""
    recurring = _recurring_items(items)
    breakdown = []
    for item in recurring:
        frequency = frequency_of(item)
        amount = item.income_amount or Decimal("0")
        breakdown.append(RecurringItem(
            source_id=getattr(item, "id", None),
            name=getattr(item, "name", None) or getattr(item, "category", ""),
            amount=amount,
            frequency=frequency,
            monthly_equivalent=monthly_equivalent(amount, frequency),
        ))

    return RecurringSummary(
        items=breakdown,
        total_monthly=total_recurring_monthly(recurring),
    )
