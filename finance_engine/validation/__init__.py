"""Record validation package."""

from finance_engine.validation.validator import RecordValidator, ensure_valid

__all__ = ["RecordValidator", "ensure_valid"]
