"""Exceptions raised by the analytics engine."""

from typing import Optional


class EngineError(Exception):
    """Base exception for engine computations."""
    pass


class ValidationError(EngineError, ValueError):
    """Input violates a record invariant or is otherwise malformed."""

    def __init__(self, message: str, issues: Optional[list] = None):
        self.issues = issues or []
        super().__init__(message)


class DivisionByZeroError(EngineError, ZeroDivisionError):
    """A divisor that validation should have kept positive was zero."""
    pass


class InvalidFrequencyError(EngineError, ValueError):
    """Frequency tag is missing or not recognized."""

    def __init__(self, frequency, message: Optional[str] = None):
        self.frequency = frequency
        super().__init__(message or f"Invalid frequency: {frequency!r}")
