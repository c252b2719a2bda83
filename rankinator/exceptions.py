"""Exceptions raised by the rating engine and ranking session."""

from __future__ import annotations

from typing import Any


class RankinatorError(Exception):
    """Base exception for all Rankinator errors."""

    pass


class InvalidInputError(RankinatorError, ValueError):
    """A caller passed a value that breaks the engine's preconditions.

    Raised for scores outside {0, 0.5, 1}, non-positive deviation or
    volatility, non-finite ratings, and misuse of a ranking session.
    """

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        self.field = field
        self.value = value
        full_message = message
        if field:
            full_message = f"Invalid '{field}' ({value!r}): {message}"
        super().__init__(full_message)


class NumericDivergenceError(RankinatorError, ArithmeticError):
    """The volatility solver failed to bracket or converge.

    Never expected under valid inputs; it means an upstream invariant was
    broken, so the update is aborted rather than returning a stale value.
    """

    def __init__(self, message: str, iterations: int | None = None):
        self.iterations = iterations
        full_message = f"Rating update diverged: {message}"
        if iterations is not None:
            full_message += f" (after {iterations} iterations)"
        super().__init__(full_message)
