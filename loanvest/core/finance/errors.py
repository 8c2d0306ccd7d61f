# loanvest/core/finance/errors.py
"""
Typed errors + utilities for the financial engine.

The engine is precondition-based: inputs are validated when the pydantic
models are built, and any figure that is not finite is rejected instead of
being reported.

Exports
-------
- FinanceEngineError, InvalidParametersError, NonFiniteResultError
- ENGINE_ERRORS
- classify_engine_error(exc)
- engine_error_guard()
- ensure_finite(value, label)
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from contextlib import contextmanager

from pydantic import ValidationError

# =========================
# Exception types
# =========================


class FinanceEngineError(ValueError):
    """Base class for financial engine failures."""


class InvalidParametersError(FinanceEngineError):
    """Loan or investment parameters were rejected at the validation boundary."""


class NonFiniteResultError(FinanceEngineError):
    """A computation overflowed or produced NaN/Inf."""


# Selector tuple for grouped exception handling
ENGINE_ERRORS = (
    InvalidParametersError,
    NonFiniteResultError,
)


# =========================
# Classification helpers
# =========================


def classify_engine_error(exc: Exception) -> FinanceEngineError:
    """
    Map arbitrary exceptions raised inside the engine to a typed FinanceEngineError.

    Heuristics:
      - Any FinanceEngineError subclass → passed through
      - pydantic ValidationError → InvalidParametersError
      - OverflowError / ZeroDivisionError / ArithmeticError → NonFiniteResultError
      - Fallback → FinanceEngineError
    """
    if isinstance(exc, FinanceEngineError):
        return exc

    if isinstance(exc, ValidationError):
        return InvalidParametersError(f"Parameter validation failed:\n{exc}")

    msg = f"{type(exc).__name__}: {exc}"
    if isinstance(exc, ArithmeticError):
        return NonFiniteResultError(msg)

    return FinanceEngineError(msg)


@contextmanager
def engine_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions from engine internals."""
    try:
        yield
    except ENGINE_ERRORS:
        raise
    except (ArithmeticError, ValidationError) as exc:
        raise classify_engine_error(exc) from exc


def ensure_finite(value: float, label: str) -> float:
    """Return value unchanged, or raise NonFiniteResultError if it is NaN/Inf."""
    if not math.isfinite(value):
        raise NonFiniteResultError(f"{label} is not a finite number ({value!r})")
    return value


__all__ = [
    "FinanceEngineError",
    "InvalidParametersError",
    "NonFiniteResultError",
    "ENGINE_ERRORS",
    "classify_engine_error",
    "engine_error_guard",
    "ensure_finite",
]
