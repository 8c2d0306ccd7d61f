# loanvest/core/finance/__init__.py

from .amortization import (
    amortize,
    monthly_payment,
    payment_schedule,
)
from .comparison import compare
from .errors import (
    ENGINE_ERRORS,
    FinanceEngineError,
    InvalidParametersError,
    NonFiniteResultError,
    engine_error_guard,
)
from .projection import future_value, total_contributions

__all__ = [
    "compare",
    "monthly_payment",
    "amortize",
    "payment_schedule",
    "future_value",
    "total_contributions",
    "FinanceEngineError",
    "InvalidParametersError",
    "NonFiniteResultError",
    "ENGINE_ERRORS",
    "engine_error_guard",
]
