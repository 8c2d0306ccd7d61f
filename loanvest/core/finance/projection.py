# loanvest/core/finance/projection.py
"""
Investment projection: lump sum + monthly contributions, compounded at a fixed
frequency, taxed on gains at the end of the term.
"""

from __future__ import annotations

from loanvest.schemas.models import InvestmentParameters, InvestmentResult

from .errors import engine_error_guard, ensure_finite


def rate_per_period(annual_return_rate: float, periods_per_year: int) -> float:
    """
    Periodic rate equivalent to an annual rate: (1 + R)^(1/k) - 1.

    Compounding k times at this rate reproduces exactly one year at R, which a
    simple R / k would overshoot.
    """
    return (1.0 + annual_return_rate) ** (1.0 / periods_per_year) - 1.0


def total_contributions(params: InvestmentParameters) -> float:
    """Nominal cash paid in over the term (principal + every monthly contribution), undiscounted."""
    return params.principal + params.monthly_contribution * params.term_years * 12.0


def future_value(params: InvestmentParameters) -> InvestmentResult:
    """
    Project an investment to the end of its term.

    Steps:
        1. k = compounding periods/year, N = term_years * k
        2. i = (1 + R)^(1/k) - 1
        3. principal FV = P * (1 + i)^N
        4. contribution per period = monthly * 12 / k
        5. contributions FV (ordinary annuity) = C * ((1 + i)^N - 1) / i, or C * N when i <= 0
        6. total FV = 3 + 5
        7. total contributions = P + monthly * term * 12
        8. tax = (total FV - contributions) * tax% / 100
        9. after-tax value = total FV - tax

    Tax is applied to negative gains too, which credits the investor.
    """
    k = int(params.compounding_frequency)
    periods = params.term_years * k

    with engine_error_guard():
        i = rate_per_period(params.annual_return_rate, k)
        growth = (1.0 + i) ** periods
        principal_fv = params.principal * growth

        contribution = params.monthly_contribution * (12.0 / k)
        if i > 0:
            contributions_fv = contribution * (growth - 1.0) / i
        else:
            contributions_fv = contribution * periods

        total_fv = principal_fv + contributions_fv
        paid_in = total_contributions(params)
        gains = total_fv - paid_in
        tax = gains * params.tax_rate_percent / 100.0
        after_tax = total_fv - tax

    ensure_finite(total_fv, "future value before tax")
    ensure_finite(after_tax, "future value after tax")
    return InvestmentResult(
        future_value_after_tax=after_tax,
        future_value_before_tax=total_fv,
        total_contributions=paid_in,
        tax_paid=tax,
        profit=after_tax - paid_in,
    )


__all__ = ["future_value", "total_contributions", "rate_per_period"]
