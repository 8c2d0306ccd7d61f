# loanvest/core/finance/amortization.py
"""
Loan amortization: periodic payment, month-by-month schedule and total cost.

Conventions
-----------
- Rates are annual fractions; the monthly rate is `annual / 12`.
- The term in months is `term_in_years * 12` (a float). Loops run over whole
  months, truncating toward zero, so a term that is not a whole number of
  months leaves a discrepancy of less than one payment.
- Inputs are validated by the loan models; functions here assume finite,
  non-negative principal and a positive term. A non-finite result raises
  NonFiniteResultError instead of being returned.
"""

from __future__ import annotations

import math
from collections.abc import Iterator

from loanvest.schemas.labels import LoanType
from loanvest.schemas.models import (
    AdjustableRateLoan,
    BalloonLoan,
    InterestOnlyLoan,
    Loan,
    LoanResult,
    MonthlyPayment,
)

from .errors import engine_error_guard, ensure_finite

_EPS = 1e-9  # for floating cleanup

_ANNUITY_TYPES = (LoanType.annuity, LoanType.fixed_rate)
_INTEREST_ONLY_PAYMENT_TYPES = (LoanType.bullet, LoanType.interest_only)


def _whole_months(years: float) -> int:
    """Whole months in `years`, truncated toward zero (tolerant of 29/12 * 12 == 28.999...)."""
    return int(years * 12.0 + _EPS)


def _clean(balance: float) -> float:
    return 0.0 if abs(balance) < _EPS else balance


def _annuity_payment(principal: float, monthly_rate: float, months: float) -> float:
    """
    Constant payment that retires `principal` over `months` at `monthly_rate`.

    Formula (standard annuity):
        PMT = [ P * r * (1 + r)^n ] / [ (1 + r)^n - 1 ]

    Reduces to P / n when |r| is below 1e-9, where (1 + r)^n - 1 loses its precision.
    """
    if abs(monthly_rate) < _EPS:
        return principal / months
    factor = (1.0 + monthly_rate) ** months
    return principal * monthly_rate * factor / (factor - 1.0)


# -----------------------
# Periodic payment
# -----------------------


def monthly_payment(loan: Loan) -> float:
    """
    Representative monthly payment for a loan.

    - Annuity / Fixed-rate / Adjustable-rate (initial rate) / Balloon (whole term):
      standard annuity payment.
    - Straight: first month's payment, P/n + P*r (later months are smaller).
    - Bullet / Interest-only: interest-only payment, P*r.
    """
    p = loan.principal
    r = loan.annual_interest_rate / 12.0
    n = loan.term_in_years * 12.0

    with engine_error_guard():
        if loan.loan_type is LoanType.straight:
            pmt = p / n + p * r
        elif loan.loan_type in _INTEREST_ONLY_PAYMENT_TYPES:
            pmt = p * r
        else:
            pmt = _annuity_payment(p, r, n)

    return ensure_finite(pmt, "monthly payment")


# -----------------------
# Schedules (one generator per loan structure)
# -----------------------


def _annuity_rows(principal: float, r: float, n: float, months: int) -> Iterator[MonthlyPayment]:
    pmt = _annuity_payment(principal, r, n)
    bal = principal
    for m in range(1, months + 1):
        interest = bal * r
        principal_paid = pmt - interest
        bal -= principal_paid
        yield MonthlyPayment(month=m, interest=interest, principal=principal_paid, payment=pmt, balance=_clean(bal))


def _straight_rows(principal: float, r: float, n: float, months: int) -> Iterator[MonthlyPayment]:
    principal_paid = principal / n
    bal = principal
    for m in range(1, months + 1):
        interest = bal * r
        bal -= principal_paid
        yield MonthlyPayment(
            month=m, interest=interest, principal=principal_paid, payment=principal_paid + interest, balance=_clean(bal)
        )


def _bullet_rows(principal: float, r: float, months: int) -> Iterator[MonthlyPayment]:
    interest = principal * r
    for m in range(1, months + 1):
        if m == months:
            # Full principal due at maturity
            yield MonthlyPayment(month=m, interest=interest, principal=principal, payment=interest + principal, balance=0.0)
        else:
            yield MonthlyPayment(month=m, interest=interest, principal=0.0, payment=interest, balance=principal)


def rate_blocks(loan: AdjustableRateLoan) -> list[tuple[int, int, float]]:
    """
    Rate periods of an adjustable-rate loan as (first_month, months, monthly_rate).

    Periods last `adjustment_period_years` (the last one may be shorter; a period
    under one month means a single period over the whole term). After each period
    the monthly rate moves by `(rate_adjustment_per_period / 12) / adjustment_period_years`,
    downward when the adjustment is negative.
    """
    total_months = _whole_months(loan.term_in_years)
    block_months = _whole_months(loan.adjustment_period_years) or total_months
    rate_step = (loan.rate_adjustment_per_period / 12.0) / loan.adjustment_period_years

    blocks: list[tuple[int, int, float]] = []
    current_rate = loan.annual_interest_rate / 12.0
    done = 0
    while done < total_months:
        months = min(block_months, total_months - done)
        blocks.append((done + 1, months, current_rate))
        current_rate += rate_step
        done += months
    return blocks


def _adjustable_rows(loan: AdjustableRateLoan) -> Iterator[MonthlyPayment]:
    """Each rate period re-amortizes the current balance over the period's own length at its rate."""
    bal = loan.principal
    for first_month, months, rate in rate_blocks(loan):
        pmt = _annuity_payment(bal, rate, months)
        for i in range(months):
            interest = bal * rate
            principal_paid = pmt - interest
            bal -= principal_paid
            yield MonthlyPayment(
                month=first_month + i, interest=interest, principal=principal_paid, payment=pmt, balance=_clean(bal)
            )


def _capped_rows(bal: float, r: float, pmt: float, first_month: int, months: int) -> Iterator[tuple[MonthlyPayment, float]]:
    """Fixed payment with the principal portion capped at the outstanding balance; yields (row, balance)."""
    for i in range(months):
        interest = bal * r
        principal_paid = min(pmt - interest, bal)
        bal -= principal_paid
        row = MonthlyPayment(
            month=first_month + i,
            interest=interest,
            principal=principal_paid,
            payment=principal_paid + interest,
            balance=_clean(bal),
        )
        yield row, bal


def _balloon_rows(loan: BalloonLoan) -> Iterator[MonthlyPayment]:
    """
    Whole-term annuity payments up to the balloon month; the outstanding balance is
    folded into the last row as the balloon payment. A zero-month balloon is a
    single month-0 row repaying the whole principal.
    """
    r = loan.annual_interest_rate / 12.0
    pmt = _annuity_payment(loan.principal, r, loan.term_in_years * 12.0)
    balloon_month = _whole_months(loan.balloon_payment_year)

    bal = loan.principal
    last: MonthlyPayment | None = None
    for row, bal in _capped_rows(bal, r, pmt, 1, balloon_month):
        if last is not None:
            yield last
        last = row

    if last is None:
        yield MonthlyPayment(month=0, interest=0.0, principal=bal, payment=bal, balance=0.0)
        return
    yield last.model_copy(update={"principal": last.principal + bal, "payment": last.payment + bal, "balance": 0.0})


def _interest_only_rows(loan: InterestOnlyLoan) -> Iterator[MonthlyPayment]:
    """Interest-only months first, then re-amortize the balance over the months that remain."""
    r = loan.annual_interest_rate / 12.0
    io_months = _whole_months(loan.interest_only_years)
    remaining = _whole_months(loan.term_in_years) - io_months

    bal = loan.principal
    for m in range(1, io_months + 1):
        interest = bal * r
        yield MonthlyPayment(month=m, interest=interest, principal=0.0, payment=interest, balance=bal)

    if remaining > 0:
        pmt = _annuity_payment(bal, r, remaining)
        for row, _ in _capped_rows(bal, r, pmt, io_months + 1, remaining):
            yield row


def _rows(loan: Loan) -> Iterator[MonthlyPayment]:
    r = loan.annual_interest_rate / 12.0
    n = loan.term_in_years * 12.0
    months = _whole_months(loan.term_in_years)
    kind = loan.loan_type

    if kind in _ANNUITY_TYPES:
        return _annuity_rows(loan.principal, r, n, months)
    if kind is LoanType.straight:
        return _straight_rows(loan.principal, r, n, months)
    if kind is LoanType.bullet:
        return _bullet_rows(loan.principal, r, months)
    if isinstance(loan, AdjustableRateLoan):
        return _adjustable_rows(loan)
    if isinstance(loan, BalloonLoan):
        return _balloon_rows(loan)
    if isinstance(loan, InterestOnlyLoan):
        return _interest_only_rows(loan)
    raise TypeError(f"unsupported loan: {type(loan).__name__}")


def payment_schedule(loan: Loan) -> list[MonthlyPayment]:
    """
    Month-by-month cash flows for a loan.

    Returns:
        One MonthlyPayment per month (1-based). Bullet loans repay the principal in
        the last row; balloon loans fold the lump sum into the last row.

    Notes:
        - For straight, adjustable-rate, balloon and interest-only loans the sum of
          `payment` over the schedule is exactly what `amortize` reports.
        - Annuity and bullet totals in `amortize` use closed forms over the
          fractional term, which can differ by less than one payment when the
          term is not a whole number of months.
    """
    with engine_error_guard():
        rows = list(_rows(loan))
    for row in rows:
        ensure_finite(row.payment, f"month {row.month} payment")
    return rows


# -----------------------
# Total cost
# -----------------------


def amortize(loan: Loan) -> LoanResult:
    """
    Total cash paid over the loan and the interest part of it.

    - Annuity / Fixed-rate: monthly_payment * n (closed form).
    - Bullet: P*r*n + P (closed form).
    - Straight / Adjustable-rate / Balloon / Interest-only: month-by-month simulation.

    interest_paid is always total_cost - principal.
    """
    p = loan.principal
    r = loan.annual_interest_rate / 12.0
    n = loan.term_in_years * 12.0
    kind = loan.loan_type

    if kind in _ANNUITY_TYPES:
        total = monthly_payment(loan) * n
    elif kind is LoanType.bullet:
        total = p * r * n + p
    else:
        total = math.fsum(row.payment for row in payment_schedule(loan))

    ensure_finite(total, "total loan cost")
    return LoanResult(total_cost=total, interest_paid=total - p)


__all__ = ["monthly_payment", "payment_schedule", "amortize", "rate_blocks"]
