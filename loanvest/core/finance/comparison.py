# loanvest/core/finance/comparison.py
from __future__ import annotations

from collections.abc import Iterable

from loanvest.logs import get_logger
from loanvest.schemas.models import (
    ComparisonResult,
    InvestmentOutcome,
    InvestmentParameters,
    Loan,
    LoanOutcome,
)

from .amortization import amortize, monthly_payment
from .projection import future_value

logger = get_logger(__name__)


def _loan_outcome(loan: Loan) -> LoanOutcome:
    res = amortize(loan)
    return LoanOutcome(
        name=loan.name,
        loan_type=loan.loan_type,
        term_in_years=loan.term_in_years,
        principal=loan.principal,
        monthly_payment=monthly_payment(loan),
        total_cost=res.total_cost,
        interest_paid=res.interest_paid,
    )


def _investment_outcome(inv: InvestmentParameters) -> InvestmentOutcome:
    res = future_value(inv)
    return InvestmentOutcome(
        name=inv.name,
        term_years=inv.term_years,
        annual_return_rate=inv.annual_return_rate,
        monthly_contribution=inv.monthly_contribution,
        compounding_frequency=inv.compounding_frequency,
        total_contributions=res.total_contributions,
        future_value=res.future_value_after_tax,
        profit=res.future_value_after_tax - res.total_contributions,
    )


def compare(loans: Iterable[Loan], investments: Iterable[InvestmentParameters]) -> ComparisonResult:
    """
    Sum loan costs and investment values independently, then net them.

    Each investment's profit is its after-tax future value minus its *own* nominal
    contributions; net_profit_loss = total investment profit - total loan interest.
    Entries never interact, and empty lists contribute zero.
    """
    loan_rows = [_loan_outcome(loan) for loan in loans]
    inv_rows = [_investment_outcome(inv) for inv in investments]

    for row in loan_rows:
        logger.debug("loan %r (%s): total=%.2f interest=%.2f", row.name, row.loan_type.value, row.total_cost, row.interest_paid)
    for inv_row in inv_rows:
        logger.debug("investment %r: value=%.2f profit=%.2f", inv_row.name, inv_row.future_value, inv_row.profit)

    total_loan_cost = sum(r.total_cost for r in loan_rows)
    total_loan_interest = sum(r.interest_paid for r in loan_rows)
    total_investment_value = sum(r.future_value for r in inv_rows)
    total_investment_profit = sum(r.profit for r in inv_rows)
    net = total_investment_profit - total_loan_interest

    logger.debug(
        "compared %d loan(s) vs %d investment(s): net profit/loss %.2f", len(loan_rows), len(inv_rows), net
    )

    return ComparisonResult(
        total_loan_cost=total_loan_cost,
        total_loan_interest=total_loan_interest,
        total_investment_value=total_investment_value,
        total_investment_profit=total_investment_profit,
        net_profit_loss=net,
        loans=loan_rows,
        investments=inv_rows,
    )


__all__ = ["compare"]
