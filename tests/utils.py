# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from typing import Any

from loanvest.schemas.labels import CompoundingFrequency, LoanType
from loanvest.schemas.models import (
    InvestmentParameters,
    Loan,
    LoanParameters,
    build_loan,
)

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_PRINCIPAL = 100_000.0
DEFAULT_LOAN_RATE = 0.045
DEFAULT_LOAN_TERM = 30.0

DEFAULT_INVESTMENT_RATE = 0.07
DEFAULT_INVESTMENT_TERM = 30.0
DEFAULT_CONTRIBUTION = 500.0
DEFAULT_TAX_PERCENT = 25.0

# Optional fields each loan type gets from make_loan() unless overridden
DEFAULT_OPTIONALS: dict[LoanType, dict[str, float]] = {
    LoanType.adjustable_rate: {"adjustment_period_years": 1.0, "rate_adjustment_per_period": 0.005},
    LoanType.balloon: {"balloon_payment_year": 24.0},
    LoanType.interest_only: {"interest_only_years": 15.0},
}

# Model-shaped scenario payload (bare root)
SAMPLE_SCENARIO: dict[str, Any] = {
    "loans": [
        {"kind": "annuity", "name": "Mortgage", "principal": 100_000, "annual_interest_rate": 0.045, "term_in_years": 30},
        {"kind": "bullet", "name": "Bullet", "principal": 10_000, "annual_interest_rate": 0.06, "term_in_years": 5},
    ],
    "investments": [
        {
            "name": "Index Fund",
            "principal": 100_000,
            "annual_return_rate": 0.07,
            "term_years": 30,
            "monthly_contribution": 500,
            "tax_rate_percent": 25,
            "compounding_frequency": 12,
        }
    ],
}

# Form-shaped entries (text as typed, percentages)
SAMPLE_LOAN_FORM: dict[str, Any] = {
    "name": "Car",
    "loan_type": "Balloon Loan",
    "loan_amount": "25,000",
    "interest_rate_percent": "6",
    "term_years": "5",
    "balloon_payment_percent": "80",
}

SAMPLE_INVESTMENT_FORM: dict[str, Any] = {
    "name": "Bonds",
    "investment_amount": "20000",
    "term_years": "10",
    "return_percent": "3.5",
    "tax_rate_percent": "30",
    "monthly_contribution": "0",
    "compounding_frequency": "Quarterly",
}

# -----------------------------
# Loan factories
# -----------------------------


def make_loan_parameters(
    principal: float = DEFAULT_PRINCIPAL,
    annual_interest_rate: float = DEFAULT_LOAN_RATE,
    term_in_years: float = DEFAULT_LOAN_TERM,
    **optional: float,
) -> LoanParameters:
    return LoanParameters(
        principal=principal,
        annual_interest_rate=annual_interest_rate,
        term_in_years=term_in_years,
        **optional,
    )


def make_loan(
    loan_type: LoanType = LoanType.annuity,
    principal: float = DEFAULT_PRINCIPAL,
    annual_interest_rate: float = DEFAULT_LOAN_RATE,
    term_in_years: float = DEFAULT_LOAN_TERM,
    name: str = "Loan",
    **overrides: float,
) -> Loan:
    """Build any loan variant; type-specific fields come from DEFAULT_OPTIONALS unless overridden."""
    optional = {**DEFAULT_OPTIONALS.get(loan_type, {}), **overrides}
    params = make_loan_parameters(principal, annual_interest_rate, term_in_years, **optional)
    return build_loan(loan_type, params, name=name)


# -----------------------------
# Investment factories
# -----------------------------


def make_investment(
    principal: float = DEFAULT_PRINCIPAL,
    annual_return_rate: float = DEFAULT_INVESTMENT_RATE,
    term_years: float = DEFAULT_INVESTMENT_TERM,
    monthly_contribution: float = DEFAULT_CONTRIBUTION,
    tax_rate_percent: float = DEFAULT_TAX_PERCENT,
    compounding_frequency: CompoundingFrequency = CompoundingFrequency.monthly,
    name: str = "Investment",
) -> InvestmentParameters:
    return InvestmentParameters(
        name=name,
        principal=principal,
        annual_return_rate=annual_return_rate,
        term_years=term_years,
        monthly_contribution=monthly_contribution,
        tax_rate_percent=tax_rate_percent,
        compounding_frequency=compounding_frequency,
    )
