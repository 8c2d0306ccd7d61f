# loanvest/inputs/forms.py
"""
Form layer: what a user types into the calculator, before it becomes a model.

Every field is kept as text exactly as entered. Conversion to engine models
happens in `to_loan()` / `to_investment()`:
  - unparseable numbers fall back to a default (0 for amounts, type-specific
    defaults for the optional loan fields);
  - rates and tax are entered in percent and converted to fractions here;
  - balloon and interest-only spans are entered as a percentage of the term.

Defaulting lives here and only here; the engine only ever sees validated
models, and a form whose parsed values are out of range (e.g. a term of 0)
raises InvalidParametersError rather than producing a figure.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from loanvest.core.finance.errors import InvalidParametersError
from loanvest.schemas.labels import CompoundingFrequency, LoanType, parse_compounding, parse_loan_type
from loanvest.schemas.models import InvestmentParameters, Loan, LoanParameters, build_loan

DEFAULT_ADJUSTMENT_PERIOD_YEARS = 1.0
DEFAULT_RATE_ADJUSTMENT_PERCENT = 0.5
DEFAULT_BALLOON_PERCENT_OF_TERM = 80.0
DEFAULT_INTEREST_ONLY_PERCENT_OF_TERM = 50.0

# Thousands separators and currency/percent decorations people paste in.
_NUMBER_NOISE = re.compile(r"[\s,$%_]")


def parse_number(text: str | float | int | None, default: float = 0.0) -> float:
    """Parse user-entered text as a float; return `default` if it is empty, garbage or non-finite."""
    if text is None:
        return default
    if isinstance(text, int | float):
        val = float(text)
    else:
        cleaned = _NUMBER_NOISE.sub("", text)
        try:
            val = float(cleaned)
        except ValueError:
            return default
    return val if math.isfinite(val) else default


class LoanForm(BaseModel):
    """One loan card as entered (text fields, rates in percent)."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = "Loan"
    loan_type: str = Field(LoanType.annuity.value, description="Loan type value, label or synonym.")
    loan_amount: str = "100000"
    interest_rate_percent: str = "4.5"
    term_years: str = "30"
    adjustment_period_years: str = str(DEFAULT_ADJUSTMENT_PERIOD_YEARS)
    rate_adjustment_percent: str = str(DEFAULT_RATE_ADJUSTMENT_PERCENT)
    balloon_payment_percent: str = "80"
    interest_only_percent: str = "50"

    def parameters(self) -> tuple[LoanType, LoanParameters]:
        """Parse the text fields into a (LoanType, LoanParameters) pair."""
        try:
            kind = parse_loan_type(self.loan_type)
        except ValueError as e:
            raise InvalidParametersError(str(e)) from e

        principal = parse_number(self.loan_amount)
        rate = parse_number(self.interest_rate_percent) / 100.0
        term = parse_number(self.term_years)

        optional: dict[str, float] = {}
        if kind is LoanType.adjustable_rate:
            optional["adjustment_period_years"] = parse_number(self.adjustment_period_years, DEFAULT_ADJUSTMENT_PERIOD_YEARS)
            optional["rate_adjustment_per_period"] = (
                parse_number(self.rate_adjustment_percent, DEFAULT_RATE_ADJUSTMENT_PERCENT) / 100.0
            )
        elif kind is LoanType.balloon:
            pct = parse_number(self.balloon_payment_percent, DEFAULT_BALLOON_PERCENT_OF_TERM)
            optional["balloon_payment_year"] = term * (pct / 100.0)
        elif kind is LoanType.interest_only:
            pct = parse_number(self.interest_only_percent, DEFAULT_INTEREST_ONLY_PERCENT_OF_TERM)
            optional["interest_only_years"] = term * (pct / 100.0)

        try:
            params = LoanParameters(principal=principal, annual_interest_rate=rate, term_in_years=term, **optional)
        except ValidationError as e:
            raise InvalidParametersError(f"Loan {self.name!r} is invalid:\n{e}") from e
        return kind, params

    def to_loan(self) -> Loan:
        """Build the tagged loan model (AnnuityLoan, BalloonLoan, ...)."""
        kind, params = self.parameters()
        return build_loan(kind, params, name=self.name)


class InvestmentForm(BaseModel):
    """One investment card as entered (text fields, return and tax in percent)."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = "Investment"
    investment_amount: str = "100000"
    term_years: str = "30"
    return_percent: str = "7.0"
    tax_rate_percent: str = "25"
    monthly_contribution: str = "500"
    compounding_frequency: str | int = CompoundingFrequency.monthly.value

    def to_investment(self) -> InvestmentParameters:
        try:
            freq = parse_compounding(self.compounding_frequency)
            return InvestmentParameters(
                name=self.name,
                principal=parse_number(self.investment_amount),
                annual_return_rate=parse_number(self.return_percent) / 100.0,
                term_years=parse_number(self.term_years),
                monthly_contribution=parse_number(self.monthly_contribution),
                tax_rate_percent=parse_number(self.tax_rate_percent),
                compounding_frequency=freq,
            )
        except ValidationError as e:
            raise InvalidParametersError(f"Investment {self.name!r} is invalid:\n{e}") from e
        except ValueError as e:
            raise InvalidParametersError(str(e)) from e


# ----------------------------
# List management helpers
# ----------------------------


def _next_name(prefix: str, existing: Iterable[str]) -> str:
    return f"{prefix} {len(list(existing)) + 1}"


def next_loan_name(existing: Iterable[str]) -> str:
    """Name for a newly added loan card: 'Loan 2' when one loan already exists."""
    return _next_name("Loan", existing)


def next_investment_name(existing: Iterable[str]) -> str:
    """Name for a newly added investment card."""
    return _next_name("Investment", existing)
