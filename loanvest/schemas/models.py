# loanvest/schemas/models.py

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .labels import CompoundingFrequency, LoanType, parse_compounding

# Every input/output record is an immutable value; NaN/Inf never pass validation.
_FROZEN = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

# =========================
# Core inputs: loans
# =========================


class LoanParameters(BaseModel):
    """
    Flat parameter record for a single loan computation.

    The optional fields belong to specific loan types and must be populated if and
    only if that type needs them (see `build_loan`).
    """

    model_config = _FROZEN

    principal: float = Field(..., ge=0, description="Amount borrowed (currency units).")
    annual_interest_rate: float = Field(..., ge=0, description="Annual nominal rate as a fraction (e.g., 0.045 = 4.5%).")
    term_in_years: float = Field(..., gt=0, description="Full loan term in years.")
    adjustment_period_years: float | None = Field(None, description="Adjustable-rate only: years between rate resets.")
    rate_adjustment_per_period: float | None = Field(
        None, description="Adjustable-rate only: fraction added to the annual rate at each reset (e.g., 0.005 = +0.5%)."
    )
    balloon_payment_year: float | None = Field(None, description="Balloon only: year at which the remaining balance is due.")
    interest_only_years: float | None = Field(None, description="Interest-only only: initial span with no principal reduction.")


class _LoanBase(BaseModel):
    """Fields shared by every loan variant."""

    model_config = _FROZEN

    name: str = Field("Loan", description="Display name; not used by computation.")
    principal: float = Field(..., ge=0, description="Amount borrowed (currency units).")
    annual_interest_rate: float = Field(..., ge=0, description="Annual nominal rate as a fraction (e.g., 0.045 = 4.5%).")
    term_in_years: float = Field(..., gt=0, description="Full loan term in years.")

    @property
    def loan_type(self) -> LoanType:
        return LoanType(self.kind)  # type: ignore[attr-defined]

    def parameters(self) -> LoanParameters:
        """Flatten the variant back into a LoanParameters record."""
        data = self.model_dump(exclude={"name", "kind"})
        return LoanParameters(**data)


class AnnuityLoan(_LoanBase):
    """Constant monthly payment; interest share shrinks over time."""

    kind: Literal["annuity"] = "annuity"


class FixedRateLoan(_LoanBase):
    """Same cash flows as an annuity loan; kept distinct for display."""

    kind: Literal["fixed_rate"] = "fixed_rate"


class StraightLoan(_LoanBase):
    """Constant principal portion; total payment shrinks over time."""

    kind: Literal["straight"] = "straight"


class BulletLoan(_LoanBase):
    """Interest-only payments with the full principal repaid at maturity."""

    kind: Literal["bullet"] = "bullet"


class AdjustableRateLoan(_LoanBase):
    """Rate steps up by `rate_adjustment_per_period` at every reset."""

    kind: Literal["adjustable_rate"] = "adjustable_rate"
    adjustment_period_years: float = Field(..., gt=0, description="Years between rate resets.")
    rate_adjustment_per_period: float = Field(..., description="Fraction added to the annual rate at each reset.")


class BalloonLoan(_LoanBase):
    """Whole-term annuity payments until the balloon year, then the balance in one lump sum."""

    kind: Literal["balloon"] = "balloon"
    balloon_payment_year: float = Field(..., ge=0, description="Year at which the remaining balance is due in full.")

    @model_validator(mode="after")
    def _balloon_within_term(self) -> BalloonLoan:
        if self.balloon_payment_year > self.term_in_years:
            raise ValueError("balloon_payment_year must not exceed term_in_years")
        return self


class InterestOnlyLoan(_LoanBase):
    """Interest-only for an initial span, then amortizing over the rest of the term."""

    kind: Literal["interest_only"] = "interest_only"
    interest_only_years: float = Field(..., ge=0, description="Initial span during which only interest is paid.")

    @model_validator(mode="after")
    def _io_within_term(self) -> InterestOnlyLoan:
        if self.interest_only_years > self.term_in_years:
            raise ValueError("interest_only_years must not exceed term_in_years")
        return self


Loan = Annotated[
    AnnuityLoan | FixedRateLoan | StraightLoan | BulletLoan | AdjustableRateLoan | BalloonLoan | InterestOnlyLoan,
    Field(discriminator="kind"),
]

LOAN_VARIANTS: dict[LoanType, type[_LoanBase]] = {
    LoanType.annuity: AnnuityLoan,
    LoanType.fixed_rate: FixedRateLoan,
    LoanType.straight: StraightLoan,
    LoanType.bullet: BulletLoan,
    LoanType.adjustable_rate: AdjustableRateLoan,
    LoanType.balloon: BalloonLoan,
    LoanType.interest_only: InterestOnlyLoan,
}

# Which optional LoanParameters fields each type requires.
REQUIRED_OPTIONAL_FIELDS: dict[LoanType, frozenset[str]] = {
    LoanType.annuity: frozenset(),
    LoanType.fixed_rate: frozenset(),
    LoanType.straight: frozenset(),
    LoanType.bullet: frozenset(),
    LoanType.adjustable_rate: frozenset({"adjustment_period_years", "rate_adjustment_per_period"}),
    LoanType.balloon: frozenset({"balloon_payment_year"}),
    LoanType.interest_only: frozenset({"interest_only_years"}),
}

_OPTIONAL_FIELDS = frozenset(
    {"adjustment_period_years", "rate_adjustment_per_period", "balloon_payment_year", "interest_only_years"}
)


def build_loan(loan_type: LoanType, params: LoanParameters, *, name: str = "Loan") -> Loan:
    """
    Convert a (LoanType, LoanParameters) pair into its tagged loan variant.

    Raises:
        InvalidParametersError: an optional field is set for a type that does not use it,
            a required one is missing, or the variant rejects the values.
    """
    from loanvest.core.finance.errors import InvalidParametersError

    required = REQUIRED_OPTIONAL_FIELDS[loan_type]
    populated = {k for k in _OPTIONAL_FIELDS if getattr(params, k) is not None}

    missing = required - populated
    if missing:
        raise InvalidParametersError(f"{loan_type.label} requires: {', '.join(sorted(missing))}")
    extra = populated - required
    if extra:
        raise InvalidParametersError(f"{loan_type.label} does not use: {', '.join(sorted(extra))}")

    data = params.model_dump(exclude=_OPTIONAL_FIELDS - required)
    try:
        return LOAN_VARIANTS[loan_type](name=name, **data)  # type: ignore[return-value]
    except ValidationError as e:
        raise InvalidParametersError(f"{loan_type.label} validation failed:\n{e}") from e


# =========================
# Core inputs: investments
# =========================


class InvestmentParameters(BaseModel):
    """Lump sum plus monthly contributions, compounded at a fixed frequency, taxed on gains at the end."""

    model_config = _FROZEN

    name: str = Field("Investment", description="Display name; not used by computation.")
    principal: float = Field(..., ge=0, description="Initial lump sum invested.")
    annual_return_rate: float = Field(..., gt=-1, description="Expected annual return as a fraction (e.g., 0.07 = 7%).")
    term_years: float = Field(..., gt=0, description="Investment horizon in years.")
    monthly_contribution: float = Field(0.0, ge=0, description="Amount added every month.")
    tax_rate_percent: float = Field(0.0, ge=0, le=100, description="Flat tax on gains, in percent (25 = 25%).")
    compounding_frequency: CompoundingFrequency = Field(
        CompoundingFrequency.monthly, description="Compounding periods per year (12, 4, 2 or 1)."
    )

    @field_validator("compounding_frequency", mode="before")
    @classmethod
    def _coerce_frequency(cls, v: object) -> object:
        # Accept names/labels ("quarterly", "Semi-Annually") as well as periods/year.
        if isinstance(v, str):
            return parse_compounding(v)
        return v


# =========================
# Computed outputs
# =========================


class LoanResult(BaseModel):
    """Total cash paid over the life of a loan and the interest part of it."""

    model_config = _FROZEN

    total_cost: float = Field(..., description="Sum of every payment, balloon/bullet repayment included.")
    interest_paid: float = Field(..., description="total_cost - principal.")


class InvestmentResult(BaseModel):
    """Projected value of an investment at the end of its term."""

    model_config = _FROZEN

    future_value_after_tax: float = Field(..., description="Final value net of tax on gains.")
    future_value_before_tax: float = Field(..., description="Principal growth plus contribution stream, untaxed.")
    total_contributions: float = Field(..., description="Nominal cash paid in: principal + monthly contributions.")
    tax_paid: float = Field(..., description="Tax on gains; negative when gains are negative (credit effect).")
    profit: float = Field(..., description="future_value_after_tax - total_contributions.")


class MonthlyPayment(BaseModel):
    """
    Immutable record of a single month in a loan's cash-flow schedule.

    Attributes:
        month: 1-based month index.
        interest: Interest paid this month.
        principal: Principal repaid this month (includes balloon/bullet repayments).
        payment: Total cash paid this month.
        balance: Remaining principal after this month's payment.
    """

    model_config = ConfigDict(frozen=True)

    month: int
    interest: float
    principal: float
    payment: float
    balance: float


class LoanOutcome(BaseModel):
    """Per-loan line of a comparison."""

    model_config = ConfigDict(frozen=True)

    name: str
    loan_type: LoanType
    term_in_years: float
    principal: float
    monthly_payment: float
    total_cost: float
    interest_paid: float


class InvestmentOutcome(BaseModel):
    """Per-investment line of a comparison."""

    model_config = ConfigDict(frozen=True)

    name: str
    term_years: float
    annual_return_rate: float
    monthly_contribution: float
    compounding_frequency: CompoundingFrequency
    total_contributions: float
    future_value: float
    profit: float


class ComparisonResult(BaseModel):
    """Loans vs. investments, summed and netted."""

    model_config = ConfigDict(frozen=True)

    total_loan_cost: float = Field(..., description="Sum of every loan's total cost.")
    total_loan_interest: float = Field(..., description="Sum of every loan's interest paid.")
    total_investment_value: float = Field(..., description="Sum of every investment's after-tax future value.")
    total_investment_profit: float = Field(..., description="Sum of (future value - own total contributions).")
    net_profit_loss: float = Field(..., description="total_investment_profit - total_loan_interest.")
    loans: list[LoanOutcome] = Field(default_factory=list, description="Per-loan breakdown, in input order.")
    investments: list[InvestmentOutcome] = Field(default_factory=list, description="Per-investment breakdown, in input order.")

    @property
    def investments_win(self) -> bool:
        return self.net_profit_loss > 0
