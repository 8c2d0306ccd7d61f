# loanvest/schemas/labels.py
from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import TypeVar

T = TypeVar("T", bound=Enum)

# =========================
# Canonical label enums
# =========================


class LoanType(str, Enum):
    """
    Closed set of supported loan structures.
    FIXED_RATE computes exactly like ANNUITY; the labels exist for display.
    """

    annuity = "annuity"
    straight = "straight"
    bullet = "bullet"
    adjustable_rate = "adjustable_rate"
    fixed_rate = "fixed_rate"
    balloon = "balloon"
    interest_only = "interest_only"

    @property
    def label(self) -> str:
        return LOAN_TYPE_LABELS[self]

    @property
    def description(self) -> str:
        return LOAN_TYPE_DESCRIPTIONS[self]


class CompoundingFrequency(int, Enum):
    """Compounding periods per year."""

    monthly = 12
    quarterly = 4
    semi_annually = 2
    annually = 1

    @property
    def label(self) -> str:
        return COMPOUNDING_LABELS[self]


# =========================
# Display surfaces
# =========================

LOAN_TYPE_LABELS = {
    LoanType.annuity: "Annuity Loan",
    LoanType.straight: "Straight Loan",
    LoanType.bullet: "Bullet Loan",
    LoanType.adjustable_rate: "Adjustable-Rate Loan",
    LoanType.fixed_rate: "Fixed-Rate Loan",
    LoanType.balloon: "Balloon Loan",
    LoanType.interest_only: "Interest-Only Loan",
}

LOAN_TYPE_DESCRIPTIONS = {
    LoanType.annuity: "Fixed periodic payments, with interest decreasing and principal increasing over time",
    LoanType.straight: "Fixed principal payments, with decreasing total payments over time",
    LoanType.bullet: "Only interest is paid periodically; the full principal is repaid at the end",
    LoanType.adjustable_rate: "Interest rate changes periodically, affecting payment amounts",
    LoanType.fixed_rate: "Interest rate stays the same for a set period, keeping payments constant",
    LoanType.balloon: "Small payments initially, followed by a large lump-sum payment at the end",
    LoanType.interest_only: "Only interest is paid for an initial period before principal payments begin",
}

COMPOUNDING_LABELS = {
    CompoundingFrequency.monthly: "Monthly",
    CompoundingFrequency.quarterly: "Quarterly",
    CompoundingFrequency.semi_annually: "Semi-Annually",
    CompoundingFrequency.annually: "Annually",
}

# Display order used by pickers and the CLI listing.
LOAN_TYPE_ORDER: list[LoanType] = list(LoanType)
COMPOUNDING_ORDER: list[CompoundingFrequency] = list(CompoundingFrequency)


# =========================
# Alias/token maps (with synonyms)
# Used by the form layer to accept what people actually type.
# =========================

LOAN_TYPE_ALIASES = {
    "annuity": LoanType.annuity,
    "annuity loan": LoanType.annuity,
    "amortizing": LoanType.annuity,
    "straight": LoanType.straight,
    "straight loan": LoanType.straight,
    "linear": LoanType.straight,
    "bullet": LoanType.bullet,
    "bullet loan": LoanType.bullet,
    "adjustable rate": LoanType.adjustable_rate,
    "adjustable rate loan": LoanType.adjustable_rate,
    "arm": LoanType.adjustable_rate,
    "fixed rate": LoanType.fixed_rate,
    "fixed rate loan": LoanType.fixed_rate,
    "fixed": LoanType.fixed_rate,
    "balloon": LoanType.balloon,
    "balloon loan": LoanType.balloon,
    "interest only": LoanType.interest_only,
    "interest only loan": LoanType.interest_only,
    "io": LoanType.interest_only,
}

COMPOUNDING_ALIASES = {
    "monthly": CompoundingFrequency.monthly,
    "12": CompoundingFrequency.monthly,
    "quarterly": CompoundingFrequency.quarterly,
    "4": CompoundingFrequency.quarterly,
    "semi annually": CompoundingFrequency.semi_annually,
    "semiannually": CompoundingFrequency.semi_annually,
    "semi annual": CompoundingFrequency.semi_annually,
    "2": CompoundingFrequency.semi_annually,
    "annually": CompoundingFrequency.annually,
    "annual": CompoundingFrequency.annually,
    "yearly": CompoundingFrequency.annually,
    "1": CompoundingFrequency.annually,
}


# =========================
# Normalization helpers
# =========================

# Spaces, underscores and hyphens are interchangeable separators.
_SEPARATORS = re.compile(r"[ _\-]+")


def _normalize_token(text: str) -> str:
    return _SEPARATORS.sub(" ", text.strip().lower()).strip()


def _lookup(m: Mapping[str, T], text: str, kind: str) -> T:
    key = _normalize_token(text)
    try:
        return m[key]
    except KeyError:
        raise ValueError(f"unknown {kind}: {text!r}") from None


def parse_loan_type(text: str | LoanType) -> LoanType:
    """Resolve a loan type from its value, label or a common synonym."""
    if isinstance(text, LoanType):
        return text
    return _lookup(LOAN_TYPE_ALIASES, text, "loan type")


def parse_compounding(value: str | int | CompoundingFrequency) -> CompoundingFrequency:
    """Resolve a compounding frequency from periods/year, its name or its label."""
    if isinstance(value, CompoundingFrequency):
        return value
    if isinstance(value, int):
        try:
            return CompoundingFrequency(value)
        except ValueError:
            raise ValueError(f"unknown compounding frequency: {value!r}") from None
    return _lookup(COMPOUNDING_ALIASES, value, "compounding frequency")
