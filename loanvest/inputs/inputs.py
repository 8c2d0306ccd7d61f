# loanvest/inputs/inputs.py
"""
Inputs loader for the loan vs. investment calculator.

Goals
-----
- Deterministic, file-first inputs with validation via Pydantic.
- Accept the scenario either bare or wrapped with run options.
- Accept loan/investment entries either model-shaped (fractions, `kind` tag) or
  form-shaped (text as typed into the app, percentages); form-shaped entries
  go through `loanvest.inputs.forms`.
- Minimal environment-variable overrides for CI/CLI convenience.

Supported JSON shapes
---------------------
1) Bare scenario (root = Scenario)
   {
     "loans": [{"kind": "annuity", "principal": 100000, "annual_interest_rate": 0.045, "term_in_years": 30}],
     "investments": [{"principal": 100000, "annual_return_rate": 0.07, "term_years": 30}]
   }

2) Structured (root = AppInputs)
   {
     "scenario": { ... Scenario ... },
     "run": {"out": "comparison.md", "title": "My plan", "show_schedule": true}
   }

   Form-shaped entries look like
   {"loan_type": "Balloon Loan", "loan_amount": "250,000", "interest_rate_percent": "5.1",
    "term_years": "25", "balloon_payment_percent": "60"}

Environment overrides (optional)
--------------------------------
- LOANVEST_OUT            -> AppInputs.run.out
- LOANVEST_TITLE          -> AppInputs.run.title
- LOANVEST_SHOW_SCHEDULE  -> AppInputs.run.show_schedule (1/true/yes/on)

Public API
----------
- class InputsLoader:
    - load(path: str | Path | None) -> AppInputs
    - load_json(text: str) -> AppInputs
    - with_overrides(cfg, **kwargs) -> AppInputs (non-destructive copies)
    - apply_env_overrides(cfg) -> AppInputs (LOANVEST_* run options)
- function load_inputs(path: str | Path | None) -> AppInputs  (convenience)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError

from loanvest.core.finance.errors import InvalidParametersError
from loanvest.logs import get_logger
from loanvest.schemas.models import InvestmentParameters, Loan

from .forms import InvestmentForm, LoanForm

logger = get_logger(__name__)

# Keys that only appear in form-shaped entries.
_LOAN_FORM_KEYS = frozenset({"loan_amount", "interest_rate_percent", "loan_type"})
_INVESTMENT_FORM_KEYS = frozenset({"investment_amount", "return_percent"})

_TRUTHY = {"1", "true", "yes", "on"}

# ----------------------------
# Pydantic models for structured inputs
# ----------------------------


class RunOptions(BaseModel):
    """Runtime (non-financial) options controlling the report."""

    out: str = Field("comparison.md", description="Path to write the Markdown report.")
    title: str | None = Field(None, description="Report title override.")
    show_schedule: bool = Field(False, description="Include a yearly amortization table per loan.")


class Scenario(BaseModel):
    """The loans and investments to compare."""

    loans: list[Loan] = Field(default_factory=list)
    investments: list[InvestmentParameters] = Field(default_factory=list)


class AppInputs(BaseModel):
    """
    Full input payload.

    Attributes:
        scenario: The validated loans and investments.
        run:      Non-financial, runtime options for the current execution.
    """

    scenario: Scenario
    run: RunOptions = RunOptions()


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class InputsLoader:
    """
    File-first inputs loader with light env overrides.

    Responsibilities:
        - Read JSON from a file or string
        - Accept both the bare and structured shapes
        - Translate form-shaped entries through the form layer
        - Validate with Pydantic
        - Apply environment overrides for run options

    Default search (when path=None):
        1) ./data/sample/scenario.json
        2) ./config.json
    """

    env_prefix: str = "LOANVEST_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppInputs:
        """
        Load inputs from a JSON file (path). If path is None, try defaults.

        Returns:
            AppInputs (validated).

        Raises:
            FileNotFoundError: no such file / no default file.
            InvalidParametersError: JSON is malformed or fails validation.
        """
        p = self._resolve_path(path)
        logger.info("loading inputs from %s", p)
        raw = self._read_json_file(p)
        return self._build(raw)

    def load_json(self, text: str) -> AppInputs:
        """Load inputs from a JSON string (bare or structured shape)."""
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise InvalidParametersError(f"Invalid JSON payload: {e}") from e
        return self._build(raw)

    def with_overrides(
        self,
        cfg: AppInputs,
        *,
        out: str | None = None,
        title: str | None = None,
        show_schedule: bool | None = None,
    ) -> AppInputs:
        """
        Return a *new* AppInputs with provided non-null overrides applied to RunOptions.
        Does not mutate the original instance.
        """
        updates: dict[str, Any] = {}
        if out is not None:
            updates["out"] = out
        if title is not None:
            updates["title"] = title
        if show_schedule is not None:
            updates["show_schedule"] = show_schedule

        if not updates:
            return cfg

        logger.debug("run overrides: %s", updates)
        run_new = cfg.run.model_copy(update=updates)
        return cfg.model_copy(update={"run": run_new})

    def apply_env_overrides(self, cfg: AppInputs) -> AppInputs:
        """
        Apply light, optional overrides from environment variables to run options.
        Also used for inputs that were not loaded from a file (the CLI sample).
        """
        prefix = self.env_prefix
        updates: dict[str, Any] = {}

        out = os.getenv(f"{prefix}OUT")
        if out:
            updates["out"] = out

        title = os.getenv(f"{prefix}TITLE")
        if title:
            updates["title"] = title

        show = os.getenv(f"{prefix}SHOW_SCHEDULE")
        if show:
            updates["show_schedule"] = show.strip().lower() in _TRUTHY

        if not updates:
            return cfg

        logger.debug("environment overrides: %s", updates)
        run_new = cfg.run.model_copy(update=updates)
        return cfg.model_copy(update={"run": run_new})

    # ---------- Internals ----------

    def _build(self, raw: Any) -> AppInputs:
        if not isinstance(raw, dict):
            raise InvalidParametersError("Inputs root must be a JSON object.")
        data = self._wrap_bare_scenario(raw)
        data = self._translate_forms(data)
        cfg = self._parse_root(data)
        return self.apply_env_overrides(cfg)

    def _resolve_path(self, path: str | Path | None) -> Path:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Inputs file not found: {p}")
            return p

        # Default search order
        for candidate in (Path("data/sample/scenario.json"), Path("config.json")):
            if candidate.exists():
                return candidate
        raise FileNotFoundError(
            "No inputs path provided and no default inputs found. Looked for ./data/sample/scenario.json and ./config.json."
        )

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise InvalidParametersError(f"Unsupported inputs format for {p.name}; only .json is supported.")
        try:
            json_file = json.loads(p.read_text(encoding="utf-8"))
            return cast(dict[str, Any], json_file)
        except json.JSONDecodeError as e:
            raise InvalidParametersError(f"Invalid JSON in {p}: {e}") from e

    def _wrap_bare_scenario(self, raw: dict[str, Any]) -> dict[str, Any]:
        """Accept a bare scenario at the root by wrapping it as {"scenario": raw}."""
        if "scenario" in raw:
            return raw
        return {"scenario": raw}

    def _translate_forms(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Replace form-shaped loan/investment entries with their model dumps.
        Model-shaped entries pass through untouched for Pydantic to validate.
        """
        try:
            return self._translate_entries(data)
        except ValidationError as e:
            raise InvalidParametersError(f"Form entry validation failed:\n{e}") from e

    def _translate_entries(self, data: dict[str, Any]) -> dict[str, Any]:
        scenario = data.get("scenario")
        if not isinstance(scenario, dict):
            return data

        loans = []
        for entry in scenario.get("loans") or []:
            if isinstance(entry, dict) and "kind" not in entry and _LOAN_FORM_KEYS & entry.keys():
                entry = LoanForm.model_validate(entry).to_loan().model_dump()
            loans.append(entry)

        investments = []
        for entry in scenario.get("investments") or []:
            if isinstance(entry, dict) and _INVESTMENT_FORM_KEYS & entry.keys():
                entry = InvestmentForm.model_validate(entry).to_investment().model_dump()
            investments.append(entry)

        return {**data, "scenario": {**scenario, "loans": loans, "investments": investments}}

    def _parse_root(self, data: dict[str, Any]) -> AppInputs:
        """
        Validate and return structured AppInputs.
        """
        try:
            return AppInputs.model_validate(data)
        except ValidationError as e:
            raise InvalidParametersError(f"Inputs validation failed:\n{e}") from e


# ----------------------------
# Convenience function
# ----------------------------


def load_inputs(path: str | Path | None = None) -> AppInputs:
    """Convenience wrapper for one-shot callers."""
    return InputsLoader().load(path)
