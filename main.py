# main.py
"""
Entry Point — Loan vs. Investment Calculator

Purpose
-------
Compare what a set of loans costs against what a set of investments earns:
  1) Load the scenario (sample defaults or --config JSON).
  2) Run the financial engine (amortization, projection, aggregation).
  3) Write a Markdown report and print the net profit/loss.

Usage
-----
    python main.py
    python main.py --config data/sample/scenario.json --out comparison.md --schedule
    python main.py --list-types
"""

from __future__ import annotations

import argparse
import sys

from loanvest.core.finance import ENGINE_ERRORS, compare
from loanvest.inputs.inputs import AppInputs, InputsLoader, RunOptions, Scenario
from loanvest.logs import configure_logging, get_logger
from loanvest.reports.generator import verdict_sentence, write_report
from loanvest.schemas.labels import COMPOUNDING_ORDER, LOAN_TYPE_ORDER, CompoundingFrequency
from loanvest.schemas.models import AnnuityLoan, InvestmentParameters

logger = get_logger("cli")


def build_sample_inputs() -> AppInputs:
    """Return the calculator's default scenario: one annuity loan vs. one monthly-compounded investment."""
    return AppInputs(
        scenario=Scenario(
            loans=[
                AnnuityLoan(
                    name="Loan",
                    principal=100_000.0,
                    annual_interest_rate=0.045,
                    term_in_years=30,
                )
            ],
            investments=[
                InvestmentParameters(
                    name="Investment",
                    principal=100_000.0,
                    annual_return_rate=0.07,
                    term_years=30,
                    monthly_contribution=500.0,
                    tax_rate_percent=25.0,
                    compounding_frequency=CompoundingFrequency.monthly,
                )
            ],
        ),
        run=RunOptions(),
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for configurable runs."""
    p = argparse.ArgumentParser(description="Loan vs. Investment Calculator")
    p.add_argument("--config", type=str, default=None, help="Path to JSON scenario (bare or with run options).")
    p.add_argument("--out", type=str, default=None, help="Output Markdown path (overrides config).")
    p.add_argument("--title", type=str, default=None, help="Report title (overrides config).")
    p.add_argument(
        "--schedule",
        action="store_true",
        default=None,
        help="Include a yearly amortization table for every loan.",
    )
    p.add_argument("--list-types", action="store_true", help="List loan types and compounding frequencies, then exit.")
    p.add_argument("--debug", action="store_true", help="Verbose logging (same as LOANVEST_DEBUG=1).")
    return p.parse_args(argv)


def print_catalog() -> None:
    """Print the loan types and compounding frequencies a scenario may use."""
    print("Loan types:")
    for lt in LOAN_TYPE_ORDER:
        print(f"  {lt.value:<16} {lt.label}: {lt.description}")
    print("Compounding frequencies:")
    for cf in COMPOUNDING_ORDER:
        print(f"  {cf.value:<16} {cf.label}")


def main(argv: list[str] | None = None) -> int:
    """Run the comparison and write the report (default: comparison.md)."""
    args = parse_args(argv)
    configure_logging(debug=True if args.debug else None)

    if args.list_types:
        print_catalog()
        return 0

    loader = InputsLoader()
    try:
        if args.config:
            cfg = loader.load(args.config)
        else:
            cfg = loader.apply_env_overrides(build_sample_inputs())
        cfg = loader.with_overrides(cfg, out=args.out, title=args.title, show_schedule=args.schedule)

        logger.info("comparing %d loan(s) and %d investment(s)", len(cfg.scenario.loans), len(cfg.scenario.investments))
        result = compare(cfg.scenario.loans, cfg.scenario.investments)
        write_report(
            cfg.run.out,
            result,
            cfg.scenario.loans,
            title_override=cfg.run.title,
            show_schedule=cfg.run.show_schedule,
        )
    except (FileNotFoundError, *ENGINE_ERRORS) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"Report written to {cfg.run.out}")
    print(verdict_sentence(result))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
