# loanvest/reports/generator.py
from __future__ import annotations

from collections.abc import Sequence

from loanvest.core.finance.amortization import payment_schedule
from loanvest.schemas.models import (
    ComparisonResult,
    InvestmentOutcome,
    Loan,
    LoanOutcome,
    MonthlyPayment,
)


def _fmt_currency(x: float) -> str:
    """
    Format a float as USD-style currency with thousands separators.

    Example:
        123456.789 -> $123,456.79
        -2000 -> -$2,000.00
    """
    sign = "-" if x < 0 else ""
    return f"{sign}${abs(x):,.2f}"


def _fmt_pct(x: float) -> str:
    """
    Format a fraction as a percentage with two decimals.

    Example:
        0.065 -> 6.50%
    """
    return f"{x * 100:.2f}%"


def _fmt_years(x: float) -> str:
    return f"{x:g} years"


def _section(title: str) -> str:
    """
    Render a level-2 heading for Markdown sections.
    """
    return f"\n## {title}\n"


# -----------------------
# Schedule aggregation
# -----------------------


def yearly_totals(schedule: Sequence[MonthlyPayment]) -> list[tuple[int, float, float, float, float]]:
    """
    Group a monthly schedule by loan year.

    Returns:
        (year, payments, interest, principal, ending_balance) per year, 1-based.
        A month-0 row (balloon due at origination) counts toward year 1.
    """
    out: list[tuple[int, float, float, float, float]] = []
    for row in schedule:
        year = max(1, (row.month - 1) // 12 + 1)
        if out and out[-1][0] == year:
            _, pay, intr, prin, _ = out[-1]
            out[-1] = (year, pay + row.payment, intr + row.interest, prin + row.principal, row.balance)
        else:
            out.append((year, row.payment, row.interest, row.principal, row.balance))
    return out


# -----------------------
# Sections
# -----------------------


def _render_header(title: str) -> str:
    return f"# {title}\n"


def _render_loans(loans: list[LoanOutcome], result: ComparisonResult) -> str:
    """
    Render per-loan details followed by the loan totals.
    """
    lines = [_section("Loan Details")]
    if not loans:
        lines.append("No loans.")
    for loan in loans:
        lines.extend(
            [
                f"### {loan.name}",
                f"- **Type:** {loan.loan_type.label}",
                f"- **Term:** {_fmt_years(loan.term_in_years)}",
                f"- **Principal:** {_fmt_currency(loan.principal)}",
                f"- **Monthly Payment:** {_fmt_currency(loan.monthly_payment)}",
                f"- **Total Cost:** {_fmt_currency(loan.total_cost)}",
                f"- **Interest Paid:** {_fmt_currency(loan.interest_paid)}",
                "",
            ]
        )
    lines.append(f"**Total Loan Cost:** {_fmt_currency(result.total_loan_cost)}  ")
    lines.append(f"**Total Interest Cost:** {_fmt_currency(result.total_loan_interest)}")
    return "\n".join(lines) + "\n"


def _render_investments(investments: list[InvestmentOutcome], result: ComparisonResult) -> str:
    """
    Render per-investment details followed by the investment totals.
    """
    lines = [_section("Investment Details")]
    if not investments:
        lines.append("No investments.")
    for inv in investments:
        lines.extend(
            [
                f"### {inv.name}",
                f"- **Term:** {_fmt_years(inv.term_years)}",
                f"- **Return:** {_fmt_pct(inv.annual_return_rate)}",
                f"- **Monthly Contribution:** {_fmt_currency(inv.monthly_contribution)}",
                f"- **Compounding:** {inv.compounding_frequency.label}",
                f"- **Total Invested:** {_fmt_currency(inv.total_contributions)}",
                f"- **Final Value:** {_fmt_currency(inv.future_value)}",
                f"- **Profit:** {_fmt_currency(inv.profit)}",
                "",
            ]
        )
    lines.append(f"**Total Investment Value:** {_fmt_currency(result.total_investment_value)}  ")
    lines.append(f"**Total Investment Profit:** {_fmt_currency(result.total_investment_profit)}")
    return "\n".join(lines) + "\n"


def verdict_sentence(result: ComparisonResult) -> str:
    """One-line reading of net_profit_loss."""
    if result.net_profit_loss > 0:
        return f"Your investment profits exceed your loan interest costs by {_fmt_currency(result.net_profit_loss)}."
    return f"Your loan interest costs exceed your investment profits by {_fmt_currency(abs(result.net_profit_loss))}."


def _render_summary(result: ComparisonResult) -> str:
    lines = [
        _section("Summary"),
        "| | Amount |",
        "| :--- | ---: |",
        f"| Investment Profit | {_fmt_currency(result.total_investment_profit)} |",
        f"| Loan Interest | {_fmt_currency(result.total_loan_interest)} |",
        f"| **Net Profit/Loss** | **{_fmt_currency(result.net_profit_loss)}** |",
        "",
        verdict_sentence(result),
    ]
    return "\n".join(lines) + "\n"


def _render_schedule(loan: Loan) -> str:
    """
    Yearly amortization table for one loan.
    """
    rows = yearly_totals(payment_schedule(loan))
    if not rows:
        return ""
    header = [
        _section(f"Amortization – {loan.name}"),
        "| Year | Payments | Interest | Principal | Ending Balance |",
        "| ---: | ---: | ---: | ---: | ---: |",
    ]
    body = [
        f"| {year} | {_fmt_currency(pay)} | {_fmt_currency(intr)} | {_fmt_currency(prin)} | {_fmt_currency(bal)} |"
        for year, pay, intr, prin, bal in rows
    ]
    return "\n".join(header + body) + "\n"


# -----------------------
# Orchestration
# -----------------------


def generate_report(
    result: ComparisonResult,
    loans: Sequence[Loan] | None = None,
    *,
    title_override: str | None = None,
    show_schedule: bool = False,
) -> str:
    """
    Generate a Markdown report for a loan vs. investment comparison.

    Sections:
      - Loan Details: per loan type, term, monthly payment, total cost, interest; totals
      - Investment Details: per investment term, return, contribution, value, profit; totals
      - Summary: investment profit vs. loan interest, net profit/loss and verdict
      - Amortization tables (yearly), when show_schedule and the loans are given
    """
    parts = [
        _render_header(title_override or "Loan vs. Investment Comparison"),
        _render_loans(result.loans, result),
        _render_investments(result.investments, result),
        _render_summary(result),
    ]
    if show_schedule and loans:
        parts.extend(_render_schedule(loan) for loan in loans)
    return "\n".join(part for part in parts if part).strip() + "\n"


def write_report(
    path: str,
    result: ComparisonResult,
    loans: Sequence[Loan] | None = None,
    *,
    title_override: str | None = None,
    show_schedule: bool = False,
) -> None:
    """
    Convenience helper to write the generated report to disk.
    """
    md = generate_report(result, loans, title_override=title_override, show_schedule=show_schedule)
    with open(path, "w", encoding="utf-8") as f:
        f.write(md)
