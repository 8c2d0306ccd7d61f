import pytest

from loanvest.core.finance import NonFiniteResultError
from loanvest.core.finance.amortization import amortize, monthly_payment, payment_schedule, rate_blocks
from loanvest.schemas.labels import LoanType
from tests.utils import make_loan


def _remaining_balance(principal, r, pmt, k):
    growth = (1 + r) ** k
    return principal * growth - pmt * (growth - 1) / r


# ---- Adjustable-rate ----


def test_adjustable_payment_uses_initial_rate_over_full_term():
    adjustable = make_loan(LoanType.adjustable_rate)
    annuity = make_loan(LoanType.annuity)
    assert monthly_payment(adjustable) == monthly_payment(annuity)


def test_adjustable_blocks_reamortize_over_block_length():
    # With 1-year blocks the first block re-amortizes the whole principal in 12 months
    adjustable = make_loan(LoanType.adjustable_rate, adjustment_period_years=1.0, rate_adjustment_per_period=0.005)
    one_year = make_loan(LoanType.annuity, term_in_years=1)

    sched = payment_schedule(adjustable)
    assert len(sched) == 360
    assert sched[0].payment == pytest.approx(monthly_payment(one_year), rel=1e-12)
    assert sched[11].balance == pytest.approx(0.0, abs=1e-6)
    assert amortize(adjustable).total_cost == pytest.approx(amortize(one_year).total_cost, abs=1e-4)


def test_adjustable_single_block_matches_annuity():
    adjustable = make_loan(LoanType.adjustable_rate, adjustment_period_years=30.0, rate_adjustment_per_period=0.01)
    annuity = make_loan(LoanType.annuity)
    assert amortize(adjustable).total_cost == pytest.approx(amortize(annuity).total_cost, rel=1e-9)


def test_adjustable_sub_month_period_collapses_to_one_block():
    adjustable = make_loan(LoanType.adjustable_rate, adjustment_period_years=0.01, rate_adjustment_per_period=0.005)
    annuity = make_loan(LoanType.annuity)
    sched = payment_schedule(adjustable)
    assert len(sched) == 360
    assert {round(p.payment, 9) for p in sched} == {round(monthly_payment(annuity), 9)}


def test_adjustable_first_block_retires_the_loan():
    # 10-year loan, 5-year blocks: block 1 amortizes the full principal at the initial rate
    loan = make_loan(
        LoanType.adjustable_rate,
        principal=50_000,
        annual_interest_rate=0.045,
        term_in_years=10,
        adjustment_period_years=5.0,
        rate_adjustment_per_period=0.01,
    )
    sched = payment_schedule(loan)
    first_block_rate = sched[0].interest / 50_000
    assert first_block_rate == pytest.approx(0.045 / 12, rel=1e-12)
    # block 1 retires the loan, so block 2 carries only float dust
    assert all(abs(p.payment) < 1e-6 for p in sched[60:])


def test_rate_blocks_step_by_adjustment_over_period():
    # 12-year loan, 5-year periods, +1% per period: three periods, the last one 2 years long
    loan = make_loan(
        LoanType.adjustable_rate,
        annual_interest_rate=0.045,
        term_in_years=12,
        adjustment_period_years=5.0,
        rate_adjustment_per_period=0.01,
    )
    blocks = rate_blocks(loan)
    step = (0.01 / 12) / 5.0

    assert [(first, months) for first, months, _ in blocks] == [(1, 60), (61, 60), (121, 24)]
    assert [rate for _, _, rate in blocks] == pytest.approx([0.045 / 12, 0.045 / 12 + step, 0.045 / 12 + 2 * step], rel=1e-12)


def test_rate_blocks_decline_with_negative_adjustment():
    loan = make_loan(
        LoanType.adjustable_rate,
        annual_interest_rate=0.03,
        term_in_years=5,
        adjustment_period_years=1.0,
        rate_adjustment_per_period=-0.01,
    )
    rates = [rate for _, _, rate in rate_blocks(loan)]
    assert len(rates) == 5
    assert rates == sorted(rates, reverse=True)
    # 0.25% - 3 * (0.01 / 12) lands on (or within float dust of) zero
    assert rates[3] == pytest.approx(0.0, abs=1e-15)
    assert rates[4] < 0


@pytest.mark.parametrize("rate,adjustment", [(0.03, -0.01), (0.07, -0.01), (0.003, -0.001), (0.09, -0.03)])
def test_declining_adjustable_rate_finishes_with_finite_total(rate, adjustment):
    loan = make_loan(
        LoanType.adjustable_rate,
        annual_interest_rate=rate,
        adjustment_period_years=1.0,
        rate_adjustment_per_period=adjustment,
    )
    one_year = make_loan(LoanType.annuity, annual_interest_rate=rate, term_in_years=1)

    res = amortize(loan)
    assert res.total_cost == pytest.approx(amortize(one_year).total_cost, abs=1e-4)
    assert len(payment_schedule(loan)) == 360


@pytest.mark.parametrize("loan_type", [LoanType.annuity, LoanType.balloon, LoanType.adjustable_rate])
@pytest.mark.parametrize("rate", [1e-17, 1e-12])
def test_near_zero_rate_uses_linear_payment(loan_type, rate):
    loan = make_loan(loan_type, annual_interest_rate=rate)
    assert monthly_payment(loan) == pytest.approx(100_000 / 360, rel=1e-9)
    assert amortize(loan).total_cost == pytest.approx(100_000, rel=1e-6)


# ---- Balloon ----


def test_balloon_lump_sum_folded_into_last_row():
    loan = make_loan(LoanType.balloon, balloon_payment_year=24.0)
    r = 0.045 / 12
    pmt = monthly_payment(loan)
    expected_lump = _remaining_balance(100_000, r, pmt, 288)

    sched = payment_schedule(loan)
    assert len(sched) == 288
    assert sched[-1].month == 288
    assert sched[-1].balance == 0.0
    assert sched[-1].payment == pytest.approx(pmt + expected_lump, rel=1e-9)
    assert amortize(loan).total_cost == pytest.approx(287 * pmt + sched[-1].payment, rel=1e-9)


def test_balloon_at_term_matches_annuity():
    balloon = make_loan(LoanType.balloon, balloon_payment_year=30.0)
    annuity = make_loan(LoanType.annuity)
    assert amortize(balloon).total_cost == pytest.approx(amortize(annuity).total_cost, rel=1e-9)


@pytest.mark.parametrize("year", [0.0, 0.05])
def test_balloon_before_first_month_repays_principal_immediately(year):
    loan = make_loan(LoanType.balloon, balloon_payment_year=year)
    sched = payment_schedule(loan)
    assert len(sched) == 1
    assert sched[0].month == 0
    assert sched[0].payment == 100_000

    res = amortize(loan)
    assert res.total_cost == 100_000
    assert res.interest_paid == 0.0


def test_earlier_balloon_costs_less_interest():
    early = amortize(make_loan(LoanType.balloon, balloon_payment_year=5.0))
    late = amortize(make_loan(LoanType.balloon, balloon_payment_year=25.0))
    assert early.interest_paid < late.interest_paid


# ---- Schedule vs. total ----


@pytest.mark.parametrize(
    "loan_type",
    [LoanType.straight, LoanType.adjustable_rate, LoanType.balloon, LoanType.interest_only],
)
def test_simulated_totals_equal_schedule_sum(loan_type):
    loan = make_loan(loan_type, principal=80_000, annual_interest_rate=0.052, term_in_years=30)
    sched = payment_schedule(loan)
    assert amortize(loan).total_cost == pytest.approx(sum(p.payment for p in sched), rel=1e-12)


@pytest.mark.parametrize("loan_type", list(LoanType))
def test_interest_is_total_minus_principal(loan_type):
    loan = make_loan(loan_type, principal=42_000, annual_interest_rate=0.039, term_in_years=30)
    res = amortize(loan)
    assert res.interest_paid == pytest.approx(res.total_cost - 42_000, abs=1e-9)


@pytest.mark.parametrize("loan_type", list(LoanType))
def test_zero_principal_costs_nothing(loan_type):
    loan = make_loan(loan_type, principal=0.0)
    res = amortize(loan)
    assert res.total_cost == pytest.approx(0.0, abs=1e-12)
    assert res.interest_paid == pytest.approx(0.0, abs=1e-12)


# ---- Overflow ----


def test_overflowing_rate_raises_non_finite():
    loan = make_loan(LoanType.annuity, annual_interest_rate=1e6, term_in_years=1000)
    with pytest.raises(NonFiniteResultError):
        monthly_payment(loan)
    with pytest.raises(NonFiniteResultError):
        amortize(loan)


def test_overflowing_bullet_total_raises_non_finite():
    loan = make_loan(LoanType.bullet, principal=1e300, annual_interest_rate=1e10, term_in_years=1000)
    with pytest.raises(NonFiniteResultError):
        amortize(loan)
