"""Unit tests for amortization schedule generation"""

import pytest
from datetime import date
from decimal import Decimal
from moto_finance.domain.amortization import (
    DEGENERATE_RATE_WARNING,
    DIVISION_BY_ZERO_WARNING,
    NO_INSTALLMENTS_WARNING,
    NON_FINITE_PRINCIPAL_WARNING,
    calculate_payment_dates,
    compute_schedule,
    periods_per_year,
)
from moto_finance.domain.models import PaymentFrequency


def assert_pays_off(result, principal):
    """Capital chains from entry to entry and ends at zero"""
    schedule = result.schedule
    assert sum(entry.amortization for entry in schedule) == principal
    assert schedule[-1].capital_at_period_end == 0
    for current, following in zip(schedule, schedule[1:]):
        assert current.capital_at_period_end == following.capital_at_period_start
    for entry in schedule:
        assert entry.capital_at_period_end <= entry.capital_at_period_start


def test_periods_per_year():
    """Test frequency lookup with MONTHLY fallback"""
    assert periods_per_year(PaymentFrequency.WEEKLY) == 52
    assert periods_per_year("BIWEEKLY") == 26
    assert periods_per_year("monthly") == 12
    assert periods_per_year("QUARTERLY") == 4
    assert periods_per_year("ANNUALLY") == 1
    assert periods_per_year(None) == 12
    assert periods_per_year("DAILY") == 12


def test_zero_rate_even_split():
    """Test interest-free plan with evenly divisible principal"""
    result = compute_schedule(120000, 12, 0, PaymentFrequency.MONTHLY)

    assert result.installment_amount == 10000
    assert result.total_payment == 120000
    assert result.total_interest == 0
    assert result.warning is None
    assert len(result.schedule) == 12
    assert all(entry.calculated_installment_amount == 10000 for entry in result.schedule)
    assert all(entry.interest_for_period == 0 for entry in result.schedule)
    assert_pays_off(result, 120000)


def test_zero_rate_last_installment_takes_remainder():
    """Test installment rounds up and the last one pays what is left"""
    result = compute_schedule(100, 3, 0)

    assert result.installment_amount == 34
    assert [entry.amortization for entry in result.schedule] == [34, 34, 32]
    assert result.total_payment == 100
    assert result.total_payment == sum(entry.amortization for entry in result.schedule)
    assert_pays_off(result, 100)


def test_zero_rate_omitted_rate_defaults_to_zero():
    result = compute_schedule(6000, 6, None)

    assert result.installment_amount == 1000
    assert result.total_interest == 0


def test_zero_principal():
    """Test nothing to finance yields a zero schedule"""
    result = compute_schedule(0, 6, 45, "MONTHLY")

    assert result.installment_amount == 0
    assert result.total_payment == 0
    assert result.total_interest == 0
    assert len(result.schedule) == 6
    assert all(entry.amortization == 0 for entry in result.schedule)
    assert all(entry.calculated_installment_amount == 0 for entry in result.schedule)


def test_negative_principal_treated_as_nothing_to_finance():
    """Test down payment above price does not produce negative installments"""
    result = compute_schedule(-5000, 3, 30)

    assert result.installment_amount == 0
    assert result.total_payment == 0
    assert all(entry.capital_at_period_start == 0 for entry in result.schedule)


def test_non_positive_installments_degrade_with_warning():
    """Test zero installments never divides by zero"""
    result = compute_schedule(10000, 0, 30)

    assert result.installment_amount == 0
    assert result.total_payment == 0
    assert result.schedule == []
    assert result.warning == NO_INSTALLMENTS_WARNING


def test_fixed_installment_schedule():
    """Test French amortization at 1% per month with ceiling rounding"""
    result = compute_schedule(12000, 12, 12, PaymentFrequency.MONTHLY)

    assert result.warning is None
    assert result.installment_amount == 1067
    assert result.total_interest == 798
    assert result.total_payment == 12798

    first = result.schedule[0]
    assert first.installment_number == 1
    assert first.capital_at_period_start == 12000
    assert first.interest_for_period == 120
    assert first.amortization == 947
    assert first.capital_at_period_end == 11053

    # 110.53 of interest rounds up, never down
    assert result.schedule[1].interest_for_period == 111

    last = result.schedule[-1]
    assert last.installment_number == 12
    assert last.capital_at_period_start == 1050
    assert last.interest_for_period == 11
    assert last.amortization == 1050
    assert last.calculated_installment_amount == 1061

    assert all(entry.calculated_installment_amount == 1067 for entry in result.schedule[:-1])
    assert_pays_off(result, 12000)


def test_totals_match_schedule():
    result = compute_schedule(850000, 18, 65, PaymentFrequency.MONTHLY)

    assert result.total_interest == sum(entry.interest_for_period for entry in result.schedule)
    assert result.total_payment == sum(entry.calculated_installment_amount for entry in result.schedule)
    assert result.installment_amount == result.schedule[0].calculated_installment_amount


@pytest.mark.parametrize(
    "principal,installments,annual_rate,frequency",
    [
        (12000, 12, 12, PaymentFrequency.MONTHLY),
        (2500000, 24, 70, PaymentFrequency.MONTHLY),
        (999999, 52, 45, PaymentFrequency.WEEKLY),
        (340000, 26, 38.5, PaymentFrequency.BIWEEKLY),
        (75000, 8, 22, PaymentFrequency.QUARTERLY),
        (1500000, 5, 90, PaymentFrequency.ANNUALLY),
        (100, 36, 120, PaymentFrequency.MONTHLY),
        (5000, 1, 30, PaymentFrequency.MONTHLY),
    ],
)
def test_payoff_invariant(principal, installments, annual_rate, frequency):
    """Test every schedule amortizes exactly the principal"""
    result = compute_schedule(principal, installments, annual_rate, frequency)

    assert result.warning is None
    assert len(result.schedule) == installments
    assert_pays_off(result, principal)


def test_installment_never_below_theoretical_payment():
    """Test rounding direction: the customer always pays at least the formula amount"""
    principal, installments, annual_rate = 730000, 15, 47
    rate = annual_rate / 100 / 12
    growth = (1 + rate) ** installments
    theoretical = principal * rate * growth / (growth - 1)

    result = compute_schedule(principal, installments, annual_rate, "MONTHLY")

    assert float(result.installment_amount) >= theoretical
    for entry in result.schedule:
        assert float(entry.interest_for_period) >= float(entry.capital_at_period_start) * rate - 1e-6


def test_single_installment_pays_everything():
    result = compute_schedule(5000, 1, 12, PaymentFrequency.MONTHLY)

    assert len(result.schedule) == 1
    assert result.schedule[0].interest_for_period == 50
    assert result.schedule[0].calculated_installment_amount == 5050
    assert result.total_payment == 5050


def test_degenerate_rate_falls_back_to_simple_split():
    """Test -100% per period cannot be amortized"""
    result = compute_schedule(1000, 4, -1200, PaymentFrequency.MONTHLY)

    assert result.warning == DEGENERATE_RATE_WARNING
    assert result.installment_amount == 250
    assert result.total_payment == 1000
    assert result.total_interest == 0
    assert result.schedule == []


def test_rate_below_minus_one_per_period_falls_back():
    result = compute_schedule(1000, 3, -500, PaymentFrequency.ANNUALLY)

    assert result.warning == DEGENERATE_RATE_WARNING
    assert result.installment_amount == 334
    assert result.total_payment == 1002


def test_vanishing_rate_hits_division_by_zero_guard():
    """Test a rate too small to move (1+r)^n falls back instead of failing"""
    result = compute_schedule(1000, 3, "1e-30", PaymentFrequency.MONTHLY)

    assert result.warning == DIVISION_BY_ZERO_WARNING
    assert result.installment_amount == 334
    assert result.total_payment == 1002
    assert result.schedule == []


@pytest.mark.parametrize(
    "annual_rate",
    [float("inf"), float("-inf"), float("nan"), "Infinity", "NaN"],
)
def test_non_finite_rate_falls_back_to_simple_split(annual_rate):
    """Test an unusable rate degrades instead of raising"""
    result = compute_schedule(1000, 12, annual_rate, PaymentFrequency.MONTHLY)

    assert result.warning == DEGENERATE_RATE_WARNING
    assert result.installment_amount == 84
    assert result.total_payment == 1008
    assert result.schedule == []


@pytest.mark.parametrize(
    "principal,installments,annual_rate",
    [
        (1000, 3300, 1e307),
        (1000, 500, "1e5000"),
        (1e300, 4000, 1e300),
    ],
)
def test_rate_overflowing_annuity_formula_falls_back(principal, installments, annual_rate):
    """Test (1 + r) ** n beyond the decimal range degrades instead of raising"""
    result = compute_schedule(principal, installments, annual_rate, PaymentFrequency.MONTHLY)

    assert result.warning == DEGENERATE_RATE_WARNING
    assert result.schedule == []
    assert result.total_interest == 0
    assert result.total_payment == result.installment_amount * installments


@pytest.mark.parametrize("principal", [float("nan"), float("inf"), float("-inf"), "NaN"])
def test_non_finite_principal_schedules_nothing(principal):
    result = compute_schedule(principal, 12, 10)

    assert result.warning == NON_FINITE_PRINCIPAL_WARNING
    assert result.installment_amount == 0
    assert result.total_payment == 0
    assert result.schedule == []


@pytest.mark.parametrize(
    "principal,installments,annual_rate,frequency",
    [
        (float("nan"), 0, float("nan"), "WEEKLY"),
        (1000, 1, 1e308, "ANNUALLY"),
        (1e308, 12, 1e-300, "MONTHLY"),
        (1e-300, 6, -99, "QUARTERLY"),
        (1000, 24, -1199.99, "MONTHLY"),
        (0.001, 3, 1e307, "BIWEEKLY"),
    ],
)
def test_extreme_inputs_never_raise(principal, installments, annual_rate, frequency):
    result = compute_schedule(principal, installments, annual_rate, frequency)

    assert result.installment_amount >= 0
    if not result.schedule:
        assert result.warning is not None


def test_negative_rate_above_degenerate_threshold_still_pays_off():
    """Test negative rates do not raise and still amortize the principal"""
    result = compute_schedule(12000, 12, -12, PaymentFrequency.MONTHLY)

    assert result.warning is None
    assert_pays_off(result, 12000)


def test_fractional_principal_and_float_inputs():
    """Test float inputs are handled as exact decimals"""
    result = compute_schedule(1000.5, 2, 0)

    assert result.installment_amount == 501
    assert result.schedule[-1].amortization == Decimal("499.5")
    assert result.total_payment == Decimal("1000.5")


def test_repeated_calls_are_idempotent():
    first = compute_schedule(480000, 24, 55, PaymentFrequency.MONTHLY)
    second = compute_schedule(480000, 24, 55, PaymentFrequency.MONTHLY)

    assert first == second


def test_currency_is_carried_through():
    result = compute_schedule(1000, 2, 0, currency="ARS")
    assert result.currency == "ARS"


def test_schedule_due_dates():
    """Test first installment is due on the start date, month ends clamp"""
    result = compute_schedule(3000, 3, 0, PaymentFrequency.MONTHLY, start_date=date(2026, 1, 31))

    assert [entry.due_date for entry in result.schedule] == [
        date(2026, 1, 31),
        date(2026, 2, 28),
        date(2026, 3, 31),
    ]


def test_schedule_without_start_date_has_no_due_dates():
    result = compute_schedule(3000, 3, 10)
    assert all(entry.due_date is None for entry in result.schedule)


def test_calculate_payment_dates_weekly():
    next_due, final = calculate_payment_dates(date(2026, 1, 15), 4, PaymentFrequency.WEEKLY)

    assert next_due == date(2026, 1, 22)
    assert final == date(2026, 2, 5)


def test_calculate_payment_dates_quarterly():
    next_due, final = calculate_payment_dates(date(2026, 1, 10), 4, "QUARTERLY")

    assert next_due == date(2026, 4, 10)
    assert final == date(2026, 10, 10)


def test_calculate_payment_dates_single_installment():
    start = date(2026, 10, 19)
    assert calculate_payment_dates(start, 1, "ANNUALLY") == (start, start)


def test_calculate_payment_dates_no_installments():
    assert calculate_payment_dates(date(2026, 10, 19), 0) == (None, None)
