"""Amortization schedules for current-account (installment) sales"""

from datetime import date
from decimal import Decimal, InvalidOperation, Overflow
from typing import List, Optional, Tuple

from moto_finance.domain.models import AmortizationScheduleEntry, PaymentFrequency, ScheduleResult
from moto_finance.utils.date_utils import add_periods
from moto_finance.utils.money import HUNDRED, ZERO, Number, ceil_amount, to_decimal

# Remaining capital below this is treated as paid off
CAPITAL_EPSILON = Decimal("0.01")

NO_INSTALLMENTS_WARNING = "The installment count must be positive; nothing was scheduled."
DEGENERATE_RATE_WARNING = (
    "Invalid interest rate for fixed-installment amortization; a simple split was used."
)
DIVISION_BY_ZERO_WARNING = (
    "Could not compute the installment with interest (division by zero); a simple split was used."
)
NON_FINITE_PRINCIPAL_WARNING = "The amount to finance is not a finite number; nothing was scheduled."


def periods_per_year(frequency: PaymentFrequency | str | None) -> int:
    """Payment periods per year for a frequency token (MONTHLY when unknown)"""
    return PaymentFrequency.parse(frequency).periods_per_year


def compute_schedule(
    principal: Number,
    installments: int,
    annual_rate_percent: Number | None = 0,
    frequency: PaymentFrequency | str | None = PaymentFrequency.MONTHLY,
    start_date: Optional[date] = None,
    currency: str = "USD",
) -> ScheduleResult:
    """
    Build the amortization schedule of a financed sale.

    Policy, evaluated in order:
    - principal not finite: nothing scheduled, warning
    - principal <= 0 or installments <= 0: equal split, no interest
    - annual rate of 0: equal split iterating the capital down to zero
    - rate per period not finite or <= -1 (or overflowing the annuity
      formula): simple split, empty schedule, warning
    - annuity denominator of 0: simple split, empty schedule, warning
    - otherwise fixed installment (French system) with the last installment
      absorbing the rounding drift

    Every amount is rounded up to whole currency units. Never raises for
    numeric input: degenerate cases come back with `warning` set.

    Example:
        120000 over 12 monthly installments at 0% -> 12 x 10000
    """
    principal = to_decimal(principal)
    annual_rate = to_decimal(annual_rate_percent)
    frequency = PaymentFrequency.parse(frequency)
    installments = int(installments)

    if not principal.is_finite():
        result = ScheduleResult(
            installment_amount=ZERO,
            total_payment=ZERO,
            total_interest=ZERO,
            schedule=[],
            warning=NON_FINITE_PRINCIPAL_WARNING,
        )
    elif principal <= 0 or installments <= 0:
        result = _equal_split(principal, installments)
    elif annual_rate == 0:
        result = _interest_free_schedule(principal, installments)
    else:
        try:
            result = _fixed_installment_schedule(principal, installments, annual_rate, frequency)
        except (Overflow, InvalidOperation):
            # Rate too large for the decimal context
            result = _simple_split_fallback(principal, installments, DEGENERATE_RATE_WARNING)

    result.currency = currency
    if start_date is not None:
        for entry in result.schedule:
            entry.due_date = add_periods(start_date, frequency, entry.installment_number - 1)

    return result


def calculate_payment_dates(
    start_date: date,
    installments: int,
    frequency: PaymentFrequency | str | None = PaymentFrequency.MONTHLY,
) -> Tuple[Optional[date], Optional[date]]:
    """
    Next due date and final payment date of a current account.

    The first installment falls due on the start date and each following one
    a period later, so with more than one installment the next due date is one
    period after the start.

    Returns:
        (next_due_date, final_payment_date), both None without installments
    """
    if installments <= 0:
        return None, None

    frequency = PaymentFrequency.parse(frequency)
    next_due_date = add_periods(start_date, frequency, 1) if installments > 1 else start_date
    final_payment_date = add_periods(start_date, frequency, installments - 1)

    return next_due_date, final_payment_date


def _equal_split(principal: Decimal, installments: int) -> ScheduleResult:
    """Nothing (or nothing sensible) to finance: split without interest"""
    if installments <= 0:
        return ScheduleResult(
            installment_amount=ZERO,
            total_payment=ZERO,
            total_interest=ZERO,
            schedule=[],
            warning=NO_INSTALLMENTS_WARNING,
        )

    installment_amount = ceil_amount(principal / installments) if principal > 0 else ZERO
    capital = principal if principal > 0 else ZERO

    schedule = []
    for number in range(1, installments + 1):
        # Last installment pays off whatever is left
        amortization = capital if number == installments else installment_amount
        schedule.append(
            AmortizationScheduleEntry(
                installment_number=number,
                capital_at_period_start=capital,
                interest_for_period=ZERO,
                amortization=amortization,
                calculated_installment_amount=amortization,
                capital_at_period_end=max(ZERO, capital - amortization),
            )
        )
        capital -= amortization

    return ScheduleResult(
        installment_amount=installment_amount,
        total_payment=installment_amount * installments,
        total_interest=ZERO,
        schedule=schedule,
    )


def _interest_free_schedule(principal: Decimal, installments: int) -> ScheduleResult:
    installment_amount = ceil_amount(principal / installments)
    capital = principal

    schedule = []
    for number in range(1, installments + 1):
        if capital <= 0:
            amortization = ZERO
        elif number == installments or capital < installment_amount:
            amortization = capital
        else:
            amortization = installment_amount

        capital_end = max(ZERO, capital - amortization)
        schedule.append(
            AmortizationScheduleEntry(
                installment_number=number,
                capital_at_period_start=capital,
                interest_for_period=ZERO,
                amortization=amortization,
                calculated_installment_amount=amortization,
                capital_at_period_end=capital_end,
            )
        )
        capital = capital_end

    return ScheduleResult(
        installment_amount=installment_amount,
        total_payment=sum((entry.calculated_installment_amount for entry in schedule), ZERO),
        total_interest=ZERO,
        schedule=schedule,
    )


def _simple_split_fallback(principal: Decimal, installments: int, warning: str) -> ScheduleResult:
    installment_amount = ceil_amount(principal / installments)
    return ScheduleResult(
        installment_amount=installment_amount,
        total_payment=installment_amount * installments,
        total_interest=ZERO,
        schedule=[],
        warning=warning,
    )


def _fixed_installment_schedule(
    principal: Decimal,
    installments: int,
    annual_rate: Decimal,
    frequency: PaymentFrequency,
) -> ScheduleResult:
    rate_per_period = annual_rate / HUNDRED / frequency.periods_per_year

    if not rate_per_period.is_finite() or rate_per_period <= -1:
        return _simple_split_fallback(principal, installments, DEGENERATE_RATE_WARNING)

    growth = (1 + rate_per_period) ** installments
    denominator = growth - 1
    if denominator == 0:
        return _simple_split_fallback(principal, installments, DIVISION_BY_ZERO_WARNING)

    fixed_installment = ceil_amount(principal * rate_per_period * growth / denominator)

    schedule: List[AmortizationScheduleEntry] = []
    capital = principal
    for number in range(1, installments + 1):
        interest = ceil_amount(capital * rate_per_period)
        amortization = fixed_installment - interest
        installment_amount = fixed_installment

        if number == installments:
            amortization = capital
            installment_amount = ceil_amount(capital + interest)
        elif amortization > capital:
            # Compounded rounding paid the capital off early
            amortization = capital
            installment_amount = ceil_amount(capital + interest)

        capital_end = max(ZERO, capital - amortization)
        schedule.append(
            AmortizationScheduleEntry(
                installment_number=number,
                capital_at_period_start=ceil_amount(capital),
                interest_for_period=interest,
                amortization=ceil_amount(amortization),
                calculated_installment_amount=installment_amount,
                capital_at_period_end=ceil_amount(capital_end),
            )
        )
        capital = capital_end if capital_end >= CAPITAL_EPSILON else ZERO

    total_interest = sum((entry.interest_for_period for entry in schedule), ZERO)
    total_payment = sum((entry.calculated_installment_amount for entry in schedule), ZERO)

    return ScheduleResult(
        installment_amount=schedule[0].calculated_installment_amount,
        total_payment=ceil_amount(total_payment),
        total_interest=ceil_amount(total_interest),
        schedule=schedule,
    )
