"""Date manipulation utilities"""

from datetime import date
from dateutil.relativedelta import relativedelta

from moto_finance.domain.models import PaymentFrequency

# Calendar step for one payment period
_PERIOD_STEP = {
    PaymentFrequency.WEEKLY: relativedelta(weeks=1),
    PaymentFrequency.BIWEEKLY: relativedelta(weeks=2),
    PaymentFrequency.MONTHLY: relativedelta(months=1),
    PaymentFrequency.QUARTERLY: relativedelta(months=3),
    PaymentFrequency.ANNUALLY: relativedelta(years=1),
}


def add_periods(from_date: date, frequency: PaymentFrequency, periods: int) -> date:
    """Add payment periods to a date (month ends clamp, e.g. Jan 31 + 1 month = Feb 28)"""
    return from_date + _PERIOD_STEP[frequency] * periods
