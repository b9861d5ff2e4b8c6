"""Domain models - pure Python dataclasses representing pricing and financing entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class PaymentFrequency(str, Enum):
    """How often a current-account installment falls due"""

    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"

    @property
    def periods_per_year(self) -> int:
        return _PERIODS_PER_YEAR[self]

    @classmethod
    def parse(cls, token: "str | PaymentFrequency | None") -> "PaymentFrequency":
        """Resolve a frequency token; missing or unknown tokens mean MONTHLY"""
        if isinstance(token, cls):
            return token
        if not token:
            return cls.MONTHLY
        try:
            return cls(str(token).strip().upper())
        except ValueError:
            return cls.MONTHLY


_PERIODS_PER_YEAR = {
    PaymentFrequency.WEEKLY: 52,
    PaymentFrequency.BIWEEKLY: 26,
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.ANNUALLY: 1,
}


class DiscountType(str, Enum):
    """Manual discount applied by the salesperson before promotions"""

    PERCENTAGE = "percentage"
    FIXED = "fixed"
    NONE = "none"


class InstallmentOverlapPolicy(str, Enum):
    """When two promotions must share at least one installment count to be combined"""

    CARD_ONLY = "card_only"  # only for card payments
    ALWAYS = "always"
    NEVER = "never"


@dataclass(frozen=True)
class InstallmentPlan:
    """Installment count offered by a promotion with its interest rate (percent)"""

    installments: int
    interest_rate: Decimal = Decimal("0")
    is_enabled: bool = True


@dataclass(frozen=True)
class Promotion:
    """Banking promotion: flat discount or surcharge plus special installment rates"""

    id: int | str
    name: str = ""
    description: str = ""
    discount_rate: Optional[Decimal] = None
    surcharge_rate: Optional[Decimal] = None
    installment_plans: List[InstallmentPlan] = field(default_factory=list)
    is_enabled: bool = True
    active_days: List[str] = field(default_factory=list)  # empty = every day

    @property
    def has_discount(self) -> bool:
        return bool(self.discount_rate) and self.discount_rate > 0

    @property
    def has_surcharge(self) -> bool:
        return bool(self.surcharge_rate) and self.surcharge_rate > 0

    def enabled_plans(self) -> List[InstallmentPlan]:
        return [plan for plan in self.installment_plans if plan is not None and plan.is_enabled]

    def enabled_installment_counts(self) -> List[int]:
        return [plan.installments for plan in self.enabled_plans()]


@dataclass
class AmortizationScheduleEntry:
    """Single row of an amortization schedule"""

    installment_number: int
    capital_at_period_start: Decimal
    interest_for_period: Decimal
    amortization: Decimal
    calculated_installment_amount: Decimal
    capital_at_period_end: Decimal
    due_date: Optional[date] = None


@dataclass
class ScheduleResult:
    """
    Output of the amortization calculator.

    Degraded calculations are still usable results; `warning` carries the
    human-readable reason for the fallback.
    """

    installment_amount: Decimal
    total_payment: Decimal
    total_interest: Decimal
    schedule: List[AmortizationScheduleEntry]
    warning: Optional[str] = None
    currency: str = "USD"


@dataclass(frozen=True)
class InstallmentOption:
    """Installment count available across promotions with the best rate found"""

    installments: int
    interest_rate: Decimal


@dataclass
class PromotionCalculation:
    """Result of applying a single promotion to an amount"""

    original_amount: Decimal
    final_amount: Decimal
    discount_amount: Optional[Decimal] = None
    surcharge_amount: Optional[Decimal] = None
    installment_amount: Optional[Decimal] = None
    total_interest: Optional[Decimal] = None
    installments: Optional[int] = None
