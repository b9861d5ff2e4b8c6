"""Banking promotion composition: compatibility, merged installment rates and final price"""

from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Sequence

from moto_finance.domain.models import (
    DiscountType,
    InstallmentOption,
    InstallmentOverlapPolicy,
    Promotion,
    PromotionCalculation,
)
from moto_finance.utils.money import HUNDRED, ZERO, Number, to_decimal

# date.weekday() order, Monday first
WEEKDAYS = ["lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"]

CARD_PAYMENT_TYPES = {"credit", "debit", "card", "tarjeta"}


def is_card_payment(method_type: Optional[str]) -> bool:
    """Credit and debit methods are grouped together as card payments"""
    if not method_type:
        return False
    return method_type.strip().lower() in CARD_PAYMENT_TYPES


def are_promotions_compatible(
    candidate: Promotion,
    already_selected: Sequence[Promotion],
    payment_method_is_card: bool,
    overlap_policy: InstallmentOverlapPolicy = InstallmentOverlapPolicy.CARD_ONLY,
) -> bool:
    """
    Decide whether `candidate` can be combined with the promotions already selected.

    Rules:
    - Nothing selected yet: always compatible
    - Installment overlap (card payments under the default policy): when both
      promotions define enabled installment plans they must share at least
      one installment count
    - Discounts and surcharges are never mixed in one sale
    """
    if not already_selected:
        return True

    if _overlap_rule_applies(overlap_policy, payment_method_is_card):
        candidate_counts = set(candidate.enabled_installment_counts())
        if candidate_counts:
            for promotion in already_selected:
                selected_counts = set(promotion.enabled_installment_counts())
                if selected_counts and not candidate_counts & selected_counts:
                    return False

    for promotion in already_selected:
        if candidate.has_discount and promotion.has_surcharge:
            return False
        if candidate.has_surcharge and promotion.has_discount:
            return False

    return True


def _overlap_rule_applies(policy: InstallmentOverlapPolicy, payment_method_is_card: bool) -> bool:
    policy = InstallmentOverlapPolicy(policy)
    if policy == InstallmentOverlapPolicy.ALWAYS:
        return True
    if policy == InstallmentOverlapPolicy.NEVER:
        return False
    return payment_method_is_card


def get_best_rates_by_installment(promotions: Iterable[Promotion]) -> Dict[int, Decimal]:
    """Lowest interest rate offered for each installment count over enabled plans"""
    best_rates: Dict[int, Decimal] = {}
    for promotion in promotions:
        if promotion is None:
            continue
        for plan in promotion.enabled_plans():
            rate = to_decimal(plan.interest_rate)
            current = best_rates.get(plan.installments)
            if current is None or rate < current:
                best_rates[plan.installments] = rate
    return best_rates


def get_available_installment_plans(promotions: Iterable[Promotion]) -> List[InstallmentOption]:
    """
    Union of installment counts across promotions with the best rate for each.

    Example:
        3 installments at 0% in one promotion and at 10% in another
        -> [InstallmentOption(installments=3, interest_rate=0)]
    """
    best_rates = get_best_rates_by_installment(promotions)
    return [
        InstallmentOption(installments=installments, interest_rate=best_rates[installments])
        for installments in sorted(best_rates)
    ]


def get_common_installment_plans(promotions: Sequence[Promotion]) -> List[int]:
    """Installment counts enabled in every promotion, in the first promotion's order"""
    if not promotions:
        return []

    first_counts = promotions[0].enabled_installment_counts()
    if len(promotions) == 1:
        return first_counts

    return [
        installments
        for installments in first_counts
        if all(installments in promotion.enabled_installment_counts() for promotion in promotions)
    ]


def calculate_final_price(
    original_price: Number,
    discount_type: DiscountType | str,
    discount_value: Number,
    promotions: Optional[Sequence[Promotion]] = None,
) -> Decimal:
    """
    Price after the manual discount and then each promotion, in the given order.

    Promotions compose multiplicatively, so [10% off, 5% surcharge] is
    price * 0.90 * 1.05, not price * 0.95. Never below zero.
    """
    price = to_decimal(original_price)
    discount_type = DiscountType(discount_type)
    discount_value = to_decimal(discount_value)

    if discount_type == DiscountType.PERCENTAGE and discount_value > 0:
        price = price * (1 - discount_value / HUNDRED)
    elif discount_type == DiscountType.FIXED and discount_value > 0:
        price = price - discount_value

    for promotion in promotions or []:
        if promotion is None:
            continue
        if promotion.discount_rate:
            price = price * (1 - to_decimal(promotion.discount_rate) / HUNDRED)
        elif promotion.surcharge_rate:
            price = price * (1 + to_decimal(promotion.surcharge_rate) / HUNDRED)

    return max(ZERO, price)


def calculate_promotion_amount(
    amount: Number,
    promotion: Promotion,
    installments: Optional[int] = None,
) -> PromotionCalculation:
    """
    Apply a single promotion to an amount, optionally financed in installments.

    The matching enabled plan's interest rate is charged flat on the
    discounted/surcharged amount, which is then split evenly.
    """
    amount = to_decimal(amount)
    final_amount = amount
    discount_amount = ZERO
    surcharge_amount = ZERO

    if promotion.has_discount:
        discount_amount = amount * to_decimal(promotion.discount_rate) / HUNDRED
        final_amount = amount - discount_amount
    elif promotion.has_surcharge:
        surcharge_amount = amount * to_decimal(promotion.surcharge_rate) / HUNDRED
        final_amount = amount + surcharge_amount

    plan = None
    if installments and installments > 1:
        plan = next(
            (p for p in promotion.enabled_plans() if p.installments == installments),
            None,
        )

    total_interest = ZERO
    installment_amount = ZERO
    if plan is not None:
        rate = to_decimal(plan.interest_rate)
        if rate > 0:
            total_interest = final_amount * rate / HUNDRED
            final_amount = final_amount + total_interest
        installment_amount = final_amount / installments

    return PromotionCalculation(
        original_amount=amount,
        final_amount=final_amount,
        discount_amount=discount_amount if discount_amount > 0 else None,
        surcharge_amount=surcharge_amount if surcharge_amount > 0 else None,
        installment_amount=installment_amount if plan is not None and installment_amount > 0 else None,
        total_interest=total_interest if plan is not None and total_interest > 0 else None,
        installments=installments if plan is not None else None,
    )


def current_day_of_week(today: Optional[date] = None) -> str:
    """Spanish weekday name used by promotion schedules"""
    today = today or date.today()
    return WEEKDAYS[today.weekday()]


def is_promotion_active_on_day(promotion: Promotion, day: str) -> bool:
    if not promotion.active_days:
        return True
    return day.strip().lower() in {d.strip().lower() for d in promotion.active_days}


def filter_promotions_by_day(
    promotions: Iterable[Promotion],
    day: Optional[str] = None,
) -> List[Promotion]:
    """Enabled promotions running on `day` (today when omitted)"""
    day = day or current_day_of_week()
    return [
        promotion
        for promotion in promotions
        if promotion.is_enabled and is_promotion_active_on_day(promotion, day)
    ]
