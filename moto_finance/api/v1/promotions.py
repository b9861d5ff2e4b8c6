"""Banking promotion endpoints: compatibility, installment options and price composition"""

import logging
from decimal import Decimal
from typing import Optional
from fastapi import APIRouter, Depends, Request

from moto_finance.api.v1.schemas import (
    ActivePromotionsResponse,
    CompatibilityRequest,
    CompatibilityResponse,
    FinalPriceRequest,
    FinalPriceResponse,
    InstallmentOptionSchema,
    InstallmentPlansResponse,
    PromotionCalculationRequest,
    PromotionCalculationResponse,
    PromotionListRequest,
    RemainingAmountRequest,
    RemainingAmountResponse,
)
from moto_finance.api.dependencies import get_exchange_rate_client, get_overlap_policy, get_request_id
from moto_finance.infrastructure.clients.exchange_rate import ExchangeRateClient
from moto_finance.infrastructure.observability.metrics import record_compatibility
from moto_finance.domain.exceptions import ExchangeRateUnavailableError
from moto_finance.domain.models import InstallmentOverlapPolicy
from moto_finance.domain.pricing import calculate_remaining_amount, format_price, needs_exchange_rate, remaining_balance
from moto_finance.domain.promotions import (
    are_promotions_compatible,
    calculate_final_price,
    calculate_promotion_amount,
    current_day_of_week,
    filter_promotions_by_day,
    get_available_installment_plans,
    get_best_rates_by_installment,
    get_common_installment_plans,
    is_card_payment,
)

router = APIRouter()


def _optional_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


@router.post("/promotions/compatibility", response_model=CompatibilityResponse)
def check_compatibility(
    request_body: CompatibilityRequest,
    overlap_policy: InstallmentOverlapPolicy = Depends(get_overlap_policy),
):
    """Whether the candidate promotion can join the current selection"""
    compatible = are_promotions_compatible(
        request_body.candidate.to_domain(),
        [promotion.to_domain() for promotion in request_body.selected],
        is_card_payment(request_body.payment_method_type),
        overlap_policy,
    )
    record_compatibility(compatible)
    return CompatibilityResponse(compatible=compatible)


@router.post("/promotions/installment-plans", response_model=InstallmentPlansResponse)
def get_installment_plans(request_body: PromotionListRequest):
    """Merged installment options with the best rate per count"""
    promotions = [promotion.to_domain() for promotion in request_body.promotions]

    options = [
        InstallmentOptionSchema(installments=option.installments, interest_rate=float(option.interest_rate))
        for option in get_available_installment_plans(promotions)
    ]
    best_rates = {
        installments: float(rate)
        for installments, rate in get_best_rates_by_installment(promotions).items()
    }

    return InstallmentPlansResponse(
        options=options,
        best_rates=best_rates,
        common_installments=get_common_installment_plans(promotions),
    )


@router.post("/promotions/active", response_model=ActivePromotionsResponse)
def get_active_promotions(request_body: PromotionListRequest):
    """Enabled promotions running on the given weekday (today by default)"""
    day = request_body.day or current_day_of_week()
    promotions = [promotion.to_domain() for promotion in request_body.promotions]
    active = filter_promotions_by_day(promotions, day)
    return ActivePromotionsResponse(day=day, promotion_ids=[promotion.id for promotion in active])


@router.post("/promotions/final-price", response_model=FinalPriceResponse)
def get_final_price(request_body: FinalPriceRequest):
    """Price after manual discount and promotions, applied in the given order"""
    final_price = calculate_final_price(
        request_body.original_price,
        request_body.discount_type,
        request_body.discount_value,
        [promotion.to_domain() for promotion in request_body.promotions],
    )
    return FinalPriceResponse(
        final_price=float(final_price),
        formatted_price=format_price(final_price, request_body.currency.upper()),
    )


@router.post("/promotions/remaining-amount", response_model=RemainingAmountResponse)
async def get_remaining_amount(
    request_body: RemainingAmountRequest,
    request: Request,
    exchange_rate_client: ExchangeRateClient = Depends(get_exchange_rate_client),
):
    """
    Balance left after reservation and down payment.

    A USD/ARS reservation without an explicit rate uses the exchange
    rate API; if that fails the reservation is left unconverted.
    """
    request_id = get_request_id(request)
    total_currency = request_body.total_currency.upper()
    reservation_currency = request_body.reservation_currency.upper()
    exchange_rate = request_body.exchange_rate

    if (
        exchange_rate is None
        and needs_exchange_rate(total_currency, reservation_currency)
        and request_body.reservation_amount > 0
    ):
        try:
            exchange_rate = await exchange_rate_client.get_rate("USD", "ARS")
        except ExchangeRateUnavailableError as e:
            logging.warning(f"Exchange rate unavailable: {e}", extra={"request_id": request_id})

    remaining = calculate_remaining_amount(
        request_body.total_price,
        total_currency,
        request_body.reservation_amount,
        reservation_currency,
        exchange_rate=exchange_rate,
        down_payment=request_body.down_payment,
    )
    balance = remaining_balance(
        request_body.total_price,
        total_currency,
        request_body.reservation_amount,
        reservation_currency,
        exchange_rate=exchange_rate,
        down_payment=request_body.down_payment,
    )

    return RemainingAmountResponse(
        remaining_amount=float(remaining),
        remaining_balance=float(balance),
        exchange_rate=float(exchange_rate) if exchange_rate is not None else None,
        formatted_balance=format_price(balance, total_currency),
    )


@router.post("/promotions/calculate", response_model=PromotionCalculationResponse)
def calculate_promotion(request_body: PromotionCalculationRequest):
    """Apply one promotion to an amount, optionally in installments"""
    calculation = calculate_promotion_amount(
        request_body.amount,
        request_body.promotion.to_domain(),
        request_body.installments,
    )
    return PromotionCalculationResponse(
        original_amount=float(calculation.original_amount),
        final_amount=float(calculation.final_amount),
        discount_amount=_optional_float(calculation.discount_amount),
        surcharge_amount=_optional_float(calculation.surcharge_amount),
        installment_amount=_optional_float(calculation.installment_amount),
        total_interest=_optional_float(calculation.total_interest),
        installments=calculation.installments,
    )
