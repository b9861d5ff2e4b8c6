"""Current-account financing endpoints: schedules and persisted quotes"""

import time
import uuid
import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from moto_finance.api.v1.schemas import (
    QuoteHistoryItem,
    QuoteHistoryResponse,
    QuoteRequest,
    QuoteResponse,
    ScheduleEntrySchema,
    ScheduleRequest,
    ScheduleResponse,
)
from moto_finance.api.dependencies import get_overlap_policy, get_request_id
from moto_finance.infrastructure.database.session import get_db
from moto_finance.infrastructure.database.repositories import QuoteRepository
from moto_finance.infrastructure.database.models import FinancingQuote
from moto_finance.infrastructure.observability.metrics import (
    calculation_mode,
    quote_counter,
    record_compatibility,
    record_schedule,
)
from moto_finance.infrastructure.observability.logging import log_quote_created, log_schedule_computed
from moto_finance.domain.amortization import calculate_payment_dates, compute_schedule
from moto_finance.domain.models import AmortizationScheduleEntry, InstallmentOverlapPolicy
from moto_finance.domain.promotions import are_promotions_compatible, calculate_final_price, is_card_payment
from moto_finance.utils.money import ZERO, to_decimal

router = APIRouter()


def _entry_schema(entry: AmortizationScheduleEntry) -> ScheduleEntrySchema:
    return ScheduleEntrySchema(
        installment_number=entry.installment_number,
        capital_at_period_start=float(entry.capital_at_period_start),
        interest_for_period=float(entry.interest_for_period),
        amortization=float(entry.amortization),
        calculated_installment_amount=float(entry.calculated_installment_amount),
        capital_at_period_end=float(entry.capital_at_period_end),
        due_date=entry.due_date,
    )


def _payment_dates(start_date, installments, frequency):
    if start_date is None:
        return None, None
    return calculate_payment_dates(start_date, installments, frequency)


def _quote_response(quote: FinancingQuote) -> QuoteResponse:
    schedule = [
        ScheduleEntrySchema(
            installment_number=row.installment_number,
            capital_at_period_start=float(row.capital_at_period_start),
            interest_for_period=float(row.interest_for_period),
            amortization=float(row.amortization),
            calculated_installment_amount=float(row.installment_amount),
            capital_at_period_end=float(row.capital_at_period_end),
            due_date=row.due_date,
        )
        for row in quote.installment_rows
    ]
    next_due_date, final_payment_date = _payment_dates(quote.start_date, quote.installments, quote.payment_frequency)

    return QuoteResponse(
        quote_id=str(quote.id),
        motorcycle_id=quote.motorcycle_id,
        currency=quote.currency,
        base_price=float(quote.base_price),
        final_price=float(quote.final_price),
        down_payment=float(quote.down_payment),
        principal=float(quote.principal),
        installments=quote.installments,
        frequency=quote.payment_frequency,
        annual_interest_rate=float(quote.annual_interest_rate),
        installment_amount=float(quote.installment_amount),
        total_payment=float(quote.total_payment),
        total_interest=float(quote.total_interest),
        promotion_ids=quote.promotion_ids.split(",") if quote.promotion_ids else [],
        warning=quote.warning,
        schedule=schedule,
        next_due_date=next_due_date,
        final_payment_date=final_payment_date,
        created_at=quote.created_at.isoformat(),
    )


@router.post("/financing/schedule", response_model=ScheduleResponse)
def create_schedule(request_body: ScheduleRequest, request: Request):
    """
    Compute a fixed-installment amortization schedule without persisting it.

    Degenerate inputs still return a schedule; `warning` explains the fallback.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    result = compute_schedule(
        principal=request_body.principal,
        installments=request_body.installments,
        annual_rate_percent=request_body.annual_interest_rate,
        frequency=request_body.frequency,
        start_date=request_body.start_date,
        currency=request_body.currency.upper(),
    )

    duration_ms = (time.time() - start_time) * 1000
    record_schedule(result, request_body.principal)
    log_schedule_computed(
        request_id,
        request_body.installments,
        request_body.frequency.value,
        calculation_mode(result),
        result.warning,
        duration_ms,
    )

    next_due_date, final_payment_date = _payment_dates(
        request_body.start_date, request_body.installments, request_body.frequency
    )

    return ScheduleResponse(
        installment_amount=float(result.installment_amount),
        total_payment=float(result.total_payment),
        total_interest=float(result.total_interest),
        currency=result.currency,
        warning=result.warning,
        schedule=[_entry_schema(entry) for entry in result.schedule],
        next_due_date=next_due_date,
        final_payment_date=final_payment_date,
    )


@router.post("/financing/quotes", response_model=QuoteResponse, status_code=201)
def create_quote(
    request_body: QuoteRequest,
    request: Request,
    db: Session = Depends(get_db),
    overlap_policy: InstallmentOverlapPolicy = Depends(get_overlap_policy),
):
    """
    Price a motorcycle sale and finance the balance through the current account.

    Flow:
    1. Check the promotions can be combined, in selection order
    2. Apply manual discount, then each promotion
    3. Finance final price minus down payment
    4. Persist quote + schedule
    """
    start_time = time.time()
    request_id = get_request_id(request)
    card_payment = is_card_payment(request_body.payment_method_type)

    # 1. Promotion compatibility
    promotions = [promotion.to_domain() for promotion in request_body.promotions]
    for index, promotion in enumerate(promotions):
        compatible = are_promotions_compatible(promotion, promotions[:index], card_payment, overlap_policy)
        record_compatibility(compatible)
        if not compatible:
            raise HTTPException(
                status_code=422,
                detail=f"Promotion {promotion.id} cannot be combined with the previously selected promotions",
            )

    # 2. Final price
    final_price = calculate_final_price(
        request_body.base_price,
        request_body.discount_type,
        request_body.discount_value,
        promotions,
    )

    # 3. Schedule
    down_payment = to_decimal(request_body.down_payment)
    principal = max(ZERO, final_price - down_payment)
    currency = request_body.currency.upper()
    result = compute_schedule(
        principal=principal,
        installments=request_body.installments,
        annual_rate_percent=request_body.annual_interest_rate,
        frequency=request_body.frequency,
        start_date=request_body.start_date,
        currency=currency,
    )

    # 4. Persist
    try:
        quote = QuoteRepository(db).create_quote(
            motorcycle_id=request_body.motorcycle_id,
            currency=currency,
            base_price=to_decimal(request_body.base_price),
            final_price=final_price,
            down_payment=down_payment,
            principal=principal,
            installments=request_body.installments,
            frequency=request_body.frequency,
            annual_interest_rate=to_decimal(request_body.annual_interest_rate),
            result=result,
            promotion_ids=[str(promotion.id) for promotion in promotions],
            is_card_payment=card_payment,
            start_date=request_body.start_date,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Failed to persist quote: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    quote_counter.inc()
    log_quote_created(request_id, str(quote.id), request_body.motorcycle_id, len(promotions))
    record_schedule(result, float(principal))
    log_schedule_computed(
        request_id,
        request_body.installments,
        request_body.frequency.value,
        calculation_mode(result),
        result.warning,
        duration_ms,
    )

    return _quote_response(quote)


@router.get("/financing/quotes/{quote_id}", response_model=QuoteResponse)
def get_quote(quote_id: str, db: Session = Depends(get_db)):
    """Retrieve a persisted quote with its installment schedule"""
    try:
        quote_uuid = uuid.UUID(quote_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid quote ID format")

    quote = QuoteRepository(db).get_quote_by_id(quote_uuid)

    if not quote:
        raise HTTPException(status_code=404, detail="Quote not found")

    return _quote_response(quote)


@router.get("/financing/quotes", response_model=QuoteHistoryResponse)
def get_quote_history(
    motorcycle_id: str = Query(..., description="Motorcycle identifier"),
    db: Session = Depends(get_db),
):
    """Recent quotes issued for a motorcycle, newest first"""
    quotes: List[FinancingQuote] = QuoteRepository(db).get_quotes_by_motorcycle(motorcycle_id, limit=20)

    history_items = [
        QuoteHistoryItem(
            quote_id=str(q.id),
            final_price=float(q.final_price),
            installments=q.installments,
            installment_amount=float(q.installment_amount),
            total_payment=float(q.total_payment),
            created_at=q.created_at.isoformat(),
        )
        for q in quotes
    ]

    return QuoteHistoryResponse(motorcycle_id=motorcycle_id, quotes=history_items)
