"""Data access layer for financing quotes"""

import uuid
from datetime import date
from decimal import Decimal
from typing import List, Optional
from sqlalchemy.orm import Session
from moto_finance.infrastructure.database.models import FinancingQuote, QuoteInstallment
from moto_finance.domain.models import PaymentFrequency, ScheduleResult


class QuoteRepository:
    """Repository for financing quotes and their schedules"""

    def __init__(self, db: Session):
        self.db = db

    def create_quote(
        self,
        motorcycle_id: str,
        currency: str,
        base_price: Decimal,
        final_price: Decimal,
        down_payment: Decimal,
        principal: Decimal,
        installments: int,
        frequency: PaymentFrequency,
        annual_interest_rate: Decimal,
        result: ScheduleResult,
        promotion_ids: List[str],
        is_card_payment: bool = False,
        start_date: Optional[date] = None,
    ) -> FinancingQuote:
        """Persist a quote with one row per scheduled installment"""
        db_quote = FinancingQuote(
            motorcycle_id=motorcycle_id,
            currency=currency,
            base_price=base_price,
            final_price=final_price,
            down_payment=down_payment,
            principal=principal,
            installments=installments,
            payment_frequency=frequency.value,
            start_date=start_date,
            annual_interest_rate=annual_interest_rate,
            installment_amount=result.installment_amount,
            total_payment=result.total_payment,
            total_interest=result.total_interest,
            promotion_ids=",".join(promotion_ids) or None,
            warning=result.warning,
            is_card_payment=is_card_payment,
        )
        self.db.add(db_quote)
        self.db.flush()  # Get ID without committing

        for entry in result.schedule:
            db_installment = QuoteInstallment(
                quote_id=db_quote.id,
                installment_number=entry.installment_number,
                due_date=entry.due_date,
                capital_at_period_start=entry.capital_at_period_start,
                interest_for_period=entry.interest_for_period,
                amortization=entry.amortization,
                installment_amount=entry.calculated_installment_amount,
                capital_at_period_end=entry.capital_at_period_end,
            )
            self.db.add(db_installment)

        return db_quote

    def get_quote_by_id(self, quote_id: uuid.UUID) -> Optional[FinancingQuote]:
        """Fetch quote with its schedule"""
        return (
            self.db.query(FinancingQuote)
            .filter(FinancingQuote.id == quote_id)
            .first()
        )

    def get_quotes_by_motorcycle(self, motorcycle_id: str, limit: int = 10) -> List[FinancingQuote]:
        """Fetch recent quotes for a motorcycle"""
        return (
            self.db.query(FinancingQuote)
            .filter(FinancingQuote.motorcycle_id == motorcycle_id)
            .order_by(FinancingQuote.created_at.desc())
            .limit(limit)
            .all()
        )
