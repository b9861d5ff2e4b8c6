"""SQLAlchemy ORM models for persisted financing quotes"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Date, Integer, ForeignKey, Numeric, Text, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

Money = Numeric(14, 2)


class FinancingQuote(Base):
    """Priced and financed sale proposal for a motorcycle"""

    __tablename__ = "financing_quote"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    motorcycle_id = Column(Text, nullable=False, index=True)
    currency = Column(String(3), nullable=False)
    base_price = Column(Money, nullable=False)
    final_price = Column(Money, nullable=False)
    down_payment = Column(Money, nullable=False, default=0)
    principal = Column(Money, nullable=False)
    installments = Column(Integer, nullable=False)
    payment_frequency = Column(String(16), nullable=False)
    start_date = Column(Date, nullable=True)
    annual_interest_rate = Column(Numeric(9, 4), nullable=False, default=0)
    installment_amount = Column(Money, nullable=False)
    total_payment = Column(Money, nullable=False)
    total_interest = Column(Money, nullable=False)
    promotion_ids = Column(Text, nullable=True)  # comma separated, in application order
    warning = Column(Text, nullable=True)
    is_card_payment = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    installment_rows = relationship(
        "QuoteInstallment",
        back_populates="quote",
        cascade="all, delete-orphan",
        order_by="QuoteInstallment.installment_number",
    )


class QuoteInstallment(Base):
    """Schedule row of a financing quote"""

    __tablename__ = "quote_installment"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    quote_id = Column(Uuid(as_uuid=True), ForeignKey("financing_quote.id", ondelete="CASCADE"), nullable=False)
    installment_number = Column(Integer, nullable=False)
    due_date = Column(Date, nullable=True)
    capital_at_period_start = Column(Money, nullable=False)
    interest_for_period = Column(Money, nullable=False)
    amortization = Column(Money, nullable=False)
    installment_amount = Column(Money, nullable=False)
    capital_at_period_end = Column(Money, nullable=False)
    status = Column(Text, nullable=False, default="scheduled")

    quote = relationship("FinancingQuote", back_populates="installment_rows")
