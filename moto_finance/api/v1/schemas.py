"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Dict, List, Optional

from moto_finance.domain.models import (
    DiscountType,
    InstallmentPlan,
    PaymentFrequency,
    Promotion,
)
from moto_finance.config import settings
from moto_finance.utils.money import to_decimal


class FiniteModel(BaseModel):
    """Request body whose numbers must be finite (no inf or nan)"""

    model_config = ConfigDict(allow_inf_nan=False)


class InstallmentPlanSchema(FiniteModel):
    """Installment count offered by a promotion"""

    installments: int = Field(..., gt=0)
    interest_rate: float = Field(0, ge=0, description="Interest rate in percent")
    is_enabled: bool = True


class PromotionSchema(FiniteModel):
    """Banking promotion as stored in the dealership configuration"""

    id: int | str
    name: str = ""
    description: str = ""
    discount_rate: Optional[float] = Field(None, ge=0, description="Discount in percent")
    surcharge_rate: Optional[float] = Field(None, ge=0, description="Surcharge in percent")
    installment_plans: List[InstallmentPlanSchema] = []
    is_enabled: bool = True
    active_days: List[str] = []

    def to_domain(self) -> Promotion:
        return Promotion(
            id=self.id,
            name=self.name,
            description=self.description,
            discount_rate=to_decimal(self.discount_rate) if self.discount_rate is not None else None,
            surcharge_rate=to_decimal(self.surcharge_rate) if self.surcharge_rate is not None else None,
            installment_plans=[
                InstallmentPlan(
                    installments=plan.installments,
                    interest_rate=to_decimal(plan.interest_rate),
                    is_enabled=plan.is_enabled,
                )
                for plan in self.installment_plans
            ],
            is_enabled=self.is_enabled,
            active_days=list(self.active_days),
        )


class ScheduleRequest(FiniteModel):
    """Request body for POST /v1/financing/schedule"""

    principal: float = Field(..., description="Amount to finance")
    installments: int = Field(..., gt=0, description="Number of installments")
    annual_interest_rate: float = Field(0, description="Annual interest rate in percent")
    frequency: PaymentFrequency = settings.default_payment_frequency
    start_date: Optional[date] = None
    currency: str = Field(settings.default_currency, min_length=3, max_length=3)


class ScheduleEntrySchema(BaseModel):
    """Single installment of an amortization schedule"""

    installment_number: int
    capital_at_period_start: float
    interest_for_period: float
    amortization: float
    calculated_installment_amount: float
    capital_at_period_end: float
    due_date: Optional[date] = None


class ScheduleResponse(BaseModel):
    """Response for POST /v1/financing/schedule"""

    installment_amount: float
    total_payment: float
    total_interest: float
    currency: str
    warning: Optional[str] = None
    schedule: List[ScheduleEntrySchema]
    next_due_date: Optional[date] = None
    final_payment_date: Optional[date] = None


class QuoteRequest(FiniteModel):
    """Request body for POST /v1/financing/quotes"""

    motorcycle_id: str = Field(..., min_length=1, description="Motorcycle identifier")
    base_price: float = Field(..., ge=0, description="Retail or wholesale price")
    currency: str = Field(settings.default_currency, min_length=3, max_length=3)
    discount_type: DiscountType = DiscountType.NONE
    discount_value: float = Field(0, ge=0)
    promotions: List[PromotionSchema] = Field(default_factory=list, description="Applied in this order")
    payment_method_type: Optional[str] = Field(None, description="credit, debit, current_account, ...")
    down_payment: float = Field(0, ge=0)
    installments: int = Field(..., gt=0)
    frequency: PaymentFrequency = settings.default_payment_frequency
    annual_interest_rate: float = 0
    start_date: Optional[date] = None


class QuoteResponse(BaseModel):
    """Response for POST /v1/financing/quotes and GET /v1/financing/quotes/{quote_id}"""

    quote_id: str
    motorcycle_id: str
    currency: str
    base_price: float
    final_price: float
    down_payment: float
    principal: float
    installments: int
    frequency: PaymentFrequency
    annual_interest_rate: float
    installment_amount: float
    total_payment: float
    total_interest: float
    promotion_ids: List[str]
    warning: Optional[str] = None
    schedule: List[ScheduleEntrySchema]
    next_due_date: Optional[date] = None
    final_payment_date: Optional[date] = None
    created_at: str


class QuoteHistoryItem(BaseModel):
    """Single quote in a motorcycle's history"""

    quote_id: str
    final_price: float
    installments: int
    installment_amount: float
    total_payment: float
    created_at: str


class QuoteHistoryResponse(BaseModel):
    """Response for GET /v1/financing/quotes"""

    motorcycle_id: str
    quotes: List[QuoteHistoryItem]


class CompatibilityRequest(FiniteModel):
    """Request body for POST /v1/promotions/compatibility"""

    candidate: PromotionSchema
    selected: List[PromotionSchema] = []
    payment_method_type: Optional[str] = None


class CompatibilityResponse(BaseModel):
    compatible: bool


class PromotionListRequest(FiniteModel):
    """Request body for endpoints working on a set of promotions"""

    promotions: List[PromotionSchema] = []
    day: Optional[str] = Field(None, description="Spanish weekday name, defaults to today")


class InstallmentOptionSchema(BaseModel):
    installments: int
    interest_rate: float


class InstallmentPlansResponse(BaseModel):
    """Response for POST /v1/promotions/installment-plans"""

    options: List[InstallmentOptionSchema]
    best_rates: Dict[int, float]
    common_installments: List[int]


class ActivePromotionsResponse(BaseModel):
    """Response for POST /v1/promotions/active"""

    day: str
    promotion_ids: List[int | str]


class FinalPriceRequest(FiniteModel):
    """Request body for POST /v1/promotions/final-price"""

    original_price: float = Field(..., ge=0)
    currency: str = Field(settings.default_currency, min_length=3, max_length=3)
    discount_type: DiscountType = DiscountType.NONE
    discount_value: float = Field(0, ge=0)
    promotions: List[PromotionSchema] = Field(default_factory=list, description="Applied in this order")


class FinalPriceResponse(BaseModel):
    final_price: float
    formatted_price: str


class RemainingAmountRequest(FiniteModel):
    """Request body for POST /v1/promotions/remaining-amount"""

    total_price: float = Field(..., ge=0)
    total_currency: str = Field(settings.default_currency, min_length=3, max_length=3)
    reservation_amount: float = Field(0, ge=0)
    reservation_currency: str = Field(settings.default_currency, min_length=3, max_length=3)
    exchange_rate: Optional[float] = Field(None, gt=0, description="ARS per USD")
    down_payment: float = Field(0, ge=0)


class RemainingAmountResponse(BaseModel):
    remaining_amount: float
    remaining_balance: float
    exchange_rate: Optional[float] = None
    formatted_balance: str


class PromotionCalculationRequest(FiniteModel):
    """Request body for POST /v1/promotions/calculate"""

    amount: float = Field(..., gt=0)
    promotion: PromotionSchema
    installments: Optional[int] = Field(None, gt=0)


class PromotionCalculationResponse(BaseModel):
    original_amount: float
    final_amount: float
    discount_amount: Optional[float] = None
    surcharge_amount: Optional[float] = None
    installment_amount: Optional[float] = None
    total_interest: Optional[float] = None
    installments: Optional[int] = None
