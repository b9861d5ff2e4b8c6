"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from moto_finance.config import settings
from moto_finance.domain.models import InstallmentOverlapPolicy
from moto_finance.infrastructure.clients.exchange_rate import ExchangeRateClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_exchange_rate_client() -> ExchangeRateClient:
    """Provide exchange rate API client instance"""
    return ExchangeRateClient()


def get_overlap_policy() -> InstallmentOverlapPolicy:
    """Installment overlap policy for promotion compatibility checks"""
    return settings.installment_overlap_policy
