"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from moto_finance.api.main import create_app
from moto_finance.api.dependencies import get_exchange_rate_client
from moto_finance.infrastructure.database.models import Base
from moto_finance.infrastructure.database.session import get_db
from moto_finance.domain.exceptions import ExchangeRateUnavailableError
from moto_finance.domain.models import InstallmentPlan, Promotion


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeExchangeRateClient:
    """Stands in for the exchange rate API"""

    def __init__(self, rate: Decimal | None = Decimal("1000")):
        self.rate = rate
        self.calls = 0

    async def get_rate(self, base: str = "USD", quote: str = "ARS") -> Decimal:
        self.calls += 1
        if self.rate is None:
            raise ExchangeRateUnavailableError("Exchange rate API error: 503")
        return self.rate


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def exchange_rate_client() -> FakeExchangeRateClient:
    return FakeExchangeRateClient()


@pytest.fixture
def client(db: Session, exchange_rate_client: FakeExchangeRateClient) -> TestClient:
    """Create FastAPI test client with test database and a fake rates API"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_exchange_rate_client] = lambda: exchange_rate_client
    return TestClient(app)


@pytest.fixture
def bank_promotions() -> list[Promotion]:
    """Promotions as configured by a typical dealership"""
    return [
        Promotion(
            id=1,
            name="Banco Norte - cash discount",
            discount_rate=Decimal("10"),
            installment_plans=[
                InstallmentPlan(installments=3, interest_rate=Decimal("0")),
                InstallmentPlan(installments=6, interest_rate=Decimal("12")),
            ],
            active_days=["viernes", "sábado", "domingo"],
        ),
        Promotion(
            id=2,
            name="Banco Sur - 12 installments",
            installment_plans=[
                InstallmentPlan(installments=6, interest_rate=Decimal("8")),
                InstallmentPlan(installments=12, interest_rate=Decimal("20")),
                InstallmentPlan(installments=18, interest_rate=Decimal("30"), is_enabled=False),
            ],
            active_days=["lunes", "martes", "miércoles", "jueves"],
        ),
        Promotion(
            id=3,
            name="Card surcharge",
            surcharge_rate=Decimal("5"),
            installment_plans=[InstallmentPlan(installments=12, interest_rate=Decimal("15"))],
        ),
        Promotion(id=4, name="Plain discount", discount_rate=Decimal("3")),
    ]
