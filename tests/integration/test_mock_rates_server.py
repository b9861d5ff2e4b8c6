"""Exchange rate client against the local mock rates server"""

import asyncio
import httpx
import pytest
from decimal import Decimal
from mock_servers.exchange_rate_server.main import app as rates_app
from moto_finance.domain.exceptions import ExchangeRateUnavailableError
from moto_finance.infrastructure.clients.exchange_rate import ExchangeRateClient


@pytest.fixture
def rates_client() -> ExchangeRateClient:
    return ExchangeRateClient(base_url="http://rates.local", transport=httpx.ASGITransport(app=rates_app))


def test_client_reads_rate_from_mock_server(rates_client: ExchangeRateClient):
    assert asyncio.run(rates_client.get_rate("USD", "ARS")) == Decimal("1050.5")


def test_client_reports_unknown_pair(rates_client: ExchangeRateClient):
    with pytest.raises(ExchangeRateUnavailableError, match="404"):
        asyncio.run(rates_client.get_rate("USD", "EUR"))
