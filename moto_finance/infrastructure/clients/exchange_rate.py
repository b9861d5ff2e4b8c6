"""Exchange rate HTTP client for converting reservations between USD and ARS"""

import httpx
from decimal import Decimal, InvalidOperation
from moto_finance.domain.exceptions import ExchangeRateUnavailableError
from moto_finance.config import settings
from moto_finance.infrastructure.observability.metrics import (
    exchange_rate_latency_histogram,
    exchange_rate_failures_counter,
)


class ExchangeRateClient:
    """Client for the external exchange rate API"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.exchange_rate_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_rate(self, base: str = "USD", quote: str = "ARS") -> Decimal:
        """
        Fetch how many `quote` units one `base` unit buys.

        Raises:
            ExchangeRateUnavailableError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                with exchange_rate_latency_histogram.time():
                    response = await client.get(
                        f"{self.base_url}/rates",
                        params={"base": base, "quote": quote},
                    )
                response.raise_for_status()
                rate = Decimal(str(response.json()["rate"]))

            except httpx.TimeoutException as e:
                exchange_rate_failures_counter.inc()
                raise ExchangeRateUnavailableError(f"Exchange rate API timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                exchange_rate_failures_counter.inc()
                raise ExchangeRateUnavailableError(f"Exchange rate API error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                exchange_rate_failures_counter.inc()
                raise ExchangeRateUnavailableError(f"Exchange rate API unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, InvalidOperation) as e:
                exchange_rate_failures_counter.inc()
                raise ExchangeRateUnavailableError(f"Invalid exchange rate data: {e}") from e

        if not rate.is_finite() or rate <= 0:
            exchange_rate_failures_counter.inc()
            raise ExchangeRateUnavailableError(f"Non-positive exchange rate {rate} for {base}/{quote}")

        return rate
