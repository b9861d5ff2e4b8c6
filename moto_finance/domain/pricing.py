"""Remaining balance after reservation and down payment, and price display"""

import logging
from decimal import Decimal
from typing import Optional

from moto_finance.utils.money import ZERO, Number, ceil_amount, to_decimal

logger = logging.getLogger(__name__)

CURRENCY_SYMBOLS = {"USD": "US$", "ARS": "$"}

# Reservations convert only between these currencies, at ARS per USD
CONVERTIBLE_PAIRS = {("USD", "ARS"), ("ARS", "USD")}


def needs_exchange_rate(total_currency: str, reservation_currency: str) -> bool:
    return (total_currency, reservation_currency) in CONVERTIBLE_PAIRS


def calculate_remaining_amount(
    total_price: Number,
    total_currency: str,
    reservation_amount: Number,
    reservation_currency: str,
    exchange_rate: Optional[Number] = None,
    down_payment: Number = 0,
) -> Decimal:
    """
    Amount still owed after subtracting a reservation and the down payment.

    A reservation recorded in the other currency is converted with
    `exchange_rate` (ARS per USD). Without a rate the conversion is skipped:
    a warning is logged and the reservation is ignored.
    """
    total = to_decimal(total_price)
    reservation = to_decimal(reservation_amount)
    rate = to_decimal(exchange_rate) if exchange_rate is not None else None

    if total_currency == reservation_currency:
        remaining = total - reservation
    elif not rate:
        logger.warning(
            "No exchange rate supplied for reservation conversion",
            extra={
                "total_currency": total_currency,
                "reservation_currency": reservation_currency,
                "step": "remaining_amount",
            },
        )
        remaining = total
    elif total_currency == "USD" and reservation_currency == "ARS":
        remaining = total - reservation / rate
    elif total_currency == "ARS" and reservation_currency == "USD":
        remaining = total - reservation * rate
    else:
        remaining = total

    return remaining - to_decimal(down_payment)


def remaining_balance(
    total_price: Number,
    total_currency: str,
    reservation_amount: Number,
    reservation_currency: str,
    exchange_rate: Optional[Number] = None,
    down_payment: Number = 0,
) -> Decimal:
    """Remaining amount as shown to the salesperson, never negative"""
    remaining = calculate_remaining_amount(
        total_price,
        total_currency,
        reservation_amount,
        reservation_currency,
        exchange_rate=exchange_rate,
        down_payment=down_payment,
    )
    return max(ZERO, remaining)


def format_price(amount: Number, currency: str = "USD") -> str:
    """
    Display a price in whole units, always rounded up, with es-AR grouping.

    Example:
        format_price(1234.2, "ARS") -> "$ 1.235"
    """
    rounded = int(ceil_amount(amount))
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    sign = "-" if rounded < 0 else ""
    grouped = f"{abs(rounded):,}".replace(",", ".")
    return f"{sign}{symbol} {grouped}"
