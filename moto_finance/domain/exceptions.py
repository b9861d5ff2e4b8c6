"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ExchangeRateUnavailableError(DomainException):
    """Exchange rate API returned an error or is unavailable"""

    pass
