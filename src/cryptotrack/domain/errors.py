# src/cryptotrack/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and domain errors.
"""


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class UnknownCurrencyError(DomainError):
    """Raised when a currency code is not one of the supported currencies."""
    pass


class CoinNotFoundError(DomainError):
    """Raised when a coin id does not match any tracked coin."""
    pass


class InvalidAmountError(DomainError):
    """Raised when user-supplied amount text is not a positive number."""
    pass
