# src/cryptotrack/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models, the currency table and business errors.
No dependencies on infrastructure or external systems.
"""

from cryptotrack.domain.models import (
    TX_BUY,
    TX_SELL,
    BankAccount,
    Coin,
    Transaction,
    User,
)
from cryptotrack.domain.errors import (
    CoinNotFoundError,
    DomainError,
    InvalidAmountError,
    UnknownCurrencyError,
)

__all__ = [
    "Coin",
    "Transaction",
    "User",
    "BankAccount",
    "TX_BUY",
    "TX_SELL",
    "DomainError",
    "UnknownCurrencyError",
    "CoinNotFoundError",
    "InvalidAmountError",
]
