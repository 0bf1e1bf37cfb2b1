# src/cryptotrack/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Tradable coins with their rolling price window
- Simulated buy/sell transactions
- The mock user and linked bank accounts

Files that USE this module:
- cryptotrack.application.* (feed, ledger and state container)
- cryptotrack.adapters.* (formatter, AI client and chat handlers)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

TX_BUY = "buy"
TX_SELL = "sell"
TRANSACTION_TYPES = (TX_BUY, TX_SELL)


@dataclass
class Coin:
    """
    A tradable coin. Prices are in USD.

    Non-frozen: the simulated feed mutates price, sparkline and 24h change
    in place on every tick.

    Attributes:
        id: Stable identifier (e.g. "bitcoin")
        symbol: Ticker symbol in lower case (e.g. "btc")
        name: Display name
        current_price: Latest simulated price in USD
        price_change_percentage_24h: 24h change in percentage points
        image: Logo URI
        sparkline: Fixed-length window of recent prices, oldest first
        market_cap: Market capitalisation in USD
        description: Optional free-text description
    """
    id: str
    symbol: str
    name: str
    current_price: float
    price_change_percentage_24h: float
    image: str
    sparkline: list[float] = field(default_factory=list)
    market_cap: float = 0.0
    description: Optional[str] = None

    @property
    def trend(self) -> str:
        """'Upward' when the newest sparkline sample is above the oldest, else 'Downward'."""
        if len(self.sparkline) < 2:
            return "Downward"
        return "Upward" if self.sparkline[-1] > self.sparkline[0] else "Downward"


@dataclass(frozen=True)
class Transaction:
    """
    A recorded buy or sell.

    Attributes:
        id: Unique identifier
        coin_id: Id of the traded coin
        amount: Units of coin traded
        price_at_buy: Execution price in USD (cost for buys, proceeds basis for sells)
        date: Calendar date, ISO format (YYYY-MM-DD)
        type: "buy" or "sell"
    """
    id: str
    coin_id: str
    amount: float
    price_at_buy: float
    date: str
    type: str = TX_BUY

    @property
    def is_buy(self) -> bool:
        return self.type == TX_BUY


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    avatar: str


@dataclass(frozen=True)
class BankAccount:
    id: str
    bank_name: str
    last_four: str
    balance: float
