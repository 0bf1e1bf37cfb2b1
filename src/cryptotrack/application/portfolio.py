# src/cryptotrack/application/portfolio.py
"""
Portfolio Ledger - Transactions and Valuation

Records simulated buy/sell transactions (newest first) and values them
against live coin prices.

Valuation of one transaction:
- execution_value = price_at_buy * amount (cost for a buy, proceeds for a sell)
- current_value   = current market price * amount
- gain            = current_value - execution_value
- gain_percentage = gain / execution_value * 100, or 0 when execution_value is 0

Files that USE this module:
- cryptotrack.application.app_state (owns the ledger)
- cryptotrack.adapters.formatting.formatter (renders valuations)
- tests.test_portfolio (unit tests)

Files that this module USES:
- cryptotrack.domain.models (Coin, Transaction)
"""
from __future__ import annotations

import time
from collections import defaultdict
from dataclasses import dataclass
from datetime import date as date_cls
from typing import Iterable, Optional

from cryptotrack.domain.models import TX_BUY, TX_SELL, Coin, Transaction


@dataclass(frozen=True)
class HoldingValuation:
    """Derived values for one transaction at the current market price."""
    transaction: Transaction
    execution_value: float
    current_value: float
    gain: float
    gain_percentage: float

    @property
    def is_gain(self) -> bool:
        return self.gain >= 0


def valuate(tx: Transaction, coin: Coin) -> HoldingValuation:
    """
    Value a transaction against the coin's current price.

    Gain fields only mean something for buys; sells are shown by proceeds.
    """
    execution_value = tx.price_at_buy * tx.amount
    current_value = coin.current_price * tx.amount
    gain = current_value - execution_value
    gain_percentage = (gain / execution_value) * 100 if execution_value != 0 else 0.0
    return HoldingValuation(
        transaction=tx,
        execution_value=execution_value,
        current_value=current_value,
        gain=gain,
        gain_percentage=gain_percentage,
    )


def new_transaction(coin: Coin, amount: float, tx_type: str = TX_BUY,
                    date: Optional[str] = None, tx_id: Optional[str] = None) -> Transaction:
    """
    Build a transaction executed at the coin's current price.

    Args:
        coin: Traded coin
        amount: Units of coin
        tx_type: "buy" or "sell"
        date: ISO date; today when omitted
        tx_id: Identifier; current epoch milliseconds when omitted
    """
    if tx_type not in (TX_BUY, TX_SELL):
        raise ValueError(f"Unknown transaction type: {tx_type}")
    return Transaction(
        id=tx_id or str(time.time_ns() // 1_000_000),
        coin_id=coin.id,
        amount=amount,
        price_at_buy=coin.current_price,
        date=date or date_cls.today().isoformat(),
        type=tx_type,
    )


class Portfolio:
    """Prepend-on-write list of transactions."""

    def __init__(self, transactions: Optional[Iterable[Transaction]] = None):
        self._transactions: list[Transaction] = list(transactions or [])

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    def __len__(self) -> int:
        return len(self._transactions)

    def add_transaction(self, tx: Transaction) -> None:
        # No checks on amount, coin or date
        self._transactions.insert(0, tx)

    def history(self) -> list[Transaction]:
        """Transactions by date, newest first. Same-date entries keep ledger order."""
        return sorted(self._transactions, key=lambda tx: tx.date, reverse=True)

    def valuations(self, coins: Iterable[Coin]) -> list[HoldingValuation]:
        """Valuations in history order; transactions for unknown coins are skipped."""
        by_id = {c.id: c for c in coins}
        return [valuate(tx, by_id[tx.coin_id]) for tx in self.history() if tx.coin_id in by_id]

    def total_value(self, coins: Iterable[Coin]) -> float:
        """
        Sum of current values, with sells subtracted rather than added.

        Per coin this equals (units bought - units sold) * current price, so the
        result can go negative when more units were sold than bought.
        """
        by_id = {c.id: c for c in coins}
        total = 0.0
        for tx in self._transactions:
            coin = by_id.get(tx.coin_id)
            if coin is None:
                continue
            value = coin.current_price * tx.amount
            total = total - value if tx.type == TX_SELL else total + value
        return total

    def net_positions(self) -> dict[str, float]:
        """Units held per coin id: bought minus sold."""
        positions: dict[str, float] = defaultdict(float)
        for tx in self._transactions:
            positions[tx.coin_id] += -tx.amount if tx.type == TX_SELL else tx.amount
        return dict(positions)

    def oversold_coins(self) -> list[str]:
        """Coin ids where recorded sells exceed recorded buys."""
        return sorted(coin_id for coin_id, units in self.net_positions().items() if units < 0)
