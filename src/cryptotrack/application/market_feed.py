# src/cryptotrack/application/market_feed.py
"""
Market Feed - Simulated Live Coin Prices

Holds the list of tradable coins and moves their prices with a bounded
random walk. Each tick multiplies every price by a uniform factor in
[1 - v, 1 + v], slides the sparkline window by one sample and nudges the
24h change by up to +/-0.1 percentage points.

Files that USE this module:
- cryptotrack.application.app_state (owns a MarketFeed and ticks it on a timer)
- tests.test_market_feed (unit tests)

Files that this module USES:
- cryptotrack.domain.models (Coin)
- cryptotrack.domain.errors (CoinNotFoundError)
"""
from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from cryptotrack.domain.errors import CoinNotFoundError
from cryptotrack.domain.models import Coin

logger = logging.getLogger(__name__)

DEFAULT_VOLATILITY = 0.005
CHANGE_DRIFT = 0.1


class MarketFeed:
    """In-memory coin list mutated by simulated ticks."""

    def __init__(self, coins: Iterable[Coin], volatility: float = DEFAULT_VOLATILITY,
                 rng: Optional[random.Random] = None):
        """
        Args:
            coins: Initial coin records (mutated in place from now on)
            volatility: Max relative price move per tick (0.005 = 0.5%)
            rng: Random source; pass a seeded Random for reproducible ticks
        """
        self._coins: list[Coin] = list(coins)
        self.volatility = volatility
        self._rng = rng or random.Random()
        self.tick_count = 0

    @property
    def coins(self) -> list[Coin]:
        return self._coins

    def tick(self) -> None:
        """Advance every coin by one simulated price step."""
        v = self.volatility
        for coin in self._coins:
            multiplier = self._rng.uniform(1 - v, 1 + v)
            new_price = coin.current_price * multiplier
            coin.current_price = new_price
            if coin.sparkline:
                # Same length before and after: drop oldest, append newest
                coin.sparkline = coin.sparkline[1:] + [new_price]
            coin.price_change_percentage_24h += self._rng.uniform(-CHANGE_DRIFT, CHANGE_DRIFT)

        self.tick_count += 1
        logger.debug("Market tick #%d applied to %d coins", self.tick_count, len(self._coins))

    def find_coin(self, coin_id: str) -> Optional[Coin]:
        for coin in self._coins:
            if coin.id == coin_id:
                return coin
        return None

    def get_coin(self, coin_id: str) -> Coin:
        """
        Look up a coin by id, falling back to a symbol match (case-insensitive).

        Raises:
            CoinNotFoundError: If nothing matches
        """
        coin = self.find_coin(coin_id)
        if coin is not None:
            return coin

        needle = coin_id.lower()
        for candidate in self._coins:
            if candidate.symbol.lower() == needle or candidate.id.lower() == needle:
                return candidate
        raise CoinNotFoundError(f"Unknown coin: {coin_id}")

    def search(self, term: str) -> list[Coin]:
        """Coins whose name or symbol contains term (case-insensitive). Empty term returns all."""
        needle = (term or "").strip().lower()
        if not needle:
            return list(self._coins)
        return [
            c for c in self._coins
            if needle in c.name.lower() or needle in c.symbol.lower()
        ]

    def top_movers(self, limit: int = 3) -> list[Coin]:
        """Coins with the largest absolute 24h change first."""
        ranked = sorted(self._coins, key=lambda c: abs(c.price_change_percentage_24h), reverse=True)
        return ranked[:limit]
