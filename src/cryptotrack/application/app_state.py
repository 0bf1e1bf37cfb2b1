# src/cryptotrack/application/app_state.py
"""
App State - Session State Container

One explicitly constructed object that owns everything a session knows:
the simulated market feed, the portfolio ledger, the mock login, favorites,
display currency and fiat cash balance. The front-end gets a reference to
it at composition time and changes it only through the methods below.

The container also owns the price ticker: start() launches an asyncio task
that ticks the market feed every tick_interval seconds, stop() cancels it.
Every mutation is announced to subscribed listeners with an event name.

Files that USE this module:
- cryptotrack.app (builds the container and drives start/stop)
- cryptotrack.adapters.telegram.handlers (reads state and calls mutations)
- tests.test_app_state (unit tests)

Files that this module USES:
- cryptotrack.application.market_feed (MarketFeed)
- cryptotrack.application.portfolio (Portfolio ledger)
- cryptotrack.adapters.persistence.preference_store (PreferenceStore)
- cryptotrack.adapters.formatting.formatter (format_money)
- cryptotrack.domain.* (models, seed data, currency table, errors)
"""
from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Callable, Iterable, Optional

from cryptotrack.adapters.formatting.formatter import format_money
from cryptotrack.adapters.persistence.preference_store import PreferenceStore
from cryptotrack.application.market_feed import DEFAULT_VOLATILITY, MarketFeed
from cryptotrack.application.portfolio import Portfolio
from cryptotrack.domain import seed
from cryptotrack.domain.currency import DEFAULT_CURRENCY, SUPPORTED_CURRENCIES, is_supported
from cryptotrack.domain.errors import UnknownCurrencyError
from cryptotrack.domain.models import BankAccount, Coin, Transaction, User

logger = logging.getLogger(__name__)

EVENT_TICK = "tick"
EVENT_SESSION = "session"
EVENT_FAVORITES = "favorites"
EVENT_PORTFOLIO = "portfolio"
EVENT_CURRENCY = "currency"
EVENT_BALANCE = "balance"

DEFAULT_TICK_INTERVAL = 5.0

Listener = Callable[[str, "AppState"], None]


class AppState:
    """Session state container with a simulated price ticker."""

    def __init__(
        self,
        preference_store: Optional[PreferenceStore] = None,
        coins: Optional[Iterable[Coin]] = None,
        transactions: Optional[Iterable[Transaction]] = None,
        favorites: Optional[Iterable[str]] = None,
        bank_accounts: Optional[Iterable[BankAccount]] = None,
        fiat_balance: float = seed.STARTING_FIAT_BALANCE,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        volatility: float = DEFAULT_VOLATILITY,
        rng: Optional[random.Random] = None,
    ):
        """
        Build a session seeded with mock data.

        Args:
            preference_store: Where the currency preference lives; None keeps it in memory only
            coins: Initial coins (defaults to the seeded coin list)
            transactions: Initial ledger, newest first (defaults to the starter portfolio)
            favorites: Initial favorite coin ids (defaults to bitcoin and solana)
            bank_accounts: Linked accounts (defaults to the mock accounts)
            fiat_balance: Starting cash balance in USD
            tick_interval: Seconds between simulated price ticks
            volatility: Max relative price move per tick
            rng: Random source for the feed
        """
        self.feed = MarketFeed(
            seed.initial_coins() if coins is None else coins,
            volatility=volatility,
            rng=rng,
        )
        self.portfolio = Portfolio(seed.initial_portfolio() if transactions is None else transactions)
        self._favorites: list[str] = list(seed.DEFAULT_FAVORITES if favorites is None else favorites)
        self.bank_accounts: tuple[BankAccount, ...] = tuple(
            seed.MOCK_BANK_ACCOUNTS if bank_accounts is None else bank_accounts
        )
        self._fiat_balance = float(fiat_balance)
        self.user: Optional[User] = None
        self.is_authenticated = False

        self._preference_store = preference_store
        self._currency = self._load_currency()

        self.tick_interval = tick_interval
        self._ticker_task: Optional[asyncio.Task] = None
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def coins(self) -> list[Coin]:
        return self.feed.coins

    @property
    def favorites(self) -> list[str]:
        return list(self._favorites)

    @property
    def transactions(self) -> list[Transaction]:
        return self.portfolio.transactions

    @property
    def currency(self) -> str:
        return self._currency

    @property
    def fiat_balance(self) -> float:
        return self._fiat_balance

    def find_bank_account(self, ref: str) -> Optional[BankAccount]:
        """Linked account by id or last four digits, or None."""
        for account in self.bank_accounts:
            if ref in (account.id, account.last_four):
                return account
        return None

    def is_favorite(self, coin_id: str) -> bool:
        return coin_id in self._favorites

    def favorite_coins(self) -> list[Coin]:
        return [c for c in self.feed.coins if c.id in self._favorites]

    def portfolio_total(self) -> float:
        """Ledger total at live prices, floored at zero for display."""
        return max(0.0, self.portfolio.total_value(self.feed.coins))

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def login(self) -> None:
        # Mock authentication: no credential check
        self.user = seed.MOCK_USER
        self.is_authenticated = True
        logger.info("User %s logged in", self.user.id)
        self._notify(EVENT_SESSION)

    def register(self) -> None:
        self.user = seed.MOCK_USER
        self.is_authenticated = True
        logger.info("User %s registered", self.user.id)
        self._notify(EVENT_SESSION)

    def logout(self) -> None:
        self.user = None
        self.is_authenticated = False
        logger.info("User logged out")
        self._notify(EVENT_SESSION)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def toggle_favorite(self, coin_id: str) -> bool:
        """
        Add coin_id to favorites, or remove it if already there.

        Returns:
            True if the coin is a favorite afterwards
        """
        if coin_id in self._favorites:
            self._favorites = [fid for fid in self._favorites if fid != coin_id]
            now_favorite = False
        else:
            self._favorites = self._favorites + [coin_id]
            now_favorite = True
        self._notify(EVENT_FAVORITES)
        return now_favorite

    def add_transaction(self, tx: Transaction) -> None:
        self.portfolio.add_transaction(tx)
        logger.info("Recorded %s of %s %s @ %.2f", tx.type, tx.amount, tx.coin_id, tx.price_at_buy)
        self._notify(EVENT_PORTFOLIO)

    def set_currency(self, code: str) -> None:
        """
        Switch display currency and persist the choice.

        A failed write is logged; the in-memory selection still changes.

        Raises:
            UnknownCurrencyError: If code is not a supported currency
        """
        if not is_supported(code):
            raise UnknownCurrencyError(
                f"Unsupported currency {code!r}; expected one of {', '.join(SUPPORTED_CURRENCIES)}"
            )

        self._currency = code
        if self._preference_store is not None:
            try:
                self._preference_store.save_currency(code)
            except Exception as e:
                logger.error("Failed to persist currency preference: %s", e)
        self._notify(EVENT_CURRENCY)

    def format_price(self, price_in_usd: float) -> str:
        return format_money(price_in_usd, self._currency)

    def withdraw_funds(self, amount: float) -> bool:
        """
        Take amount (USD) out of the fiat balance.

        Returns:
            False, with no change, when amount is not finite or exceeds the balance;
            True otherwise
        """
        if not math.isfinite(amount):
            logger.warning("Withdrawal of non-finite amount %r rejected", amount)
            return False
        if amount > self._fiat_balance:
            logger.info("Withdrawal of %.2f rejected, balance %.2f", amount, self._fiat_balance)
            return False
        self._fiat_balance -= amount
        logger.info("Withdrew %.2f, balance now %.2f", amount, self._fiat_balance)
        self._notify(EVENT_BALANCE)
        return True

    # ------------------------------------------------------------------
    # Change notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register listener(event, state) for every change.

        Returns:
            A function that unsubscribes the listener
        """
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, event: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, self)
            except Exception:
                logger.exception("State listener failed on %s event", event)

    # ------------------------------------------------------------------
    # Ticker lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._ticker_task is not None and not self._ticker_task.done()

    def start(self) -> None:
        """
        Start the price ticker on the running event loop. No-op if already running.

        Raises:
            RuntimeError: If called outside a running event loop
        """
        if self.is_running:
            return
        loop = asyncio.get_running_loop()
        self._ticker_task = loop.create_task(self._run_ticker(), name="price_ticker")
        logger.info("Price ticker started (interval=%.1fs)", self.tick_interval)

    async def stop(self) -> None:
        task, self._ticker_task = self._ticker_task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Price ticker stopped after %d ticks", self.feed.tick_count)

    async def _run_ticker(self) -> None:
        while True:
            await asyncio.sleep(self.tick_interval)
            try:
                self.feed.tick()
            except Exception:
                logger.exception("Price tick failed")
                continue
            self._notify(EVENT_TICK)

    def _load_currency(self) -> str:
        if self._preference_store is None:
            return DEFAULT_CURRENCY
        return self._preference_store.load_currency()
