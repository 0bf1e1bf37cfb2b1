# tests/test_formatter.py
"""
Formatter Tests - Unit Tests for Price and Message Formatting

This module contains unit tests for currency rendering in every supported
display currency (symbols, grouping, rounding) and for the chat message
builders: market list, coin detail, home summary, transaction history,
profile, analysis and prediction cards.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.adapters.formatting.formatter (all formatter functions for testing)
- cryptotrack.application.portfolio (valuate for history entries)
- cryptotrack.domain.seed (seed coins, user, accounts)
"""
import pytest  # Testing framework for writing and running tests

from cryptotrack.adapters.ai.analyst import PricePrediction  # Structured prediction model
from cryptotrack.adapters.formatting.formatter import (
    _fmt_pct,  # Format percentage change
    _fmt_units,  # Format coin units
    format_analysis,  # AI analysis card
    format_coin_detail,  # Coin detail view
    format_currency_amount,  # Render amount already in target currency
    format_home,  # Home summary
    format_market,  # Market list
    format_money,  # Convert from USD and render
    format_portfolio,  # Transaction history
    format_prediction,  # Prediction card
    format_profile,  # Profile view
    format_transaction_receipt,  # Trade confirmation
)
from cryptotrack.application.portfolio import valuate  # Per-transaction valuation
from cryptotrack.domain import seed  # Seed data for test fixtures
from cryptotrack.domain.models import TX_SELL, Transaction


class TestFormatMoney:
    def test_usd(self):
        assert format_money(1234.5, "USD") == "$1,234.50"

    def test_usd_negative(self):
        assert format_money(-5, "USD") == "-$5.00"

    @pytest.mark.parametrize("amount", [-0.001, -0.004])
    def test_negative_rounding_to_zero_keeps_sign(self, amount):
        assert format_money(amount, "USD") == "-$0.00"

    def test_eur_converts_and_uses_trailing_symbol(self):
        assert format_money(100, "EUR") == "92,00\u00a0€"

    def test_eur_grouping(self):
        assert format_currency_amount(1234567.89, "EUR") == "1.234.567,89\u00a0€"

    def test_jpy(self):
        assert format_money(100, "JPY") == "￥15,050.00"

    def test_gbp(self):
        assert format_money(100, "GBP") == "£79.00"

    def test_inr_uses_indian_grouping(self):
        assert format_money(1000, "INR") == "₹83,500.00"
        assert format_currency_amount(10_000_000, "INR") == "₹1,00,00,000.00"

    @pytest.mark.parametrize("amount,expected", [
        (3211.5725, "$3,211.57"),
        (0.005, "$0.01"),
        (0.004, "$0.00"),
        (999.995, "$1,000.00"),
        (0, "$0.00"),
    ])
    def test_rounding_half_up(self, amount, expected):
        assert format_money(amount, "USD") == expected

    def test_small_amounts_are_not_grouped(self):
        assert format_currency_amount(999, "USD") == "$999.00"


class TestSmallHelpers:
    def test_fmt_pct(self):
        assert _fmt_pct(2.4) == "+2.40% 📈"
        assert _fmt_pct(-5.4) == "-5.40% 📉"
        assert _fmt_pct(0.001) == "0.00% ⏸"

    def test_fmt_units(self):
        assert _fmt_units(0.05) == "0.05"
        assert _fmt_units(1.5) == "1.5"
        assert _fmt_units(12.0) == "12"


class TestMessages:
    def setup_method(self):
        self.coins = seed.initial_coins()
        self.bitcoin = self.coins[0]

    def test_market_marks_favorites(self):
        text = format_market(self.coins[:2], "USD", favorites=["bitcoin"])
        assert text.startswith("📊 Market")
        assert "⭐ Bitcoin (BTC) $64,231.45  +2.40% 📈" in text
        assert "⭐ Ethereum" not in text

    def test_market_empty_search(self):
        text = format_market([], "USD", term="zzz")
        assert "No coins match your search." in text
        assert "'zzz'" in text

    def test_coin_detail(self):
        text = format_coin_detail(self.bitcoin, "USD", favorite=True)
        assert text.startswith("⭐ Bitcoin (BTC)")
        assert "Market cap: $1,200,000,000,000.00" in text
        assert "Volume (24h): $60,000,000,000.00" in text
        assert f"Trend: {self.bitcoin.trend}" in text

    def test_home_without_favorites(self):
        text = format_home(seed.MOCK_USER, 8389.7525, self.coins[:3], [], "USD")
        assert "Hi Alex Crypto" in text
        assert "Total balance: $8,389.75" in text
        assert "No favorites yet" in text

    def test_portfolio_history(self):
        buy = Transaction(id="t1", coin_id="bitcoin", amount=0.05, price_at_buy=55000, date="2023-11-15")
        sell = Transaction(id="s1", coin_id="bitcoin", amount=0.01, price_at_buy=60000, date="2024-02-01",
                           type=TX_SELL)
        valuations = [valuate(sell, self.bitcoin), valuate(buy, self.bitcoin)]

        text = format_portfolio(valuations, self.coins, 2569.258, "USD")

        assert "🔴 SELL -0.01 BTC @ $60,000.00  (2024-02-01)" in text
        assert "Proceeds: $600.00" in text
        assert "🟢 BUY  +0.05 BTC @ $55,000.00  (2023-11-15)" in text
        assert "Current value: $3,211.57 | Return: +$461.57 (+16.8%)" in text
        assert text.index("SELL") < text.index("BUY")
        assert text.rstrip().endswith("$2,569.26")

    def test_portfolio_lists_oversold_coins(self):
        sell = Transaction(id="s1", coin_id="ethereum", amount=2, price_at_buy=3000, date="2024-02-01",
                           type=TX_SELL)
        text = format_portfolio([valuate(sell, self.coins[1])], self.coins, 0.0, "USD",
                                oversold={"ethereum": -2.0})
        assert text.endswith("⚠️ Oversold: -2 ETH. These count as negative holdings in the total.")

    def test_portfolio_without_oversold_has_no_warning(self):
        buy = Transaction(id="t1", coin_id="bitcoin", amount=1, price_at_buy=1, date="2024-01-01")
        assert "Oversold" not in format_portfolio([valuate(buy, self.bitcoin)], self.coins, 1.0, "USD")

    def test_portfolio_empty(self):
        assert "No transactions yet" in format_portfolio([], self.coins, 0, "USD")

    def test_profile(self):
        text = format_profile(seed.MOCK_USER, 12450.0, seed.MOCK_BANK_ACCOUNTS, "EUR")
        assert "Fiat balance: 11.454,00\u00a0€" in text
        assert "Chase •••• 4242 (b1)" in text
        assert "Display currency: EUR" in text

    def test_receipt(self):
        text = format_transaction_receipt(self.bitcoin, 0.1, 60000, "buy", "2024-05-01", "USD")
        assert text == "✅ Bought 0.1 BTC @ $60,000.00\nTotal: $6,000.00 (2024-05-01)"

    def test_analysis_card(self):
        assert format_analysis(self.bitcoin, "Looks strong.").endswith("\n\nLooks strong.")

    def test_prediction_card(self):
        prediction = PricePrediction(
            sentiment="Bullish", confidence=72, predictionRange="$63k - $66k", reasoning="Momentum."
        )
        text = format_prediction(self.bitcoin, prediction)
        assert "Sentiment: Bullish" in text
        assert "Confidence: 72%" in text
        assert "Range: $63k - $66k" in text

    def test_prediction_unavailable(self):
        assert format_prediction(self.bitcoin, None).endswith("Prediction unavailable right now.")
