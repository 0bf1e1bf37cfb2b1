# src/cryptotrack/adapters/formatting/formatter.py
"""
Message Formatter - Prices and Chat Messages

This module renders USD amounts in the selected display currency following
each currency's locale conventions, and builds the plain-text messages the
chat front-end sends: home summary, market list, coin detail, transaction
history, profile, AI analysis and price prediction.

Files that USE this module:
- cryptotrack.application.app_state (format_money backs AppState.format_price)
- cryptotrack.adapters.telegram.handlers (all message builders)
- tests.test_formatter (unit tests)

Files that this module USES:
- cryptotrack.domain.currency (rates and locale rules)
- cryptotrack.domain.models (Coin, Transaction, User, BankAccount)
- cryptotrack.application.portfolio (HoldingValuation, only for type hints)
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable, Mapping, Optional, Sequence

from cryptotrack.domain.currency import LOCALE_FORMATS, convert_from_usd
from cryptotrack.domain.models import BankAccount, Coin, User

if TYPE_CHECKING:
    from cryptotrack.adapters.ai.analyst import PricePrediction
    from cryptotrack.application.portfolio import HoldingValuation

_CENT = Decimal("0.01")


def _group_digits(digits: str, sep: str, indian: bool = False) -> str:
    """
    Insert group separators into a string of integer digits.

    Western grouping: 1,234,567. Indian grouping: 12,34,567.
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    size = 2 if indian else 3
    groups = []
    while head:
        groups.insert(0, head[-size:])
        head = head[:-size]
    return sep.join(groups + [tail])


def format_currency_amount(amount: float, currency: str) -> str:
    """
    Render an amount already expressed in `currency` with two fraction digits.

    Rounds half away from zero, e.g. 3211.5725 -> 3211.57, 0.005 -> 0.01.
    A negative amount keeps its sign after rounding to zero (-0.001 -> "-$0.00").

    Args:
        amount: Value in the target currency
        currency: Supported currency code

    Returns:
        Text like "$1,234.50", "1.234,50 €", "￥15,050.00" or "₹1,00,000.00"
    """
    rules = LOCALE_FORMATS[currency]
    quantized = Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    # Sign comes from the unrounded amount: -0.001 renders as "-$0.00"
    negative = amount < 0
    int_part, frac_part = f"{abs(quantized):.2f}".split(".")
    number = _group_digits(int_part, rules.group, rules.indian_grouping) + rules.decimal + frac_part

    if rules.symbol_first:
        text = f"{rules.symbol}{number}"
    else:
        text = f"{number}{rules.separator}{rules.symbol}"
    return f"-{text}" if negative else text


def format_money(amount_usd: float, currency: str) -> str:
    """Convert a USD amount with the static rate and render it for `currency`."""
    return format_currency_amount(convert_from_usd(amount_usd, currency), currency)


def _fmt_pct(value: float, decimals: int = 2) -> str:
    """
    Format a percentage with sign and trend arrow.

    Returns:
        Text like '+2.40% 📈', '-5.40% 📉' or '0.00% ⏸'
    """
    rounded = round(value, decimals)
    arrow = "📈" if rounded > 0 else ("📉" if rounded < 0 else "⏸")
    sign = "+" if rounded > 0 else ""
    return f"{sign}{rounded:.{decimals}f}% {arrow}"


def _fmt_units(amount: float) -> str:
    """Coin units without trailing zeros (0.05, 1.5, 12)."""
    return f"{amount:.8f}".rstrip("0").rstrip(".")


def _signed(text: str, value: float) -> str:
    return f"+{text}" if value >= 0 else text


def coin_line(coin: Coin, currency: str, favorite: bool = False) -> str:
    star = "⭐ " if favorite else ""
    return (
        f"{star}{coin.name} ({coin.symbol.upper()}) "
        f"{format_money(coin.current_price, currency)}  {_fmt_pct(coin.price_change_percentage_24h)}"
    )


def format_market(coins: Sequence[Coin], currency: str, favorites: Iterable[str] = (),
                  term: Optional[str] = None) -> str:
    """Market list, optionally filtered by a search term."""
    favorite_ids = set(favorites)
    header = f"🔎 Market results for '{term}'" if term else "📊 Market"
    if not coins:
        return f"{header}\n\nNo coins match your search."
    lines = [header, ""]
    lines.extend(coin_line(c, currency, c.id in favorite_ids) for c in coins)
    return "\n".join(lines)


def format_coin_detail(coin: Coin, currency: str, favorite: bool = False) -> str:
    """
    Coin detail view: price, 24h change, trend, market cap and derived stats.

    Volume is shown as 5% of market cap and all-time high as 1.4x the current
    price; both are display estimates with no data source behind them.
    """
    points = " → ".join(format_money(p, currency) for p in coin.sparkline[-3:])
    lines = [
        f"{'⭐ ' if favorite else ''}{coin.name} ({coin.symbol.upper()})",
        "",
        f"Price: {format_money(coin.current_price, currency)}",
        f"24h change: {_fmt_pct(coin.price_change_percentage_24h)}",
        f"Trend: {coin.trend}",
        f"Market cap: {format_money(coin.market_cap, currency)}",
        f"Volume (24h): {format_money(coin.market_cap * 0.05, currency)}",
        f"All-time high: {format_money(coin.current_price * 1.4, currency)}",
    ]
    if points:
        lines.append(f"Recent: {points}")
    if coin.description:
        lines.extend(["", coin.description])
    return "\n".join(lines)


def format_home(user: Optional[User], total_usd: float, movers: Sequence[Coin],
                favorite_coins: Sequence[Coin], currency: str) -> str:
    """Home summary: greeting, total balance, top movers and favorites."""
    name = user.name if user else "there"
    lines = [
        f"👋 Hi {name}",
        "",
        f"💼 Total balance: {format_money(total_usd, currency)}",
        "",
        "🚀 Top movers",
    ]
    lines.extend(coin_line(c, currency) for c in movers)
    lines.extend(["", "⭐ Favorites"])
    if favorite_coins:
        lines.extend(coin_line(c, currency) for c in favorite_coins)
    else:
        lines.append("No favorites yet. Use /fav <coin> to add one.")
    return "\n".join(lines)


def format_valuation(valuation: "HoldingValuation", coin: Coin, currency: str) -> str:
    """
    One history entry. Buys show current value and return; sells show proceeds.
    """
    tx = valuation.transaction
    symbol = coin.symbol.upper()
    if tx.is_buy:
        head = f"🟢 BUY  +{_fmt_units(tx.amount)} {symbol} @ {format_money(tx.price_at_buy, currency)}  ({tx.date})"
        gain = format_money(valuation.gain, currency)
        pct = f"{valuation.gain_percentage:.1f}%"
        tail = (
            f"    Current value: {format_money(valuation.current_value, currency)}"
            f" | Return: {_signed(gain, valuation.gain)} ({_signed(pct, valuation.gain)})"
        )
    else:
        head = f"🔴 SELL -{_fmt_units(tx.amount)} {symbol} @ {format_money(tx.price_at_buy, currency)}  ({tx.date})"
        tail = f"    Proceeds: {format_money(valuation.execution_value, currency)}"
    return f"{head}\n{tail}"


def format_portfolio(valuations: Sequence["HoldingValuation"], coins: Sequence[Coin],
                     total_usd: float, currency: str,
                     oversold: Optional[Mapping[str, float]] = None) -> str:
    """
    Transaction history, newest first, followed by the total balance.

    Args:
        oversold: Net units per coin id where sells exceed buys; listed under the total
    """
    if not valuations:
        return "🧾 No transactions yet.\nUse /buy <coin> <amount> to add your first trade."
    by_id = {c.id: c for c in coins}
    lines = ["🧾 Transactions", ""]
    lines.extend(format_valuation(v, by_id[v.transaction.coin_id], currency) for v in valuations)
    lines.extend(["", f"💼 Total balance: {format_money(total_usd, currency)}"])
    if oversold:
        held = ", ".join(
            f"{_fmt_units(units)} {by_id[coin_id].symbol.upper() if coin_id in by_id else coin_id}"
            for coin_id, units in oversold.items()
        )
        lines.append(f"⚠️ Oversold: {held}. These count as negative holdings in the total.")
    return "\n".join(lines)


def format_profile(user: Optional[User], fiat_balance: float, accounts: Sequence[BankAccount],
                   currency: str) -> str:
    lines = []
    if user:
        lines.extend([f"👤 {user.name}", f"✉️ {user.email}", ""])
    lines.append(f"💵 Fiat balance: {format_money(fiat_balance, currency)}")
    lines.append(f"💱 Display currency: {currency}")
    if accounts:
        lines.extend(["", "🏦 Linked accounts"])
        lines.extend(f"{a.bank_name} •••• {a.last_four} ({a.id})" for a in accounts)
    return "\n".join(lines)


def format_transaction_receipt(coin: Coin, amount: float, price_usd: float, tx_type: str,
                               date: str, currency: str) -> str:
    verb = "Bought" if tx_type == "buy" else "Sold"
    total = format_money(amount * price_usd, currency)
    return (
        f"✅ {verb} {_fmt_units(amount)} {coin.symbol.upper()} @ {format_money(price_usd, currency)}\n"
        f"Total: {total} ({date})"
    )


def format_analysis(coin: Coin, analysis: str) -> str:
    return f"🤖 AI analysis: {coin.name} ({coin.symbol.upper()})\n\n{analysis}"


def format_prediction(coin: Coin, prediction: Optional["PricePrediction"]) -> str:
    """Price prediction card, or a neutral notice when no prediction is available."""
    header = f"🔮 24h outlook: {coin.name} ({coin.symbol.upper()})"
    if prediction is None:
        return f"{header}\n\nPrediction unavailable right now."
    return (
        f"{header}\n\n"
        f"Sentiment: {prediction.sentiment}\n"
        f"Confidence: {prediction.confidence:.0f}%\n"
        f"Range: {prediction.prediction_range}\n\n"
        f"{prediction.reasoning}"
    )
