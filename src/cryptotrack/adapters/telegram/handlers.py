# src/cryptotrack/adapters/telegram/handlers.py
"""
Telegram Handlers - Command Processing and User Interaction

This module is the chat front-end of the tracker. Each command maps to a
screen of the tracker (home, market, coin detail, favorites, transactions,
profile) or to one of the state container's mutations.

Navigation rules:
- Every command except /login and /register needs a logged-in session;
  otherwise the user is sent to login.
- Unknown commands fall back to the home screen.
- Plain text is treated as a market search.

The AppState and AnalysisService are read from Application.bot_data, where
the composition root puts them.

Files that USE this module:
- cryptotrack.app (build_handlers function creates handler instances)

Files that this module USES:
- cryptotrack.application.app_state (AppState)
- cryptotrack.application.analysis_service (AnalysisService)
- cryptotrack.application.portfolio (new_transaction)
- cryptotrack.adapters.formatting.formatter (all message builders)
- cryptotrack.shared.rate_limiter (rate limiting functionality)
- cryptotrack.shared.validators (argument parsing)
"""
from __future__ import annotations

import logging
from functools import wraps
from typing import Awaitable, Callable, Optional

from telegram import Update
from telegram.ext import CommandHandler, ContextTypes, MessageHandler, filters

from cryptotrack.adapters.formatting import formatter
from cryptotrack.application.analysis_service import AnalysisService
from cryptotrack.application.app_state import AppState
from cryptotrack.application.portfolio import new_transaction
from cryptotrack.domain.currency import SUPPORTED_CURRENCIES, convert_to_usd
from cryptotrack.domain.errors import CoinNotFoundError, InvalidAmountError, UnknownCurrencyError
from cryptotrack.domain.models import TX_BUY, TX_SELL, Coin
from cryptotrack.shared.rate_limiter import RATE_LIMITS, rate_limiter
from cryptotrack.shared.validators import parse_amount, parse_date, sanitize_user_input

logger = logging.getLogger(__name__)

APP_STATE_KEY = "app_state"
ANALYSIS_SERVICE_KEY = "analysis_service"

LOGIN_PROMPT = "🔒 Please /login or /register first."
RATE_LIMITED = "⏰ Rate limit exceeded. Please try again later."
GENERIC_ERROR = "⚠️ Something went wrong. Please try again."
WITHDRAW_USAGE = "/withdraw <amount> [account id or last four digits]"

HELP_TEXT = (
    "Commands:\n"
    "/start - home\n"
    "/market [search] - all coins\n"
    "/coin <id> - coin details\n"
    "/favorites - your favorite coins\n"
    "/fav <id> - add or remove a favorite\n"
    "/buy <id> <amount> [YYYY-MM-DD]\n"
    "/sell <id> <amount> [YYYY-MM-DD]\n"
    "/portfolio - transaction history\n"
    "/profile - balance and accounts\n"
    f"/currency [{'|'.join(SUPPORTED_CURRENCIES)}]\n"
    "/withdraw <amount> [account] - withdraw cash (display currency)\n"
    "/analysis <id> - AI market summary\n"
    "/predict <id> - AI 24h outlook\n"
    "/close - drop pending AI requests\n"
    "/logout"
)

Handler = Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]


def _state(context: ContextTypes.DEFAULT_TYPE) -> AppState:
    return context.bot_data[APP_STATE_KEY]


def _analysis(context: ContextTypes.DEFAULT_TYPE) -> AnalysisService:
    return context.bot_data[ANALYSIS_SERVICE_KEY]


def _view_key(update: Update) -> str:
    """AI requests are bound to the chat they were asked from."""
    if update.effective_chat:
        return f"chat:{update.effective_chat.id}"
    return f"user:{update.effective_user.id}"


def _check_rate_limit(update: Update, limit_type: str) -> bool:
    """
    Check if the chat is within the configured rate limit for limit_type.

    Buckets are namespaced by limit type so AI requests do not eat into the
    budget for regular commands.
    """
    config = RATE_LIMITS.get(limit_type)
    if not config:
        return True

    chat_id = update.effective_chat.id if update.effective_chat else update.effective_user.id
    identifier = f"{limit_type}:chat:{chat_id}"
    if not rate_limiter.is_allowed(identifier, config):
        logger.warning(
            "Rate limit exceeded for %s (remaining=%s, reset_time=%s)",
            identifier,
            rate_limiter.get_remaining_requests(identifier, config),
            rate_limiter.get_reset_time(identifier, config),
        )
        return False
    return True


def command(limit_type: str = "user_command", requires_auth: bool = True) -> Callable[[Handler], Handler]:
    """
    Wrap a handler with rate limiting, the login guard and error reporting.
    """
    def decorator(func: Handler) -> Handler:
        @wraps(func)
        async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            if update.message is None:
                return
            if not _check_rate_limit(update, limit_type):
                await update.message.reply_text(RATE_LIMITED)
                return
            if requires_auth and not _state(context).is_authenticated:
                await update.message.reply_text(LOGIN_PROMPT)
                return
            try:
                await func(update, context)
            except Exception:
                logger.exception("Handler %s failed", func.__name__)
                await update.message.reply_text(GENERIC_ERROR)
        return wrapper
    return decorator


async def _resolve_coin(update: Update, state: AppState, args: list[str], usage: str) -> Optional[Coin]:
    if not args:
        await update.message.reply_text(f"Usage: {usage}")
        return None
    try:
        return state.feed.get_coin(args[0])
    except CoinNotFoundError:
        await update.message.reply_text(f"❓ Coin not found: {sanitize_user_input(args[0], 40)}")
        return None


def _home_text(state: AppState) -> str:
    return formatter.format_home(
        user=state.user,
        total_usd=state.portfolio_total(),
        movers=state.feed.top_movers(),
        favorite_coins=state.favorite_coins(),
        currency=state.currency,
    )


# --- Session ---

@command(requires_auth=False)
async def login_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    state.login()
    await update.message.reply_text(f"✅ Welcome back, {state.user.name}!\n\n{_home_text(state)}")


@command(requires_auth=False)
async def register_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    state.register()
    await update.message.reply_text(f"🎉 Account created. Welcome, {state.user.name}!\n\n{HELP_TEXT}")


@command()
async def logout_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    _analysis(context).dismiss(_view_key(update))
    _state(context).logout()
    await update.message.reply_text("👋 Logged out.")


# --- Screens ---

@command()
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(_home_text(_state(context)))


@command()
async def help_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(HELP_TEXT)


@command()
async def market_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    term = sanitize_user_input(" ".join(context.args or []), 40)
    coins = state.feed.search(term)
    await update.message.reply_text(
        formatter.format_market(coins, state.currency, state.favorites, term=term or None)
    )


@command()
async def search_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    term = sanitize_user_input(update.message.text or "", 40)
    await update.message.reply_text(
        formatter.format_market(state.feed.search(term), state.currency, state.favorites, term=term or None)
    )


@command()
async def coin_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    coin = await _resolve_coin(update, state, context.args or [], "/coin <id>")
    if coin is None:
        return
    await update.message.reply_text(
        formatter.format_coin_detail(coin, state.currency, state.is_favorite(coin.id))
    )


@command()
async def favorites_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    coins = state.favorite_coins()
    if not coins:
        await update.message.reply_text("⭐ No favorites yet. Use /fav <coin> to add one.")
        return
    lines = ["⭐ Favorites", ""]
    lines.extend(formatter.coin_line(c, state.currency) for c in coins)
    await update.message.reply_text("\n".join(lines))


@command()
async def fav_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    coin = await _resolve_coin(update, state, context.args or [], "/fav <id>")
    if coin is None:
        return
    if state.toggle_favorite(coin.id):
        await update.message.reply_text(f"⭐ {coin.name} added to favorites.")
    else:
        await update.message.reply_text(f"☆ {coin.name} removed from favorites.")


@command()
async def portfolio_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    positions = state.portfolio.net_positions()
    await update.message.reply_text(
        formatter.format_portfolio(
            state.portfolio.valuations(state.coins),
            state.coins,
            state.portfolio_total(),
            state.currency,
            oversold={coin_id: positions[coin_id] for coin_id in state.portfolio.oversold_coins()},
        )
    )


@command()
async def profile_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    await update.message.reply_text(
        formatter.format_profile(state.user, state.fiat_balance, state.bank_accounts, state.currency)
    )


# --- Mutations ---

async def _trade(update: Update, context: ContextTypes.DEFAULT_TYPE, tx_type: str) -> None:
    state = _state(context)
    args = context.args or []
    usage = f"/{tx_type} <id> <amount> [YYYY-MM-DD]"
    if len(args) < 2:
        await update.message.reply_text(f"Usage: {usage}")
        return

    coin = await _resolve_coin(update, state, args, usage)
    if coin is None:
        return
    try:
        amount = parse_amount(args[1])
        date = parse_date(args[2]) if len(args) > 2 else None
    except InvalidAmountError as e:
        await update.message.reply_text(f"⚠️ {e}")
        return
    except ValueError:
        await update.message.reply_text("⚠️ Date must look like YYYY-MM-DD.")
        return

    tx = new_transaction(coin, amount, tx_type, date=date)
    state.add_transaction(tx)
    await update.message.reply_text(
        formatter.format_transaction_receipt(coin, tx.amount, tx.price_at_buy, tx.type, tx.date, state.currency)
    )


@command()
async def buy_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _trade(update, context, TX_BUY)


@command()
async def sell_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await _trade(update, context, TX_SELL)


@command()
async def currency_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    args = context.args or []
    if not args:
        await update.message.reply_text(
            f"💱 Display currency: {state.currency}\nChoose one of: {', '.join(SUPPORTED_CURRENCIES)}"
        )
        return
    try:
        state.set_currency(args[0].upper())
    except UnknownCurrencyError:
        await update.message.reply_text(f"⚠️ Choose one of: {', '.join(SUPPORTED_CURRENCIES)}")
        return
    await update.message.reply_text(f"✅ Prices are now shown in {state.currency}.")


@command()
async def withdraw_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Withdraw cash to a linked bank account. The amount is typed in the
    display currency and converted to USD before it reaches the balance
    check. The account is picked by id or last four digits and defaults to
    the first linked account.
    """
    state = _state(context)
    args = context.args or []
    try:
        amount = parse_amount(args[0] if args else None)
    except InvalidAmountError as e:
        await update.message.reply_text(f"⚠️ {e}\nUsage: {WITHDRAW_USAGE}")
        return

    if len(args) > 1:
        account = state.find_bank_account(args[1])
    else:
        account = state.bank_accounts[0] if state.bank_accounts else None
    if account is None:
        linked = ", ".join(f"{a.id} ({a.bank_name} •••• {a.last_four})" for a in state.bank_accounts)
        await update.message.reply_text(
            f"⚠️ Unknown destination account. Linked accounts: {linked or 'none'}"
        )
        return

    amount_usd = convert_to_usd(amount, state.currency)
    # Withdrawing the displayed maximum must not fail on conversion rounding
    if 0 < amount_usd - state.fiat_balance < 0.005:
        amount_usd = state.fiat_balance

    if not state.withdraw_funds(amount_usd):
        await update.message.reply_text(
            f"❌ Insufficient funds. Available: {state.format_price(state.fiat_balance)}"
        )
        return
    await update.message.reply_text(
        f"✅ Withdrawal of {formatter.format_currency_amount(amount, state.currency)} "
        f"to {account.bank_name} •••• {account.last_four} submitted.\n"
        f"Remaining balance: {state.format_price(state.fiat_balance)}"
    )


# --- AI ---

@command(limit_type="ai_request")
async def analysis_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    coin = await _resolve_coin(update, state, context.args or [], "/analysis <id>")
    if coin is None:
        return
    await update.message.reply_text(f"🤖 Analyzing {coin.name}…")
    outcome = await _analysis(context).analysis(_view_key(update), coin)
    if not outcome.delivered:
        return
    await update.message.reply_text(formatter.format_analysis(coin, outcome.value))


@command(limit_type="ai_request")
async def predict_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    state = _state(context)
    coin = await _resolve_coin(update, state, context.args or [], "/predict <id>")
    if coin is None:
        return
    await update.message.reply_text(f"🔮 Forecasting {coin.name}…")
    outcome = await _analysis(context).prediction(_view_key(update), coin)
    if not outcome.delivered:
        return
    await update.message.reply_text(formatter.format_prediction(coin, outcome.value))


@command()
async def close_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if _analysis(context).dismiss(_view_key(update)):
        await update.message.reply_text("🛑 Pending AI request dropped.")
    else:
        await update.message.reply_text("Nothing pending.")


# --- Fallback ---

@command()
async def unknown_cmd(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(_home_text(_state(context)))


def build_handlers():
    """
    Build and return list of Telegram bot handlers.

    Returns:
        List of handler instances for registration with bot
    """
    return [
        CommandHandler("login", login_cmd),
        CommandHandler("register", register_cmd),
        CommandHandler("logout", logout_cmd),
        CommandHandler("start", start),
        CommandHandler("help", help_cmd),
        CommandHandler("market", market_cmd),
        CommandHandler("coin", coin_cmd),
        CommandHandler("favorites", favorites_cmd),
        CommandHandler("fav", fav_cmd),
        CommandHandler("portfolio", portfolio_cmd),
        CommandHandler("profile", profile_cmd),
        CommandHandler("buy", buy_cmd),
        CommandHandler("sell", sell_cmd),
        CommandHandler("currency", currency_cmd),
        CommandHandler("withdraw", withdraw_cmd),
        CommandHandler("analysis", analysis_cmd),
        CommandHandler("predict", predict_cmd),
        CommandHandler("close", close_cmd),
        MessageHandler(filters.COMMAND, unknown_cmd),  # must stay after the CommandHandlers
        MessageHandler(filters.TEXT & ~filters.COMMAND, search_text),
    ]
