# src/cryptotrack/app.py
"""
Application Entry Point - Composition Root

Wires the tracker together and starts the chat front-end:
settings -> logging -> preference store -> state container -> AI analyst
-> analysis service -> Telegram application.

Files that USE this module:
- python -m cryptotrack (module entry point)
- cryptotrack console script

Files that this module USES:
- cryptotrack.shared.logging_conf (setup_logging for logging configuration)
- cryptotrack.config (settings for configuration management)
- cryptotrack.application.* (AppState, AnalysisService)
- cryptotrack.adapters.* (PreferenceStore, MarketAnalyst, build_application)
"""

from __future__ import annotations

import logging
import sys

from telegram.error import InvalidToken, NetworkError, TimedOut

from cryptotrack.adapters.ai.analyst import MarketAnalyst
from cryptotrack.adapters.persistence.preference_store import PreferenceStore
from cryptotrack.adapters.telegram.bot import build_application
from cryptotrack.application.analysis_service import AnalysisService
from cryptotrack.application.app_state import AppState
from cryptotrack.config import Settings
from cryptotrack.shared.logging_conf import setup_logging


def build_state(settings: Settings) -> AppState:
    """Build a fresh session state container from settings."""
    return AppState(
        preference_store=PreferenceStore(settings.preferences_file),
        fiat_balance=settings.starting_fiat_balance,
        tick_interval=settings.tick_interval_seconds,
        volatility=settings.price_volatility,
    )


def check_ai(settings: Settings, analyst: MarketAnalyst) -> bool:
    """
    Check the AI endpoint once at startup.

    A failed check is logged; the bot still starts and AI commands fall back
    to their unavailable messages.

    Returns:
        True if the endpoint answered
    """
    logger = logging.getLogger(__name__)
    if not settings.ai_enabled:
        logger.warning("AI_API_KEY not set; /analysis and /predict will report unavailable")
        return False

    ok, detail = analyst.test_api()
    if ok:
        logger.info("AI endpoint reachable (model=%s)", analyst.model)
    else:
        logger.warning("AI endpoint check failed: %s", detail)
    return ok


def main() -> None:
    """
    Initialize and start the chat front-end.

    This function:
    1. Sets up logging and validates configuration
    2. Builds the state container and AI services
    3. Builds the Telegram application (ticker starts with it)
    4. Starts the polling loop
    """
    from cryptotrack.config import settings

    setup_logging(
        level=logging.INFO,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
        log_stdout=settings.log_stdout,
    )
    logger = logging.getLogger(__name__)

    if not settings.bot_token:
        logger.error("BOT_TOKEN missing; cannot start the chat front-end")
        sys.exit(1)

    state = build_state(settings)
    analyst = MarketAnalyst()
    analysis = AnalysisService(analyst)
    app = build_application(settings.bot_token, state, analysis)
    ai_ok = check_ai(settings, analyst)

    logger.info(
        "Starting bot polling… tick interval=%.1fs, currency=%s, ai=%s",
        settings.tick_interval_seconds,
        state.currency,
        "ready" if ai_ok else ("unreachable" if settings.ai_enabled else "disabled"),
    )

    try:
        app.run_polling(allowed_updates=None, drop_pending_updates=True)
    except InvalidToken:
        logger.error("Telegram rejected BOT_TOKEN")
        raise
    except (TimedOut, NetworkError) as e:
        logger.error(
            "Network error during bot operation: %s (type: %s)",
            e,
            type(e).__name__,
            exc_info=True,
        )
        raise
    except KeyboardInterrupt:
        logger.info("Bot stopped by user (KeyboardInterrupt)")
        raise
    except Exception as e:
        logger.exception("Unexpected error during bot operation: %s (type: %s)", e, type(e).__name__)
        raise


if __name__ == "__main__":
    main()
