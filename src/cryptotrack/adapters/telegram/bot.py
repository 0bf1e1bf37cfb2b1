# src/cryptotrack/adapters/telegram/bot.py
"""
Telegram Bot - Application Builder

Builds the Telegram application, wires the handlers, and ties the price
ticker to the application's lifecycle. Chat screens are rendered from the
state container on each command, so state-change notifications are only
traced to the debug log.

Files that USE this module:
- cryptotrack.app (builds the application at startup)
- tests.test_app (unit tests)

Files that this module USES:
- cryptotrack.adapters.telegram.handlers (handler list and bot_data keys)
- cryptotrack.application.* (AppState, AnalysisService)
"""

from __future__ import annotations

import logging

from telegram.ext import Application

from cryptotrack.adapters.telegram.handlers import ANALYSIS_SERVICE_KEY, APP_STATE_KEY, build_handlers
from cryptotrack.application.analysis_service import AnalysisService
from cryptotrack.application.app_state import EVENT_TICK, AppState

logger = logging.getLogger(__name__)


def _log_state_change(event: str, state: AppState) -> None:
    if event == EVENT_TICK:
        logger.debug("Market tick #%d", state.feed.tick_count)
    else:
        logger.debug("State changed: %s", event)


async def _on_startup(app: Application) -> None:
    app.bot_data[APP_STATE_KEY].start()


async def _on_shutdown(app: Application) -> None:
    app.bot_data[ANALYSIS_SERVICE_KEY].dismiss_all()
    await app.bot_data[APP_STATE_KEY].stop()


def build_application(bot_token: str, state: AppState, analysis: AnalysisService) -> Application:
    """
    Build Telegram bot application around a state container.

    Updates are processed concurrently so /close can reach a chat while an
    AI request for it is still pending.

    Args:
        bot_token: Telegram bot token
        state: Session state container shared by all handlers
        analysis: View-bound AI request service

    Returns:
        Configured Application instance
    """
    app = (
        Application.builder()
        .token(bot_token)
        .concurrent_updates(True)
        .post_init(_on_startup)
        .post_shutdown(_on_shutdown)
        .build()
    )
    app.bot_data[APP_STATE_KEY] = state
    app.bot_data[ANALYSIS_SERVICE_KEY] = analysis
    # Screens read state on demand; the subscription only traces changes
    state.subscribe(_log_state_change)

    for handler in build_handlers():
        app.add_handler(handler)

    logger.info("Telegram application built with %d handlers", len(app.handlers.get(0, [])))
    return app
