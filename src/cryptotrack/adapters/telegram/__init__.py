# src/cryptotrack/adapters/telegram/__init__.py
"""
Telegram Adapters - Chat Front-end

This package contains Telegram bot adapters:
- Bot application builder
- Command handlers
"""

from cryptotrack.adapters.telegram.bot import build_application
from cryptotrack.adapters.telegram.handlers import build_handlers

__all__ = [
    "build_application",
    "build_handlers",
]
