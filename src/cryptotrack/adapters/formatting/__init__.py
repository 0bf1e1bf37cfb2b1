# src/cryptotrack/adapters/formatting/__init__.py
"""
Formatting Adapters - Output Formatting

Locale-aware price rendering and chat message layouts.
"""

from cryptotrack.adapters.formatting.formatter import (
    format_currency_amount,
    format_money,
)

__all__ = [
    "format_currency_amount",
    "format_money",
]
