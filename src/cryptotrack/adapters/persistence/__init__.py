# src/cryptotrack/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

File-based JSON storage for the preferred display currency.
"""

from cryptotrack.adapters.persistence.preference_store import PREFERRED_CURRENCY_KEY, PreferenceStore

__all__ = [
    "PreferenceStore",
    "PREFERRED_CURRENCY_KEY",
]
