# src/cryptotrack/adapters/persistence/preference_store.py
"""
Preference Store - Persisted Currency Preference

Holds the single durable value of the tracker: the preferred display
currency, stored as {"preferred_currency": "<code>"} in a JSON file.
Everything else in a session is discarded on restart.

Files that USE this module:
- cryptotrack.application.app_state (reads once at start, writes on every currency change)
- cryptotrack.app (builds the store from settings)

Files that this module USES:
- cryptotrack.domain.currency (supported codes and the USD fallback)
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Union

from cryptotrack.domain.currency import DEFAULT_CURRENCY, is_supported

logger = logging.getLogger(__name__)

PREFERRED_CURRENCY_KEY = "preferred_currency"


class PreferenceStore:
    """Read and write the preferred currency in a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load_currency(self) -> str:
        """
        Load the preferred currency.

        Missing files, unreadable or corrupt JSON, and unsupported codes all
        fall back to USD. A corrupt file is moved aside to *.json.corrupt.

        Returns:
            A supported currency code
        """
        if not self.path.exists():
            logger.info("No preference file at %s, using %s", self.path, DEFAULT_CURRENCY)
            return DEFAULT_CURRENCY

        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self._backup_corrupt(e)
            return DEFAULT_CURRENCY
        except OSError as e:
            logger.error("Failed to read preference file %s: %s", self.path, e)
            return DEFAULT_CURRENCY

        saved = data.get(PREFERRED_CURRENCY_KEY) if isinstance(data, dict) else None
        if not is_supported(saved):
            logger.warning("Ignoring invalid persisted currency %r, using %s", saved, DEFAULT_CURRENCY)
            return DEFAULT_CURRENCY

        logger.info("Loaded preferred currency: %s", saved)
        return saved

    def save_currency(self, currency: str) -> None:
        """
        Persist the preferred currency using an atomic write.

        Raises:
            RuntimeError: If the file cannot be written
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_fd, temp_path = tempfile.mkstemp(
            suffix=".json.tmp",
            dir=str(self.path.parent),
            text=True,
        )
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                json.dump({PREFERRED_CURRENCY_KEY: currency}, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, str(self.path))
        except Exception as e:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise RuntimeError(f"Failed to save preference file: {e}") from e

        logger.debug("Saved preferred currency: %s", currency)

    def _backup_corrupt(self, error: Exception) -> None:
        backup_path = self.path.with_suffix(".json.corrupt")
        try:
            shutil.copy2(self.path, backup_path)
            self.path.unlink()
            logger.warning("Preference file corrupted, backed up to %s: %s", backup_path, error)
        except OSError as backup_error:
            logger.error("Failed to back up corrupt preference file: %s", backup_error)
