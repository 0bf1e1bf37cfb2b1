"""
Preference Store Tests - Persisted Display Currency

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.adapters.persistence.preference_store (PreferenceStore)
"""
import json
from unittest.mock import patch

import pytest

from cryptotrack.adapters.persistence.preference_store import PreferenceStore


class TestLoadCurrency:
    def test_missing_file_defaults_to_usd(self, store, pref_path):
        assert not pref_path.exists()
        assert store.load_currency() == "USD"

    def test_saved_value_round_trips(self, store, pref_path):
        store.save_currency("INR")

        assert json.loads(pref_path.read_text(encoding="utf-8")) == {"preferred_currency": "INR"}
        assert PreferenceStore(pref_path).load_currency() == "INR"

    def test_corrupt_file_is_backed_up(self, store, pref_path):
        pref_path.parent.mkdir(parents=True)
        pref_path.write_text("{not json", encoding="utf-8")

        assert store.load_currency() == "USD"
        assert not pref_path.exists()
        assert pref_path.with_suffix(".json.corrupt").read_text(encoding="utf-8") == "{not json"

    @pytest.mark.parametrize("payload", [
        {"preferred_currency": "BTC"},
        {"preferred_currency": "eur"},
        {"preferred_currency": 42},
        {"other": "EUR"},
        ["EUR"],
        "EUR",
    ])
    def test_invalid_contents_default_to_usd(self, store, pref_path, payload):
        pref_path.parent.mkdir(parents=True)
        pref_path.write_text(json.dumps(payload), encoding="utf-8")

        assert store.load_currency() == "USD"


class TestSaveCurrency:
    def test_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "prefs.json"
        PreferenceStore(path).save_currency("GBP")
        assert path.exists()

    def test_overwrites_previous_value(self, store):
        store.save_currency("EUR")
        store.save_currency("JPY")
        assert store.load_currency() == "JPY"

    def test_write_failure_raises_and_cleans_up(self, store, pref_path):
        with patch("cryptotrack.adapters.persistence.preference_store.os.replace",
                   side_effect=OSError("read-only")):
            with pytest.raises(RuntimeError, match="Failed to save preference file"):
                store.save_currency("EUR")

        assert list(pref_path.parent.glob("*.tmp")) == []
        assert not pref_path.exists()
