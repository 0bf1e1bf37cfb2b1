"""
Composition Root Tests - Startup Wiring

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.app (build_state, check_ai)
- cryptotrack.adapters.telegram.bot (build_application)
- cryptotrack.config.settings (Settings)
- unittest.mock (Mock)
"""
import logging
from unittest.mock import Mock

import pytest

from cryptotrack.adapters.telegram.bot import build_application
from cryptotrack.adapters.telegram.handlers import ANALYSIS_SERVICE_KEY, APP_STATE_KEY
from cryptotrack.app import build_state, check_ai
from cryptotrack.application.analysis_service import AnalysisService
from cryptotrack.config.settings import Settings

VALID_TOKEN = "123456789:" + "A" * 35


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("BOT_TOKEN", "AI_API_KEY", "GEMINI_API_KEY", "API_KEY", "TICK_INTERVAL_SECONDS"):
        monkeypatch.delenv(name, raising=False)


def _analyst(result):
    analyst = Mock()
    analyst.model = "test-model"
    analyst.test_api.return_value = result
    return analyst


class TestCheckAi:
    def test_without_key_skips_the_request(self, caplog):
        analyst = _analyst((True, "OK"))
        with caplog.at_level(logging.WARNING, logger="cryptotrack.app"):
            assert check_ai(Settings(_env_file=None), analyst) is False
        analyst.test_api.assert_not_called()
        assert "AI_API_KEY not set" in caplog.text

    def test_reachable_endpoint(self, monkeypatch):
        monkeypatch.setenv("AI_API_KEY", "key-1234567890")
        analyst = _analyst((True, "OK"))
        assert check_ai(Settings(_env_file=None), analyst) is True
        analyst.test_api.assert_called_once_with()

    def test_failed_endpoint_is_logged(self, monkeypatch, caplog):
        monkeypatch.setenv("AI_API_KEY", "key-1234567890")
        analyst = _analyst((False, "API error: x"))
        with caplog.at_level(logging.WARNING, logger="cryptotrack.app"):
            assert check_ai(Settings(_env_file=None), analyst) is False
        assert "AI endpoint check failed: API error: x" in caplog.text


class TestBuildApplication:
    def test_state_and_service_are_shared(self, state):
        analysis = AnalysisService(Mock())
        app = build_application(VALID_TOKEN, state, analysis)
        assert app.bot_data[APP_STATE_KEY] is state
        assert app.bot_data[ANALYSIS_SERVICE_KEY] is analysis

    def test_state_changes_reach_the_debug_log(self, state, caplog):
        build_application(VALID_TOKEN, state, AnalysisService(Mock()))
        with caplog.at_level(logging.DEBUG, logger="cryptotrack.adapters.telegram.bot"):
            state.login()
            state.set_currency("EUR")
        assert "State changed: session" in caplog.text
        assert "State changed: currency" in caplog.text


def test_build_state_uses_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("TICK_INTERVAL_SECONDS", "2.5")
    settings = Settings(_env_file=None)
    settings.preferences_file = tmp_path / "prefs.json"
    state = build_state(settings)
    assert state.fiat_balance == settings.starting_fiat_balance
    assert state.tick_interval == 2.5
    assert state.currency == "USD"
    assert not state.is_authenticated
