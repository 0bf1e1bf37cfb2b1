"""
Shared Utility Tests - Validators, Rate Limiter and Settings

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- cryptotrack.shared.validators (input and config validation)
- cryptotrack.shared.rate_limiter (RateLimiter, RateLimitConfig)
- cryptotrack.config.settings (Settings)
"""
import pytest
from pydantic import ValidationError

from cryptotrack.config.settings import GEMINI_OPENAI_BASE_URL, Settings
from cryptotrack.domain.errors import InvalidAmountError
from cryptotrack.shared.rate_limiter import RateLimitConfig, RateLimiter
from cryptotrack.shared.validators import (
    parse_amount,
    parse_date,
    sanitize_user_input,
    validate_api_key,
    validate_bot_token,
)

VALID_TOKEN = "123456789:" + "A" * 35


class TestValidators:
    def test_bot_token(self):
        assert validate_bot_token(VALID_TOKEN)
        assert not validate_bot_token("")
        assert not validate_bot_token("123:short")

    def test_api_key(self):
        assert validate_api_key("abcdefghij")
        assert not validate_api_key("short")
        assert not validate_api_key(" " * 12)

    @pytest.mark.parametrize("text,expected", [("5000", 5000.0), ("1,250.5", 1250.5), (" 0.01 ", 0.01)])
    def test_parse_amount(self, text, expected):
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", [None, "", "abc", "0", "-3", "nan", "inf"])
    def test_parse_amount_rejects(self, text):
        with pytest.raises(InvalidAmountError):
            parse_amount(text)

    def test_parse_date(self):
        assert parse_date("2024-01-10") == "2024-01-10"
        assert parse_date("") is None
        with pytest.raises(ValueError):
            parse_date("10/01/2024")

    def test_sanitize(self):
        assert sanitize_user_input(" <b>sol</b> ") == "bsol/b"
        assert sanitize_user_input("abcdef", max_length=3) == "abc"


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestRateLimiter:
    def setup_method(self):
        self.clock = FakeClock()
        self.limiter = RateLimiter(clock=self.clock)
        self.config = RateLimitConfig(max_requests=2, time_window=60, block_duration=120)

    def test_allows_up_to_limit_then_blocks(self):
        assert self.limiter.is_allowed("chat:1", self.config)
        assert self.limiter.is_allowed("chat:1", self.config)
        assert not self.limiter.is_allowed("chat:1", self.config)
        assert self.limiter.get_reset_time("chat:1", self.config) == 1120.0

    def test_block_expires(self):
        for _ in range(3):
            self.limiter.is_allowed("chat:1", self.config)
        self.clock.now += 121
        assert self.limiter.is_allowed("chat:1", self.config)

    def test_window_slides(self):
        self.limiter.is_allowed("chat:1", self.config)
        self.clock.now += 61
        assert self.limiter.get_remaining_requests("chat:1", self.config) == 2

    def test_identifiers_are_independent(self):
        self.limiter.is_allowed("chat:1", self.config)
        self.limiter.is_allowed("chat:1", self.config)
        assert self.limiter.is_allowed("chat:2", self.config)

    def test_reset(self):
        for _ in range(3):
            self.limiter.is_allowed("chat:1", self.config)
        self.limiter.reset("chat:1")
        assert self.limiter.is_allowed("chat:1", self.config)
        assert self.limiter.get_reset_time("chat:9", self.config) is None


class TestSettings:
    @pytest.fixture(autouse=True)
    def _clean_env(self, monkeypatch):
        for name in ("BOT_TOKEN", "AI_API_KEY", "GEMINI_API_KEY", "API_KEY", "TICK_INTERVAL_SECONDS"):
            monkeypatch.delenv(name, raising=False)

    def test_defaults(self):
        s = Settings(_env_file=None)
        assert s.bot_token == ""
        assert not s.ai_enabled
        assert s.ai_base_url == GEMINI_OPENAI_BASE_URL
        assert s.tick_interval_seconds == 5.0
        assert s.starting_fiat_balance == 12450.00

    def test_gemini_key_alias(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "  gemini-key-123456  ")
        s = Settings(_env_file=None)
        assert s.ai_api_key == "gemini-key-123456"
        assert s.ai_enabled

    def test_invalid_bot_token(self, monkeypatch):
        monkeypatch.setenv("BOT_TOKEN", "nope")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_tick_interval_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("TICK_INTERVAL_SECONDS", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
