# src/cryptotrack/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Values come from environment variables or a local .env file.

Files that USE this module:
- cryptotrack.app (loads settings for logging, bot and state container)
- cryptotrack.adapters.ai.analyst (API key, base URL, model, timeout)
- cryptotrack.adapters.persistence.preference_store (preference file path)
- cryptotrack.application.app_state (tick cadence, volatility, starting balance)

Files that this module USES:
- cryptotrack.shared.validators (validation functions for settings)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cryptotrack.shared.validators import validate_api_key, validate_bot_token

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # --- Telegram (only needed to run the chat front-end) ---
    bot_token: str = Field(default="", alias="BOT_TOKEN")

    # --- AI analysis (OpenAI-compatible endpoint) ---
    ai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("AI_API_KEY", "GEMINI_API_KEY", "API_KEY"),
    )
    ai_base_url: str = Field(default=GEMINI_OPENAI_BASE_URL, alias="AI_BASE_URL")
    ai_model: str = Field(default="gemini-3-flash-preview", alias="AI_MODEL")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=30, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=120)

    # --- Simulated market ---
    tick_interval_seconds: float = Field(default=5.0, alias="TICK_INTERVAL_SECONDS", gt=0, le=3600)
    price_volatility: float = Field(default=0.005, alias="PRICE_VOLATILITY", ge=0.0, lt=1.0)
    starting_fiat_balance: float = Field(default=12450.00, alias="STARTING_FIAT_BALANCE", ge=0.0)

    # --- Persistence ---
    preferences_file: Path = Field(
        default=Path("./data/preferences.json"), alias="PREFERENCES_FILE"
    )

    # --- Logging ---
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=True, alias="CRYPTOTRACK_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @property
    def ai_enabled(self) -> bool:
        return bool(self.ai_api_key)

    @field_validator("bot_token")
    @classmethod
    def validate_bot_token(cls, v: str) -> str:
        """Validate bot token format (empty is allowed)."""
        if v and not validate_bot_token(v):
            raise ValueError("Invalid BOT_TOKEN format")
        return v

    @field_validator("ai_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        """Validate API key format (empty disables AI features)."""
        v = v.strip()
        if v and not validate_api_key(v):
            raise ValueError("Invalid AI_API_KEY format")
        return v


# Global settings instance
settings = Settings()
