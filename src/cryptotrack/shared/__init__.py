# src/cryptotrack/shared/__init__.py
"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation and argument parsing
- Rate limiting
- Logging configuration
"""

from cryptotrack.shared.validators import (
    parse_amount,
    parse_date,
    sanitize_user_input,
    validate_api_key,
    validate_bot_token,
)
from cryptotrack.shared.rate_limiter import RATE_LIMITS, RateLimitConfig, RateLimiter, rate_limiter

__all__ = [
    "validate_bot_token",
    "validate_api_key",
    "parse_amount",
    "parse_date",
    "sanitize_user_input",
    "RateLimiter",
    "RateLimitConfig",
    "rate_limiter",
    "RATE_LIMITS",
]
