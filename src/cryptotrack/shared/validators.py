# src/cryptotrack/shared/validators.py
"""
Input Validation Utilities - Configuration and User Input

This module provides validation functions for the tracker. It validates the
bot token and API key used by configuration, and parses the amounts and
dates that users type into chat commands.

Files that USE this module:
- cryptotrack.config.settings (uses validation functions in Settings field validators)
- cryptotrack.adapters.telegram.handlers (parses command arguments)

Files that this module USES:
- cryptotrack.domain.errors (InvalidAmountError)
"""
import math
import re
from datetime import date
from typing import Optional

from cryptotrack.domain.errors import InvalidAmountError


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.

    Args:
        token: Bot token to validate

    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False

    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{8,10}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not api_key.isspace()


def parse_amount(value: Optional[str]) -> float:
    """
    Parse a positive amount typed by a user.

    Accepts thousands separators ("1,250.5").

    Args:
        value: Raw text from the user

    Returns:
        Parsed amount as float

    Raises:
        InvalidAmountError: If the text is empty, not a number, not finite, or not > 0
    """
    if not value:
        raise InvalidAmountError("Amount is required")

    try:
        amount = float(value.replace(",", "").strip())
    except ValueError:
        raise InvalidAmountError(f"Not a number: {value!r}") from None

    if not math.isfinite(amount) or amount <= 0:
        raise InvalidAmountError(f"Amount must be greater than zero: {value!r}")
    return amount


def parse_date(value: Optional[str]) -> Optional[str]:
    """
    Validate an ISO calendar date (YYYY-MM-DD).

    Returns:
        The normalised ISO string, or None when value is empty

    Raises:
        ValueError: If the text is not a valid ISO date
    """
    if not value:
        return None
    return date.fromisoformat(value.strip()).isoformat()


def sanitize_user_input(text: str, max_length: int = 1000) -> str:
    """
    Sanitize user input text.

    Args:
        text: Input text to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    # Remove potentially dangerous characters
    sanitized = re.sub(r'[<>"\']', '', text)

    # Limit length
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized.strip()
