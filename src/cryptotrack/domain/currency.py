# src/cryptotrack/domain/currency.py
"""
Currency Table - Supported Display Currencies

Static USD conversion rates and locale formatting rules for the display
currencies. Rates are mock values, used for display only; all amounts are
stored in USD.

Files that USE this module:
- cryptotrack.application.app_state (currency selection and conversion)
- cryptotrack.adapters.formatting.formatter (locale-aware price rendering)
- cryptotrack.adapters.persistence.preference_store (validating persisted codes)
- cryptotrack.shared.validators (currency code validation)
"""

from __future__ import annotations

from dataclasses import dataclass

USD = "USD"
EUR = "EUR"
JPY = "JPY"
GBP = "GBP"
INR = "INR"

DEFAULT_CURRENCY = USD
SUPPORTED_CURRENCIES = (USD, EUR, JPY, GBP, INR)

# Units of the currency per 1 USD
CURRENCY_RATES: dict[str, float] = {
    USD: 1.0,
    EUR: 0.92,
    JPY: 150.5,
    GBP: 0.79,
    INR: 83.50,
}

CURRENCY_LOCALES: dict[str, str] = {
    USD: "en-US",
    EUR: "de-DE",
    JPY: "ja-JP",
    GBP: "en-GB",
    INR: "en-IN",
}


@dataclass(frozen=True)
class LocaleFormat:
    """
    How a locale renders a currency amount.

    Attributes:
        symbol: Currency symbol as the locale writes it
        symbol_first: True for "$1.00", False for "1,00 €"
        separator: Text between amount and a trailing symbol
        group: Thousands separator
        decimal: Decimal separator
        indian_grouping: Group as 12,34,567 (lakh/crore) instead of 1,234,567
    """
    symbol: str
    symbol_first: bool = True
    separator: str = ""
    group: str = ","
    decimal: str = "."
    indian_grouping: bool = False


LOCALE_FORMATS: dict[str, LocaleFormat] = {
    USD: LocaleFormat(symbol="$"),
    EUR: LocaleFormat(symbol="€", symbol_first=False, separator="\u00a0", group=".", decimal=","),
    JPY: LocaleFormat(symbol="￥"),
    GBP: LocaleFormat(symbol="£"),
    INR: LocaleFormat(symbol="₹", indian_grouping=True),
}


def is_supported(code: object) -> bool:
    return isinstance(code, str) and code in SUPPORTED_CURRENCIES


def convert_from_usd(amount_usd: float, currency: str) -> float:
    return amount_usd * CURRENCY_RATES[currency]


def convert_to_usd(amount: float, currency: str) -> float:
    return amount / CURRENCY_RATES[currency]
