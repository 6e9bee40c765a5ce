"""
Currency display formatting.

The statement builders never format numbers themselves. They
accept a `format_currency(amount) -> str` callable, and
`currency_formatter(code)` builds one from this table.
"""

from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from functools import partial

from ledger_core.engine.numeric import require_finite


@dataclass(frozen=True)
class CurrencyConfig:
    code: str
    symbol: str
    name: str
    decimals: int = 2
    symbol_position: str = "before"


CURRENCIES: dict[str, CurrencyConfig] = {
    "USD": CurrencyConfig("USD", "$", "US Dollar"),
    "GHS": CurrencyConfig("GHS", "GH₵", "Ghana Cedi"),
    "GBP": CurrencyConfig("GBP", "£", "British Pound"),
    "EUR": CurrencyConfig("EUR", "€", "Euro"),
    "NGN": CurrencyConfig("NGN", "₦", "Nigerian Naira"),
    "KES": CurrencyConfig("KES", "KSh", "Kenyan Shilling"),
    "ZAR": CurrencyConfig("ZAR", "R", "South African Rand"),
    "XOF": CurrencyConfig("XOF", "CFA", "West African CFA Franc", 0, "after"),
    "XAF": CurrencyConfig("XAF", "FCFA", "Central African CFA Franc", 0, "after"),
    "TZS": CurrencyConfig("TZS", "TSh", "Tanzanian Shilling"),
    "UGX": CurrencyConfig("UGX", "USh", "Ugandan Shilling", 0),
    "RWF": CurrencyConfig("RWF", "FRw", "Rwandan Franc", 0),
}

DEFAULT_CURRENCY = CURRENCIES["USD"]


def get_currency_config(code: str | None) -> CurrencyConfig:
    """Look up a currency by code; unknown or empty codes fall back to USD."""
    if not code:
        return DEFAULT_CURRENCY
    return CURRENCIES.get(code.strip().upper(), DEFAULT_CURRENCY)


def format_amount(amount, decimals: int = 2) -> str:
    """Thousands-separated amount, rounded half-up, no symbol."""
    value = require_finite(amount, "Amount", None)
    quantum = Decimal(1).scaleb(-decimals)
    return f"{value.quantize(quantum, rounding=ROUND_HALF_UP):,.{decimals}f}"


def format_currency(amount, config: CurrencyConfig = DEFAULT_CURRENCY) -> str:
    """
    Render an amount for display, e.g. "$1,234.56" or "1,235 CFA".

    None renders as zero. The minus sign goes in front of the
    symbol: "-$12.50".
    """
    text = format_amount(amount, config.decimals)
    sign = ""
    if text.startswith("-"):
        sign, text = "-", text[1:]
        if not text.strip("0.,"):
            sign = ""
    if config.symbol_position == "after":
        return f"{sign}{text} {config.symbol}"
    return f"{sign}{config.symbol}{text}"


def currency_formatter(code: str | None) -> Callable[[Decimal], str]:
    """The injectable formatter for one currency code."""
    return partial(format_currency, config=get_currency_config(code))
