"""Currency precision helpers based on ISO 4217 minor units."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

DEFAULT_MINOR_UNITS = 2

# Currencies whose minor unit exponent differs from 2
ZERO_DECIMAL_CURRENCIES = frozenset(
    {
        "BIF", "CLP", "DJF", "GNF", "ISK", "JPY", "KMF", "KRW", "PYG",
        "RWF", "UGX", "UYI", "VND", "VUV", "XAF", "XOF", "XPF",
    }
)
THREE_DECIMAL_CURRENCIES = frozenset({"BHD", "IQD", "JOD", "KWD", "LYD", "OMR", "TND"})

SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥", "IDR": "Rp"}


def minor_units(currency: Optional[str]) -> int:
    """Return the number of decimal places used by a currency."""
    if not currency:
        return DEFAULT_MINOR_UNITS
    code = currency.strip().upper()
    if code in ZERO_DECIMAL_CURRENCIES:
        return 0
    if code in THREE_DECIMAL_CURRENCIES:
        return 3
    return DEFAULT_MINOR_UNITS


def smallest_unit(currency: Optional[str]) -> Decimal:
    """Return the smallest representable amount, e.g. 0.01 for USD and 1 for JPY."""
    return Decimal(1).scaleb(-minor_units(currency))


def balance_tolerance(currency: Optional[str] = None) -> Decimal:
    """Return the tolerance used to decide whether amounts balance."""
    return smallest_unit(currency)


def quantize_amount(amount: Decimal, currency: Optional[str] = None) -> Decimal:
    """Round an amount to the currency's minor units (half up)."""
    return amount.quantize(smallest_unit(currency), rounding=ROUND_HALF_UP)


def format_amount(amount: Decimal, currency: Optional[str] = None) -> str:
    """Format an amount for display, e.g. ``$1,234.50`` or ``KWD 1.250``."""
    places = minor_units(currency)
    number = f"{quantize_amount(amount, currency):,.{places}f}"
    code = (currency or "").strip().upper()
    symbol = SYMBOLS.get(code)
    if symbol is not None:
        if number.startswith("-"):
            return f"-{symbol}{number[1:]}"
        return f"{symbol}{number}"
    if code:
        return f"{code} {number}"
    return number
