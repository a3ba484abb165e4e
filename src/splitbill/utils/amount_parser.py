"""Amount parsing utilities."""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

logger = logging.getLogger(__name__)

# Largest magnitude a Numeric(14, 3) column holds
MAX_AMOUNT = Decimal("99999999999.999")


@dataclass(frozen=True)
class AmountParseResult:
    """Outcome of lenient amount parsing.

    ``value`` is always usable in arithmetic; ``is_valid`` distinguishes an
    entered zero from empty or unparsable input.
    """

    value: Decimal
    is_valid: bool
    text: str = ""


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and thousands separators
    amount_str = re.sub(r"[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    # Decimal accepts these, but they are never a usable amount
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount '{amount_str}' exceeds the largest supported amount {MAX_AMOUNT}")

    return -amount if is_negative else amount


def parse_amount_lenient(amount_str: Optional[str]) -> AmountParseResult:
    """Parse an amount without raising.

    Missing or unparsable text yields a zero value flagged as invalid.
    """
    text = amount_str or ""
    try:
        return AmountParseResult(value=parse_amount(text), is_valid=True, text=text)
    except ValueError:
        logger.debug("Treating unparsable amount %r as 0", text)
        return AmountParseResult(value=Decimal("0"), is_valid=False, text=text)


def is_supported_amount(amount: Decimal) -> bool:
    """Return True for finite amounts no larger than MAX_AMOUNT in magnitude."""
    return amount.is_finite() and abs(amount) <= MAX_AMOUNT
