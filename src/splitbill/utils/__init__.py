"""Utility functions for splitbill."""

from splitbill.utils.date_parser import parse_date
from splitbill.utils.amount_parser import parse_amount, parse_amount_lenient
from splitbill.utils.currency import balance_tolerance, format_amount, quantize_amount

__all__ = [
    "parse_date",
    "parse_amount",
    "parse_amount_lenient",
    "balance_tolerance",
    "format_amount",
    "quantize_amount",
]
