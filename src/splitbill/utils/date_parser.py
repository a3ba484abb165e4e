"""Parsing of bill dates typed on the command line."""

import re
from datetime import date, datetime, time, timedelta
from typing import Optional

from dateutil import parser as date_parser

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

_DAYS_AGO = re.compile(r"^(\d+)\s+days?\s+ago$")


def _relative_date(text: str, today: date) -> Optional[date]:
    offsets = {"today": 0, "yesterday": -1, "tomorrow": 1}
    if text in offsets:
        return today + timedelta(days=offsets[text])

    match = _DAYS_AGO.match(text)
    if match:
        return today - timedelta(days=int(match.group(1)))

    if text.startswith("last ") and text[5:] in WEEKDAYS:
        # Always strictly before today, so "last friday" on a Friday is a week back
        days_back = (today.weekday() - WEEKDAYS.index(text[5:])) % 7 or 7
        return today - timedelta(days=days_back)

    return None


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date typed by the user.

    Accepts ISO and free-form dates understood by dateutil ("2025-08-08",
    "Aug 8 2025") as well as "today", "yesterday", "tomorrow",
    "N days ago" and "last <weekday>".

    Args:
        date_str: Text to parse
        today: Reference date for relative forms; defaults to the current date

    Raises:
        ValueError: If the text is not a recognizable date
    """
    text = " ".join(date_str.strip().lower().split())
    relative = _relative_date(text, today or date.today())
    if relative is not None:
        return relative

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_bill_date(date_str: Optional[str]) -> Optional[datetime]:
    """Parse an optional bill date into a datetime at midnight.

    Returns None when no date was given so the bill defaults to now.
    """
    if date_str is None or not date_str.strip():
        return None
    return datetime.combine(parse_date(date_str), time.min)
