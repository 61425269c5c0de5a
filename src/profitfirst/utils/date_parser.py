"""Date parsing utilities."""

import re
from datetime import datetime, UTC
from typing import Optional

from dateutil import parser as date_parser

MONTHS = {
    "Jan": 1,
    "Feb": 2,
    "Mar": 3,
    "Apr": 4,
    "May": 5,
    "Jun": 6,
    "Jul": 7,
    "Aug": 8,
    "Sep": 9,
    "Oct": 10,
    "Nov": 11,
    "Dec": 12,
}

# Last (month, day) of each quarter.
QUARTER_ENDS = {
    1: (3, 31),
    2: (6, 30),
    3: (9, 30),
    4: (12, 31),
}

SHEET_DATE_PATTERN = re.compile(r"^\s*(\d{1,2})-([A-Za-z]{3})-(\d{4}|\d{2})\b")


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC.

    SQLite drops timezone information, so every datetime read back from the
    store goes through here.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Date-only strings ("2024-03-15") are midnight UTC.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Could not parse date {value!r}")
    try:
        return as_utc(date_parser.isoparse(value.strip()))
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{value}': {e}")


def format_iso(value: datetime) -> str:
    """Format a datetime the way the payload stores it.

    Example: 2024-03-15T00:00:00.000Z
    """
    value = as_utc(value)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_sheet_date(cell: str) -> Optional[datetime]:
    """Parse a spreadsheet date like "15-Mar-24" or "5-Jan-2025".

    Returns:
        Midnight UTC datetime, or None when the cell is not such a date, the
        month abbreviation is unknown, or the day does not exist.
    """
    match = SHEET_DATE_PATTERN.match(cell or "")
    if match is None:
        return None
    day, month_abbr, year = match.groups()
    month = MONTHS.get(month_abbr.title())
    if month is None:
        return None
    if len(year) == 2:
        year = f"20{year}"
    try:
        return datetime(int(year), month, int(day), tzinfo=UTC)
    except ValueError:
        return None


def quarter_end(quarter: int, year: int) -> datetime:
    """Return midnight UTC of the last day of a quarter.

    Raises:
        ValueError: If quarter is not 1-4
    """
    if quarter not in QUARTER_ENDS:
        raise ValueError(f"Unknown quarter: {quarter}")
    month, day = QUARTER_ENDS[quarter]
    return datetime(year, month, day, tzinfo=UTC)


def quarter_label(value: datetime) -> str:
    """Return the quarter label for a date, e.g. "Q1 2026"."""
    return f"Q{(value.month - 1) // 3 + 1} {value.year}"
