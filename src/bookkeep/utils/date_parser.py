"""Date parsing and calendar-month utilities."""

from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PERIODS = ("this-month", "this-year", "this-week", "last-month", "last-year", "last-week")


def parse_date(date_str: str) -> date:
    """Parse a user-supplied date string into a date object.

    Supports ISO dates, free-form dates understood by dateutil, and a few
    relative forms: "today", "yesterday", "this month", "last month",
    "this year", "last year".

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "this year": today.replace(month=1, day=1),
        "last year": today.replace(month=1, day=1) - relativedelta(years=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_record_date(value: Any) -> Optional[date]:
    """Parse a stored record date, returning None when it is missing or malformed.

    Stored dates are ISO 8601 strings ("2025-01-05"), optionally with a time
    part. Only ISO input is accepted so that a malformed value never lands in
    the wrong period.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a named period.

    Args:
        period: One of this-month, this-year, this-week, last-month,
            last-year, last-week

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "this-week":
        return (today - timedelta(days=today.weekday()), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")


def shift_month(year: int, month: int, months: int) -> tuple[int, int]:
    """Add (or subtract, when negative) whole months, rolling the year over.

    Raises:
        ValueError: If month is not in 1..12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    shifted = date(year, month, 1) + relativedelta(months=months)
    return shifted.year, shifted.month


def month_key(year: int, month: int) -> str:
    """Return the "YYYY-MM" key used to store a month's cash-flow entry."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}")
    return f"{year:04d}-{month:02d}"


def parse_month_key(key: str) -> tuple[int, int]:
    """Split a "YYYY-MM" key into (year, month).

    Raises:
        ValueError: If key is not a valid month key
    """
    try:
        year_str, month_str = key.strip().split("-")
        year, month = int(year_str), int(month_str)
    except (ValueError, AttributeError):
        raise ValueError(f"Invalid month key '{key}', expected YYYY-MM")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month key '{key}', expected YYYY-MM")
    return year, month


def previous_month_key(year: int, month: int) -> str:
    """Return the month key of the calendar month before (year, month)."""
    return month_key(*shift_month(year, month, -1))


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end