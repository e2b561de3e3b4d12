"""Tests for date parsing and calendar-month helpers."""

from datetime import date, datetime, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from bookkeep.utils.date_parser import (
    get_date_range,
    month_bounds,
    month_key,
    parse_date,
    parse_month_key,
    parse_record_date,
    previous_month_key,
    shift_month,
)


def test_parse_iso_date():
    """An ISO date parses to itself."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_relative_dates():
    """Relative words resolve against today."""
    today = date.today()
    assert parse_date("today") == today
    assert parse_date(" Yesterday ") == today - timedelta(days=1)
    assert parse_date("this month") == today.replace(day=1)
    assert parse_date("last month") == (today - relativedelta(months=1)).replace(day=1)
    assert parse_date("this year") == date(today.year, 1, 1)
    assert parse_date("last year") == date(today.year - 1, 1, 1)


def test_parse_free_form_date():
    """dateutil handles written-out dates."""
    assert parse_date("March 5, 2024") == date(2024, 3, 5)


def test_parse_invalid_date():
    with pytest.raises(ValueError, match="Could not parse date"):
        parse_date("not a date at all")


def test_parse_record_date_iso_only():
    """Stored dates are ISO; anything else is treated as missing."""
    assert parse_record_date("2024-03-05") == date(2024, 3, 5)
    assert parse_record_date("2024-03-05T10:30:00Z") == date(2024, 3, 5)
    assert parse_record_date(datetime(2024, 3, 5, 8, 0)) == date(2024, 3, 5)
    assert parse_record_date(date(2024, 3, 5)) == date(2024, 3, 5)
    assert parse_record_date("03/05/2024") is None
    assert parse_record_date("") is None
    assert parse_record_date(None) is None
    assert parse_record_date(20240305) is None


def test_get_date_range_last_month():
    """last-month covers the whole previous calendar month."""
    today = date.today()
    start, end = get_date_range("last-month")
    assert start == (today - relativedelta(months=1)).replace(day=1)
    assert end == today.replace(day=1) - timedelta(days=1)
    assert (start.year, start.month) == (end.year, end.month)


def test_get_date_range_last_week_is_monday_to_sunday():
    start, end = get_date_range("last-week")
    assert start.weekday() == 0
    assert end.weekday() == 6
    assert (end - start).days == 6


def test_get_date_range_this_year():
    today = date.today()
    assert get_date_range("this-year") == (date(today.year, 1, 1), today)


def test_get_date_range_last_year():
    today = date.today()
    assert get_date_range("last-year") == (date(today.year - 1, 1, 1), date(today.year - 1, 12, 31))


def test_get_date_range_invalid_period():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-decade")


@pytest.mark.parametrize(
    "year, month, months, expected",
    [
        (2024, 3, 1, (2024, 4)),
        (2024, 12, 1, (2025, 1)),
        (2024, 1, -1, (2023, 12)),
        (2024, 6, -18, (2022, 12)),
        (2024, 6, 0, (2024, 6)),
        (2024, 11, 14, (2026, 1)),
    ],
)
def test_shift_month(year, month, months, expected):
    assert shift_month(year, month, months) == expected


def test_shift_month_round_trips():
    for months in range(-30, 31):
        assert shift_month(*shift_month(2024, 7, months), -months) == (2024, 7)


def test_shift_month_rejects_invalid_month():
    with pytest.raises(ValueError):
        shift_month(2024, 13, 1)
    with pytest.raises(ValueError):
        shift_month(2024, 0, 1)


def test_month_keys():
    assert month_key(2024, 3) == "2024-03"
    assert parse_month_key("2024-03") == (2024, 3)
    assert previous_month_key(2024, 1) == "2023-12"


@pytest.mark.parametrize("key", ["2024-13", "2024", "March", "2024-03-01", ""])
def test_parse_month_key_rejects_invalid(key):
    with pytest.raises(ValueError, match="Invalid month key"):
        parse_month_key(key)


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2023, 12) == (date(2023, 12, 1), date(2023, 12, 31))
