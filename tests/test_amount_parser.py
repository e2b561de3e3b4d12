"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from bookkeep.utils.amount_parser import coerce_amount, parse_amount


@pytest.mark.parametrize(
    "text, expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        ("  €10  ", Decimal("10")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity"])
def test_parse_amount_rejects_invalid(text):
    with pytest.raises(ValueError):
        parse_amount(text)


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, Decimal("0")),
        (True, Decimal("0")),
        (12, Decimal("12")),
        (0.1, Decimal("0.1")),
        (float("nan"), Decimal("0")),
        ("1,500", Decimal("1500")),
        ("oops", Decimal("0")),
        (Decimal("7.25"), Decimal("7.25")),
        ([1, 2], Decimal("0")),
    ],
)
def test_coerce_amount(value, expected):
    assert coerce_amount(value) == expected
