"""Utility functions for bookkeep."""

from bookkeep.utils.date_parser import parse_date, parse_record_date, shift_month, month_key
from bookkeep.utils.amount_parser import parse_amount, coerce_amount

__all__ = [
    "parse_date",
    "parse_record_date",
    "shift_month",
    "month_key",
    "parse_amount",
    "coerce_amount",
]
