"""Aggregation helpers over normalized records."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence, TypeVar

from bookkeep.domain.entities import ZERO, Payslip

T = TypeVar("T")


def sum_amounts(records: Iterable) -> Decimal:
    """Sum the ``amount`` of each record, counting a missing amount as zero."""
    total = ZERO
    for record in records:
        amount = getattr(record, "amount", None)
        if amount is not None:
            total += amount
    return total


def sum_net_pay(payslips: Iterable[Payslip]) -> Decimal:
    """Sum payslip net pay."""
    return sum((p.net_pay for p in payslips), ZERO)


def filter_by_date_range(
    records: Sequence[T], start: Optional[date], end: Optional[date]
) -> list[T]:
    """Return records dated between start and end, both inclusive.

    An unset bound yields no records. Records without a usable date never
    match.
    """
    if start is None or end is None:
        return []
    return [
        record
        for record in records
        if getattr(record, "date", None) is not None and start <= record.date <= end
    ]


def select_period(
    records: Sequence[T], start: Optional[date] = None, end: Optional[date] = None
) -> list[T]:
    """Select records for a reporting period.

    With no bounds every record is selected; with one bound the range is
    open on the other side.
    """
    if start is None and end is None:
        return list(records)
    return filter_by_date_range(records, start or date.min, end or date.max)


def filter_by_category(records: Sequence[T], value: str, field: str = "category") -> list[T]:
    """Return records whose category-like field exactly matches value."""
    return [record for record in records if getattr(record, field, None) == value]


def filter_by_categories(
    records: Sequence[T], values: Iterable[str], field: str = "category"
) -> list[T]:
    """Return records whose category-like field is one of values."""
    wanted = set(values)
    return [record for record in records if getattr(record, field, None) in wanted]
