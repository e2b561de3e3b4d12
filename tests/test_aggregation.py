"""Tests for aggregation helpers."""

from datetime import date
from decimal import Decimal

from bookkeep.domain.aggregation import (
    filter_by_categories,
    filter_by_category,
    filter_by_date_range,
    select_period,
    sum_amounts,
    sum_net_pay,
)
from bookkeep.domain.entities import LedgerRecord, Payslip


def _record(record_id, day, amount, category=""):
    return LedgerRecord(
        id=record_id,
        date=date(2024, 3, day) if day else None,
        amount=Decimal(amount),
        category=category,
    )


def test_sum_amounts_empty_is_zero():
    assert sum_amounts([]) == Decimal("0")


def test_sum_amounts_adds_every_record():
    records = [_record(1, 1, "10.50"), _record(2, 2, "-0.50"), _record(3, 3, "5")]
    assert sum_amounts(records) == Decimal("15.00")


def test_sum_amounts_is_additive_over_concatenation():
    first = [_record(1, 1, "1.10"), _record(2, 2, "2.20")]
    second = [_record(3, 3, "3.30")]
    assert sum_amounts(first + second) == sum_amounts(first) + sum_amounts(second)


def test_sum_amounts_treats_missing_amount_as_zero():
    class Bare:
        pass

    assert sum_amounts([Bare(), _record(1, 1, "4")]) == Decimal("4")


def test_sum_net_pay():
    payslips = [
        Payslip(id=1, date=None, name="A", position="B", basic_salary=Decimal("10"),
                total_benefits=Decimal("0"), total_deductions=Decimal("0"), net_pay=Decimal("10")),
        Payslip(id=2, date=None, name="C", position="D", basic_salary=Decimal("20"),
                total_benefits=Decimal("5"), total_deductions=Decimal("3"), net_pay=Decimal("22")),
    ]
    assert sum_net_pay(payslips) == Decimal("32")


def test_filter_by_date_range_is_inclusive():
    records = [_record(1, 1, "1"), _record(2, 15, "1"), _record(3, 31, "1")]
    result = filter_by_date_range(records, date(2024, 3, 1), date(2024, 3, 15))
    assert [r.id for r in result] == [1, 2]


def test_filter_by_date_range_unset_bound_yields_nothing():
    records = [_record(1, 1, "1")]
    assert filter_by_date_range(records, None, date(2024, 3, 31)) == []
    assert filter_by_date_range(records, date(2024, 3, 1), None) == []


def test_filter_by_date_range_skips_undated_records():
    records = [_record(1, None, "1"), _record(2, 5, "1")]
    result = filter_by_date_range(records, date(2024, 1, 1), date(2024, 12, 31))
    assert [r.id for r in result] == [2]


def test_filter_by_date_range_result_is_subset():
    records = [_record(i, i, "1") for i in range(1, 29)]
    result = filter_by_date_range(records, date(2024, 3, 10), date(2024, 3, 20))
    assert all(r in records for r in result)
    assert all(date(2024, 3, 10) <= r.date <= date(2024, 3, 20) for r in result)


def test_select_period_without_bounds_selects_everything():
    records = [_record(1, None, "1"), _record(2, 5, "1")]
    assert select_period(records) == records


def test_select_period_open_ended():
    records = [_record(1, 1, "1"), _record(2, 10, "1"), _record(3, 20, "1")]
    assert [r.id for r in select_period(records, start=date(2024, 3, 10))] == [2, 3]
    assert [r.id for r in select_period(records, end=date(2024, 3, 10))] == [1, 2]


def test_filter_by_category_exact_match():
    records = [
        _record(1, 1, "1", "Rent"),
        _record(2, 1, "1", "rent"),
        _record(3, 1, "1", "Utilities"),
    ]
    assert [r.id for r in filter_by_category(records, "Rent")] == [1]


def test_filter_by_categories():
    records = [
        _record(1, 1, "1", "Rent"),
        _record(2, 1, "1", "Utilities"),
        _record(3, 1, "1", "Other"),
    ]
    result = filter_by_categories(records, ["Rent", "Other"])
    assert [r.id for r in result] == [1, 3]
