"""Tests for CashFlowService."""

import asyncio
from decimal import Decimal

import pytest

from bookkeep.database.memory import InMemoryRecordStore
from bookkeep.domain.cash_flow import CashFlowService
from bookkeep.domain.entities import LineItem
from bookkeep.domain.snapshot import CASH_FLOW_KEY


def test_first_month_starts_from_opening_cash(cash_flow_service):
    entry = asyncio.run(
        cash_flow_service.record_month(
            2024, 3, Decimal("500"), Decimal("200"), opening_cash=Decimal("1000")
        )
    )

    assert entry.month_key == "2024-03"
    assert entry.beginning_cash == Decimal("1000")
    assert entry.ending_cash == Decimal("1300")


def test_first_month_without_opening_cash_starts_at_zero(cash_flow_service):
    entry = asyncio.run(cash_flow_service.record_month(2024, 3, Decimal("10"), Decimal("4")))
    assert entry.beginning_cash == Decimal("0")
    assert entry.ending_cash == Decimal("6")


def test_beginning_cash_chains_from_previous_month(cash_flow_service):
    march = asyncio.run(
        cash_flow_service.record_month(
            2024,
            3,
            Decimal("500"),
            Decimal("200"),
            investing=[LineItem("Oven", Decimal("100"))],
            financing=[LineItem("Loan", Decimal("50"))],
            opening_cash=Decimal("1000"),
        )
    )
    april = asyncio.run(cash_flow_service.record_month(2024, 4, Decimal("0"), Decimal("0")))

    assert march.ending_cash == Decimal("1250")
    assert april.beginning_cash == march.ending_cash


def test_beginning_cash_chains_across_year_boundary(cash_flow_service):
    december = asyncio.run(
        cash_flow_service.record_month(2023, 12, Decimal("300"), Decimal("100"))
    )
    january = asyncio.run(cash_flow_service.record_month(2024, 1, Decimal("0"), Decimal("50")))

    assert january.beginning_cash == december.ending_cash == Decimal("200")
    assert january.ending_cash == Decimal("150")


def test_gap_month_falls_back_to_opening_cash(cash_flow_service):
    asyncio.run(cash_flow_service.record_month(2024, 1, Decimal("300"), Decimal("0")))
    march = asyncio.run(
        cash_flow_service.record_month(
            2024, 3, Decimal("0"), Decimal("0"), opening_cash=Decimal("42")
        )
    )
    assert march.beginning_cash == Decimal("42")


def test_recording_a_month_again_replaces_it(cash_flow_service, memory_store):
    asyncio.run(cash_flow_service.record_month(2024, 3, Decimal("100"), Decimal("0")))
    asyncio.run(cash_flow_service.record_month(2024, 3, Decimal("250"), Decimal("0")))

    history = asyncio.run(cash_flow_service.history())
    assert len(history) == 1
    assert history[0].operating_inflow == Decimal("250")

    stored = asyncio.run(memory_store.get(CASH_FLOW_KEY))
    assert stored[0]["month"] == "2024-03"
    assert stored[0]["endingCash"] == "250"


def test_history_is_ordered_by_month(cash_flow_service):
    asyncio.run(cash_flow_service.record_month(2024, 5, Decimal("1"), Decimal("0")))
    asyncio.run(cash_flow_service.record_month(2023, 11, Decimal("1"), Decimal("0")))
    asyncio.run(cash_flow_service.record_month(2024, 1, Decimal("1"), Decimal("0")))

    keys = [entry.month_key for entry in asyncio.run(cash_flow_service.history())]
    assert keys == ["2023-11", "2024-01", "2024-05"]


def test_get_month(cash_flow_service):
    asyncio.run(cash_flow_service.record_month(2024, 2, Decimal("7"), Decimal("2")))

    assert asyncio.run(cash_flow_service.get_month(2024, 2)).ending_cash == Decimal("5")
    assert asyncio.run(cash_flow_service.get_month(2024, 3)) is None


def test_history_skips_entries_without_month():
    store = InMemoryRecordStore(
        {
            CASH_FLOW_KEY: [
                {"beginningCash": "10"},
                {"month": "2024-01", "beginningCash": "5", "operating": {"inflow": "3"}},
            ]
        }
    )
    history = asyncio.run(CashFlowService(store).history())
    assert [entry.month_key for entry in history] == ["2024-01"]
    assert history[0].ending_cash == Decimal("8")


def test_record_month_key(cash_flow_service):
    entry = asyncio.run(
        cash_flow_service.record_month_key(
            "2024-07", operating_inflow=Decimal("9"), operating_outflow=Decimal("4")
        )
    )
    assert entry.month_key == "2024-07"
    assert entry.net_operating == Decimal("5")


def test_record_month_key_rejects_bad_key(cash_flow_service):
    with pytest.raises(ValueError):
        asyncio.run(
            cash_flow_service.record_month_key(
                "2024-13", operating_inflow=Decimal("0"), operating_outflow=Decimal("0")
            )
        )


def test_record_month_from_ledger(sample_store):
    service = CashFlowService(sample_store)
    entry = asyncio.run(service.record_month_from_ledger(2024, 3, opening_cash=Decimal("100")))

    assert entry.operating_inflow == Decimal("150")
    assert entry.operating_outflow == Decimal("100")
    assert entry.total_investing == Decimal("200")
    assert entry.total_financing == Decimal("500")
    assert entry.ending_cash == Decimal("450")


def test_stored_ending_cash_carries_forward():
    store = InMemoryRecordStore({CASH_FLOW_KEY: [{"month": "2025-01", "endingCash": 500}]})
    service = CashFlowService(store)

    assert asyncio.run(service.beginning_cash(2025, 2)) == Decimal("500")

    february = asyncio.run(service.record_month(2025, 2, Decimal("20"), Decimal("0")))
    assert february.beginning_cash == Decimal("500")
    assert february.ending_cash == Decimal("520")


def test_rerecording_a_month_rechains_following_months(cash_flow_service, memory_store):
    asyncio.run(cash_flow_service.record_month(2024, 1, Decimal("100"), Decimal("0")))
    asyncio.run(cash_flow_service.record_month(2024, 2, Decimal("0"), Decimal("20")))
    asyncio.run(cash_flow_service.record_month(2024, 3, Decimal("5"), Decimal("0")))

    asyncio.run(cash_flow_service.record_month(2024, 1, Decimal("300"), Decimal("0")))

    history = {e.month_key: e for e in asyncio.run(cash_flow_service.history())}
    assert history["2024-01"].ending_cash == Decimal("300")
    assert history["2024-02"].beginning_cash == Decimal("300")
    assert history["2024-02"].ending_cash == Decimal("280")
    assert history["2024-03"].beginning_cash == Decimal("280")
    assert history["2024-03"].ending_cash == Decimal("285")

    stored = asyncio.run(memory_store.get(CASH_FLOW_KEY))
    assert [e["endingCash"] for e in stored] == ["300", "280", "285"]


def test_rechaining_stops_at_a_gap(cash_flow_service):
    asyncio.run(cash_flow_service.record_month(2024, 1, Decimal("100"), Decimal("0")))
    asyncio.run(
        cash_flow_service.record_month(
            2024, 3, Decimal("0"), Decimal("0"), opening_cash=Decimal("42")
        )
    )

    asyncio.run(cash_flow_service.record_month(2024, 1, Decimal("300"), Decimal("0")))

    march = asyncio.run(cash_flow_service.get_month(2024, 3))
    assert march.beginning_cash == Decimal("42")


def test_history_reads_month_keyed_mapping():
    store = InMemoryRecordStore(
        {
            CASH_FLOW_KEY: {
                "2025-01": {
                    "beginningCash": 100,
                    "operating": {"inflow": "50", "outflow": "0"},
                    "investing": [],
                    "financing": [],
                    "endingCash": 150,
                },
                "2024-12": {"beginningCash": 0, "endingCash": 100},
            }
        }
    )
    service = CashFlowService(store)

    history = asyncio.run(service.history())
    assert [e.month_key for e in history] == ["2024-12", "2025-01"]
    assert asyncio.run(service.beginning_cash(2025, 2)) == Decimal("150")

    asyncio.run(service.record_month(2025, 2, Decimal("0"), Decimal("0")))
    stored = asyncio.run(store.get(CASH_FLOW_KEY))
    assert [e["month"] for e in stored] == ["2024-12", "2025-01", "2025-02"]
