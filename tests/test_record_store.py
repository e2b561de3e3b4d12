"""Tests for the record store implementations and mappers."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from bookkeep.database.factories import create_sqlite_store
from bookkeep.database.mappers import collection_to_records, to_json_value
from bookkeep.database.memory import InMemoryRecordStore
from bookkeep.database.models import RecordCollection
from bookkeep.domain.entities import CashFlowType
from bookkeep.domain.errors import StoreUnavailableError
from bookkeep.domain.snapshot import (
    CASH_FLOW_KEY,
    load_snapshot,
    read_cash_flow,
    read_collection,
    read_payroll,
)


def test_sqlite_store_unknown_key_is_empty(temp_store):
    assert asyncio.run(temp_store.get("sales")) == []


def test_sqlite_store_set_then_get(temp_store):
    records = [{"id": 1, "date": "2024-03-05", "amount": "10"}, {"id": 2, "amount": 5}]
    asyncio.run(temp_store.set("sales", records))

    assert asyncio.run(temp_store.get("sales")) == records


def test_sqlite_store_set_replaces_collection(temp_store):
    asyncio.run(temp_store.set("costs", [{"id": 1}]))
    asyncio.run(temp_store.set("costs", [{"id": 2}, {"id": 3}]))

    assert asyncio.run(temp_store.get("costs")) == [{"id": 2}, {"id": 3}]


def test_sqlite_store_persists_across_instances(temp_store):
    asyncio.run(temp_store.set("capital", [{"id": 1, "amount": "500"}]))
    temp_store.close()

    reopened = create_sqlite_store(database_path=temp_store.database_path)
    try:
        assert asyncio.run(reopened.get("capital")) == [{"id": 1, "amount": "500"}]
    finally:
        reopened.close()


def test_sqlite_store_serializes_decimals_and_dates(temp_store):
    asyncio.run(temp_store.set("sales", [{"amount": Decimal("1.50"), "date": date(2024, 3, 5)}]))
    assert asyncio.run(temp_store.get("sales")) == [{"amount": "1.50", "date": "2024-03-05"}]


def test_create_sqlite_store_uses_environment(monkeypatch, tmp_path):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("BOOKKEEP_DB_PATH", str(db_path))

    store = create_sqlite_store()
    try:
        assert store.database_url == f"sqlite:///{db_path}"
    finally:
        store.close()


def test_sqlite_store_wraps_database_errors(temp_store, monkeypatch):
    session = temp_store._get_session()

    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "query", broken_query)

    with pytest.raises(StoreUnavailableError, match="read 'sales'"):
        asyncio.run(temp_store.get("sales"))
    with pytest.raises(StoreUnavailableError, match="write 'sales'"):
        asyncio.run(temp_store.set("sales", []))


class FailingStore(InMemoryRecordStore):
    """Store whose reads always fail."""

    async def get(self, key):
        raise StoreUnavailableError("offline")


def test_reads_fail_open():
    store = FailingStore()
    assert asyncio.run(read_collection(store, "sales")) == []

    snapshot = asyncio.run(load_snapshot(store))
    assert snapshot.sales == ()
    assert snapshot.cash_flow == ()


def test_read_collection_drops_non_mappings():
    store = InMemoryRecordStore({"sales": [{"id": 1}, "junk", 3]})
    assert asyncio.run(read_collection(store, "sales")) == [{"id": 1}]


def test_read_payroll_falls_back_to_legacy_keys():
    store = InMemoryRecordStore({"salaries": [{"id": 1, "amount": "700"}]})
    assert asyncio.run(read_payroll(store)) == [{"id": 1, "amount": "700"}]

    store = InMemoryRecordStore(
        {"payroll": [{"id": 2}], "payslips": [{"id": 3}], "salaries": [{"id": 4}]}
    )
    assert asyncio.run(read_payroll(store)) == [{"id": 2}]


def test_memory_store_copies_records():
    original = [{"id": 1, "tags": ["a"]}]
    store = InMemoryRecordStore({"sales": original})
    original[0]["tags"].append("b")

    fetched = asyncio.run(store.get("sales"))
    fetched[0]["id"] = 99

    assert asyncio.run(store.get("sales")) == [{"id": 1, "tags": ["a"]}]


def test_to_json_value():
    assert to_json_value(
        {"amount": Decimal("2.5"), "when": date(2024, 1, 2), "kind": CashFlowType.INVESTING,
         "items": (Decimal("1"),)}
    ) == {"amount": "2.5", "when": "2024-01-02", "kind": "investing", "items": ["1"]}


def test_collection_to_records():
    assert collection_to_records(None) == []
    row = RecordCollection(key="sales", records=[{"id": 1}, "junk"])
    assert collection_to_records(row) == [{"id": 1}]


def test_collection_to_records_keeps_mapping_shape():
    row = RecordCollection(key=CASH_FLOW_KEY, records={"2024-01": {"endingCash": 5}, "bad": 3})
    assert collection_to_records(row) == {"2024-01": {"endingCash": 5}}


def test_sqlite_store_reads_month_keyed_cash_flow(temp_store):
    session = temp_store._get_session()
    session.add(RecordCollection(key=CASH_FLOW_KEY, records={"2024-1": {"endingCash": 5}}))
    session.commit()

    assert asyncio.run(read_cash_flow(temp_store)) == [{"endingCash": 5, "month": "2024-1"}]
    snapshot = asyncio.run(load_snapshot(temp_store))
    assert [e.month_key for e in snapshot.cash_flow] == ["2024-01"]
    assert snapshot.cash_flow[0].ending_cash == Decimal("5")


def test_read_collection_flattens_mapping_values():
    store = InMemoryRecordStore({"sales": {"a": {"id": 1}, "b": "junk"}})
    assert asyncio.run(read_collection(store, "sales")) == [{"id": 1}]
