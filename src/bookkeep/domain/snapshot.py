"""Loading a ledger snapshot from the record store."""

from decimal import Decimal
from typing import Any, Mapping

import structlog

from bookkeep.database.base import RecordStore
from bookkeep.domain.entities import LedgerSnapshot, RecordKind
from bookkeep.domain.errors import StoreUnavailableError
from bookkeep.domain.normalize import (
    normalize_cash_flow_entry,
    normalize_movement,
    normalize_payslip,
    normalize_records,
)
from bookkeep.utils.amount_parser import coerce_amount

logger = structlog.get_logger(__name__)

INVENTORY_KEY = "inventory"
CASH_FLOW_KEY = "cashFlow"
# Older versions stored payroll under these keys
LEGACY_PAYROLL_KEYS = ("payslips", "salaries")


async def _read_stored(store: RecordStore, key: str) -> Any:
    try:
        return await store.get(key)
    except StoreUnavailableError as e:
        logger.warning("store_read_failed", key=key, error=str(e))
        return []


async def read_collection(store: RecordStore, key: str) -> list[dict[str, Any]]:
    """Read a collection, falling back to an empty list if the store fails."""
    records = await _read_stored(store, key)
    if isinstance(records, Mapping):
        records = records.values()
    return [r for r in records or [] if isinstance(r, Mapping)]


async def read_cash_flow(store: RecordStore) -> list[dict[str, Any]]:
    """Read stored cash-flow entries.

    Older versions stored a mapping of "YEAR-MONTH" keys to entries; each key
    becomes the month of its entry.
    """
    stored = await _read_stored(store, CASH_FLOW_KEY)
    if isinstance(stored, Mapping):
        return [
            {**entry, "month": key} for key, entry in stored.items() if isinstance(entry, Mapping)
        ]
    return [r for r in stored or [] if isinstance(r, Mapping)]


async def read_payroll(store: RecordStore) -> list[dict[str, Any]]:
    """Read payroll records, falling back to the legacy keys when empty."""
    records = await read_collection(store, RecordKind.PAYROLL.value)
    for legacy_key in LEGACY_PAYROLL_KEYS:
        if records:
            break
        records = await read_collection(store, legacy_key)
    return records


def minimum_levels(stock_records: list[dict[str, Any]]) -> dict[tuple[str, str], Decimal]:
    """Index stored stock records' minimum levels by (name, type)."""
    return {
        (str(r.get("name", "")), str(r.get("type", ""))): coerce_amount(r.get("minimumLevel"))
        for r in stock_records
    }


async def load_snapshot(store: RecordStore) -> LedgerSnapshot:
    """Load and normalize every record category.

    This is the only asynchronous step of building a statement; all the
    computation that follows works on the returned snapshot.
    """
    sales = await read_collection(store, RecordKind.SALES.value)
    other_revenue = await read_collection(store, RecordKind.OTHER_REVENUE.value)
    costs = await read_collection(store, RecordKind.COSTS.value)
    payroll = await read_payroll(store)
    capital = await read_collection(store, RecordKind.CAPITAL.value)
    misc = await read_collection(store, RecordKind.MISCELLANEOUS.value)
    movements = await read_collection(store, RecordKind.INVENTORY_MOVEMENTS.value)
    stock = await read_collection(store, INVENTORY_KEY)
    cash_flow = await read_cash_flow(store)

    entries = (normalize_cash_flow_entry(raw) for raw in cash_flow)
    snapshot = LedgerSnapshot(
        sales=normalize_records(sales, RecordKind.SALES),
        other_revenue=normalize_records(other_revenue, RecordKind.OTHER_REVENUE),
        costs=normalize_records(costs, RecordKind.COSTS),
        payroll=tuple(normalize_payslip(raw) for raw in payroll),
        capital=normalize_records(capital, RecordKind.CAPITAL),
        miscellaneous=normalize_records(misc, RecordKind.MISCELLANEOUS),
        movements=tuple(normalize_movement(raw) for raw in movements),
        cash_flow=tuple(entry for entry in entries if entry is not None),
        minimum_levels=minimum_levels(stock),
    )
    logger.debug(
        "snapshot_loaded",
        sales=len(snapshot.sales),
        costs=len(snapshot.costs),
        payroll=len(snapshot.payroll),
    )
    return snapshot
