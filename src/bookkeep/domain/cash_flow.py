"""Cash-flow statement domain service."""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from bookkeep.database.base import RecordStore
from bookkeep.domain.entities import ZERO, CashFlowEntry, LineItem
from bookkeep.domain.normalize import cash_flow_entry_to_record, normalize_cash_flow_entry
from bookkeep.domain.snapshot import CASH_FLOW_KEY, load_snapshot, read_cash_flow
from bookkeep.domain.statements import (
    beginning_cash_for,
    compute_cash_flow_entry,
    derive_operating_flows,
)
from bookkeep.utils.date_parser import month_key, parse_month_key, previous_month_key

logger = structlog.get_logger(__name__)


def rechain(history: list[CashFlowEntry], from_key: str) -> list[CashFlowEntry]:
    """Carry ending cash forward through the consecutive months after from_key.

    The walk stops at the first gap in the calendar; months after a gap keep
    their stored beginning cash.
    """
    result = list(history)
    start = next((i for i, e in enumerate(result) if e.month_key == from_key), None)
    if start is None:
        return result
    for i in range(start + 1, len(result)):
        prev, entry = result[i - 1], result[i]
        if previous_month_key(*parse_month_key(entry.month_key)) != prev.month_key:
            break
        if entry.beginning_cash == prev.ending_cash:
            break
        result[i] = replace(entry, beginning_cash=prev.ending_cash, stored_ending_cash=None)
        logger.info(
            "cash_flow_rechained", month=entry.month_key, beginning_cash=str(prev.ending_cash)
        )
    return result


class CashFlowService:
    """Service for recording monthly cash-flow statements.

    Each month's entry is stored under its "YYYY-MM" key so that the next
    month can carry its ending cash forward as beginning cash.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def history(self) -> list[CashFlowEntry]:
        """All stored entries, ordered by month."""
        raws = await read_cash_flow(self.store)
        entries = [normalize_cash_flow_entry(raw) for raw in raws]
        return sorted((e for e in entries if e is not None), key=lambda e: e.month_key)

    async def get_month(self, year: int, month: int) -> Optional[CashFlowEntry]:
        """The stored entry for a month, or None."""
        key = month_key(year, month)
        for entry in await self.history():
            if entry.month_key == key:
                return entry
        return None

    async def beginning_cash(
        self, year: int, month: int, opening_cash: Decimal = ZERO
    ) -> Decimal:
        """Beginning cash for a month, chained from the previous month."""
        return beginning_cash_for(await self.history(), year, month, opening_cash)

    async def record_month(
        self,
        year: int,
        month: int,
        operating_inflow: Decimal,
        operating_outflow: Decimal,
        investing: Iterable[LineItem] = (),
        financing: Iterable[LineItem] = (),
        opening_cash: Decimal = ZERO,
    ) -> CashFlowEntry:
        """Compute a month's cash-flow entry and persist it under its month key.

        Args:
            year: Calendar year
            month: Calendar month, 1-12
            operating_inflow: Cash received from operations
            operating_outflow: Cash paid for operations
            investing: Cash spent on investments
            financing: Cash raised from financing
            opening_cash: Beginning cash to use when the previous month
                has no stored entry

        Later months that follow on without a gap are re-chained so their
        beginning cash matches the new ending cash.

        Returns:
            The stored entry
        """
        key = month_key(year, month)
        history = await self.history()
        entry = compute_cash_flow_entry(
            key,
            beginning_cash_for(history, year, month, opening_cash),
            operating_inflow,
            operating_outflow,
            investing,
            financing,
        )

        others = [e for e in history if e.month_key != key]
        stored = rechain(sorted(others + [entry], key=lambda e: e.month_key), key)
        await self.store.set(CASH_FLOW_KEY, [cash_flow_entry_to_record(e) for e in stored])
        logger.info("cash_flow_saved", month=key, ending_cash=str(entry.ending_cash))
        return entry

    async def record_month_from_ledger(
        self, year: int, month: int, opening_cash: Decimal = ZERO
    ) -> CashFlowEntry:
        """Record a month's entry with flows derived from its ledger records."""
        snapshot = await load_snapshot(self.store)
        inflow, outflow, investing, financing = derive_operating_flows(snapshot, year, month)
        return await self.record_month(
            year, month, inflow, outflow, investing, financing, opening_cash
        )

    async def record_month_key(self, key: str, **kwargs) -> CashFlowEntry:
        """Like record_month, addressed by a "YYYY-MM" key."""
        year, month = parse_month_key(key)
        return await self.record_month(year, month, **kwargs)
