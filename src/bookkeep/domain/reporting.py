"""Statement reporting domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from bookkeep.database.base import RecordStore
from bookkeep.domain.consistency import run_checks
from bookkeep.domain.entities import ZERO, Alert, BalanceSheet, IncomeStatement, OtherIncome
from bookkeep.domain.snapshot import load_snapshot
from bookkeep.domain.statements import (
    BalanceStrategy,
    build_balance_sheet,
    heuristic_balances,
    income_statement_for_period,
    ledger_totals,
)


class ReportService:
    """Service for building statements and consistency alerts.

    Every call loads a fresh snapshot from the store; statements are never
    cached or updated incrementally.
    """

    def __init__(self, store: RecordStore, balance_strategy: BalanceStrategy = heuristic_balances):
        """Initialize report service.

        Args:
            store: Record store instance
            balance_strategy: Derives balance-sheet line items from ledger totals
        """
        self.store = store
        self.balance_strategy = balance_strategy

    async def income_statement(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        tax: Decimal = ZERO,
        other_income: Optional[OtherIncome] = None,
    ) -> IncomeStatement:
        """Build the income statement for a period.

        Args:
            start_date: Optional start date, inclusive
            end_date: Optional end date, inclusive
            tax: Manually entered tax for the period
            other_income: Interest and asset gains/losses, zero if omitted

        Returns:
            IncomeStatement for the period
        """
        snapshot = await load_snapshot(self.store)
        return income_statement_for_period(snapshot, start_date, end_date, tax, other_income)

    async def balance_sheet(self, as_of: Optional[date] = None) -> BalanceSheet:
        """Build the balance sheet from records dated on or before as_of."""
        snapshot = await load_snapshot(self.store)
        return build_balance_sheet(
            ledger_totals(snapshot, as_of), strategy=self.balance_strategy, as_of=as_of
        )

    async def alerts(self, today: Optional[date] = None) -> list[Alert]:
        """Run every consistency check against the stored ledger."""
        return run_checks(await load_snapshot(self.store), today, strategy=self.balance_strategy)
