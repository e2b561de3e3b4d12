"""Transaction summary domain service."""

from dataclasses import replace
from decimal import Decimal

from bookkeep.database.base import RecordStore
from bookkeep.domain.aggregation import filter_by_category, sum_amounts, sum_net_pay
from bookkeep.domain.entities import (
    ZERO,
    Alert,
    AlertSeverity,
    CashFlowType,
    LedgerSnapshot,
    TransactionSummary,
)
from bookkeep.domain.snapshot import load_snapshot


def build_insights(summary: TransactionSummary) -> tuple[Alert, ...]:
    """Derive advisory insights from summary totals."""
    insights = []

    if summary.sales_unpaid > ZERO:
        insights.append(
            Alert(
                kind="unpaid_sales",
                severity=AlertSeverity.WARNING,
                message=f"${summary.sales_unpaid:,.2f} in unpaid sales (Accounts Receivable)",
                action="Review Sales tab",
            )
        )

    if summary.costs_non_production > summary.costs_cogs:
        insights.append(
            Alert(
                kind="high_inventory",
                severity=AlertSeverity.INFO,
                message=(
                    f"High inventory: ${summary.costs_non_production:,.2f} "
                    f"vs COGS: ${summary.costs_cogs:,.2f}"
                ),
                action="Consider using more materials",
            )
        )

    if summary.capital_liabilities > summary.capital_assets:
        insights.append(
            Alert(
                kind="negative_equity",
                severity=AlertSeverity.WARNING,
                message="Liabilities exceed assets - negative equity",
                action="Review Capital tab",
            )
        )

    net_profit = summary.net_profit
    if net_profit < ZERO:
        insights.append(
            Alert(
                kind="profit",
                severity=AlertSeverity.ERROR,
                message=f"Negative profit: ${net_profit:,.2f}",
                action="Review expenses or increase sales",
            )
        )
    else:
        insights.append(
            Alert(
                kind="profit",
                severity=AlertSeverity.SUCCESS,
                message=f"Profitable: ${net_profit:,.2f} net profit",
            )
        )

    return tuple(insights)


def _capital_total(snapshot: LedgerSnapshot, category: str) -> Decimal:
    return sum(
        (c.amount for c in snapshot.capital if c.category.lower() == category),
        ZERO,
    )


def summarize(snapshot: LedgerSnapshot) -> TransactionSummary:
    """Summarize every record category of a snapshot."""
    unpaid = [s for s in snapshot.sales if s.paid == "no"]
    production = [c for c in snapshot.costs if c.used_in_production]
    non_production = [c for c in snapshot.costs if not c.used_in_production]

    summary = TransactionSummary(
        sales_total=sum_amounts(snapshot.sales),
        sales_count=len(snapshot.sales),
        sales_unpaid=sum_amounts(unpaid),
        costs_total=sum_amounts(snapshot.costs),
        costs_count=len(snapshot.costs),
        costs_cogs=sum_amounts(production),
        costs_non_production=sum_amounts(non_production),
        payroll_total=sum_net_pay(snapshot.payroll),
        payroll_count=len(snapshot.payroll),
        misc_total=sum_amounts(snapshot.miscellaneous),
        misc_count=len(snapshot.miscellaneous),
        misc_operating=sum_amounts(
            filter_by_category(
                snapshot.miscellaneous, CashFlowType.OPERATING, field="cash_flow_type"
            )
        ),
        misc_assets=sum_amounts(
            filter_by_category(
                snapshot.miscellaneous, CashFlowType.INVESTING, field="cash_flow_type"
            )
        ),
        capital_assets=_capital_total(snapshot, "asset"),
        capital_liabilities=_capital_total(snapshot, "liability"),
        capital_equity=_capital_total(snapshot, "equity"),
    )
    return replace(summary, insights=build_insights(summary))


class SummaryService:
    """Service for building the whole-ledger transaction summary."""

    def __init__(self, store: RecordStore):
        """Initialize summary service.

        Args:
            store: Record store instance
        """
        self.store = store

    async def build_summary(self) -> TransactionSummary:
        """Load the ledger and summarize it."""
        return summarize(await load_snapshot(self.store))
