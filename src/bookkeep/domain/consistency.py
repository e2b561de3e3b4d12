"""Advisory consistency checks over the ledger.

None of these checks block bookkeeping: every finding is returned as an
``Alert`` for the user to review.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from bookkeep.domain.entities import (
    ZERO,
    Alert,
    AlertSeverity,
    BalanceSheet,
    FlaggedRecord,
    LedgerRecord,
    LedgerSnapshot,
)
from bookkeep.domain.statements import (
    BalanceStrategy,
    build_balance_sheet,
    heuristic_balances,
    ledger_totals,
)

OVERDUE_AFTER_DAYS = 30
LARGE_COST_FACTOR = Decimal("3")
LARGE_COST_FLOOR = Decimal("1000")


def _describe(record: LedgerRecord) -> str:
    when = record.date.isoformat() if record.date else "undated"
    return f"{when}: {record.description} - ${record.amount:,.2f}"


def find_duplicates(records: Sequence[LedgerRecord]) -> list[LedgerRecord]:
    """Return every record that repeats an earlier (date, description, amount)."""
    seen: set[tuple] = set()
    duplicates = []
    for record in records:
        key = (record.date, record.description, record.amount)
        if key in seen:
            duplicates.append(record)
        else:
            seen.add(key)
    return duplicates


def find_large_costs(costs: Sequence[LedgerRecord]) -> list[LedgerRecord]:
    """Return costs above both three times the mean cost and the absolute floor."""
    if not costs:
        return []
    mean = sum((cost.amount for cost in costs), ZERO) / len(costs)
    threshold = mean * LARGE_COST_FACTOR
    return [cost for cost in costs if cost.amount > threshold and cost.amount > LARGE_COST_FLOOR]


def find_overdue_receivables(
    sales: Sequence[LedgerRecord], today: Optional[date] = None
) -> list[FlaggedRecord]:
    """Return unpaid sales dated more than 30 days before today."""
    today = today or date.today()
    overdue = []
    for sale in sales:
        if sale.paid != "no" or sale.date is None:
            continue
        days = (today - sale.date).days
        if days > OVERDUE_AFTER_DAYS:
            overdue.append(FlaggedRecord(record=sale, days_overdue=days))
    return overdue


def check_balance(sheet: BalanceSheet) -> Optional[Alert]:
    """Return an error alert when assets differ from liabilities plus equity."""
    if sheet.is_balanced:
        return None
    return Alert(
        kind="balance",
        severity=AlertSeverity.ERROR,
        message=f"Balance sheet does not balance: difference ${sheet.balance_check:,.2f}",
        details=(
            f"Total assets: ${sheet.total_assets:,.2f}",
            f"Total liabilities and equity: ${sheet.total_liabilities_and_equity:,.2f}",
        ),
        action="Review Capital tab",
    )


def run_checks(
    snapshot: LedgerSnapshot,
    today: Optional[date] = None,
    strategy: BalanceStrategy = heuristic_balances,
) -> list[Alert]:
    """Run every consistency check against a snapshot.

    The balance check uses the same strategy as the balance sheet it checks.
    """
    alerts = []

    duplicates = []
    for records in (
        snapshot.sales,
        snapshot.other_revenue,
        snapshot.costs,
        snapshot.capital,
        snapshot.miscellaneous,
    ):
        duplicates.extend(find_duplicates(records))
    if duplicates:
        alerts.append(
            Alert(
                kind="duplicates",
                severity=AlertSeverity.WARNING,
                message=f"{len(duplicates)} potential duplicate transactions found",
                details=tuple(_describe(d) for d in duplicates),
            )
        )

    large = find_large_costs(snapshot.costs)
    if large:
        alerts.append(
            Alert(
                kind="large_costs",
                severity=AlertSeverity.WARNING,
                message=f"{len(large)} unusually large costs found",
                details=tuple(_describe(c) for c in large),
                action="Consider reclassifying as assets",
            )
        )

    overdue = find_overdue_receivables(snapshot.sales, today)
    if overdue:
        alerts.append(
            Alert(
                kind="overdue_receivables",
                severity=AlertSeverity.ERROR,
                message=f"{len(overdue)} overdue receivables (>{OVERDUE_AFTER_DAYS} days)",
                details=tuple(
                    f"{_describe(item.record)} ({item.days_overdue} days overdue)"
                    for item in overdue
                ),
                action="Review Sales tab",
            )
        )

    balance_alert = check_balance(build_balance_sheet(ledger_totals(snapshot), strategy=strategy))
    if balance_alert is not None:
        alerts.append(balance_alert)

    return alerts
