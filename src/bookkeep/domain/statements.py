"""Financial statement builders.

Everything here is a pure function of already-loaded records: the same
inputs always produce the same statement, and nothing is cached between
calls.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from bookkeep.domain.aggregation import (
    filter_by_categories,
    filter_by_category,
    select_period,
    sum_amounts,
    sum_net_pay,
)
from bookkeep.domain.entities import (
    ZERO,
    BalanceSheet,
    CashFlowEntry,
    CashFlowType,
    IncomeStatement,
    LedgerRecord,
    LedgerSnapshot,
    LedgerTotals,
    LineItem,
    OtherIncome,
    Payslip,
)
from bookkeep.utils.date_parser import month_bounds, previous_month_key

COGS_CATEGORIES = ("Raw Materials", "Direct Labour", "Manufacturing Overheads")
OPERATING_COST_CATEGORIES = ("Rent", "Utilities", "Transport/Fuel", "Depreciation", "Other")

# The cost form offers "Transport" and "Fuel" separately
OPERATING_CATEGORY_ALIASES = {
    "Transport": "Transport/Fuel",
    "Fuel": "Transport/Fuel",
}

INVENTORY_SHARE_OF_COSTS = Decimal("0.3")
PAYABLE_SHARE_OF_COSTS = Decimal("0.2")
ACCRUED_SHARE_OF_PAYROLL = Decimal("0.1")

BalanceStrategy = Callable[[LedgerTotals], dict[str, Decimal]]


def _breakdown(
    costs: Sequence[LedgerRecord],
    categories: Sequence[str],
    aliases: Optional[dict[str, str]] = None,
) -> dict[str, Decimal]:
    breakdown = {category: ZERO for category in categories}
    for cost in costs:
        category = (aliases or {}).get(cost.category, cost.category)
        if category in breakdown:
            breakdown[category] += cost.amount
    return breakdown


def build_income_statement(
    sales: Sequence[LedgerRecord],
    costs: Sequence[LedgerRecord],
    payroll: Sequence[Payslip],
    other_revenue: Sequence[LedgerRecord] = (),
    tax: Decimal = ZERO,
    other_income: Optional[OtherIncome] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> IncomeStatement:
    """Build an income statement from records already filtered to a period.

    Costs count towards cost of sales or operating expenses by category;
    costs in any other category are left out of both. Tax is a manually
    entered figure, not derived.
    """
    return IncomeStatement(
        total_sales=sum_amounts(sales),
        total_other_revenue=sum_amounts(other_revenue),
        cogs_breakdown=_breakdown(costs, COGS_CATEGORIES),
        total_payroll=sum_net_pay(payroll),
        operating_cost_breakdown=_breakdown(
            costs, OPERATING_COST_CATEGORIES, OPERATING_CATEGORY_ALIASES
        ),
        other_income=other_income or OtherIncome(),
        tax=tax,
        start_date=start_date,
        end_date=end_date,
    )


def income_statement_for_period(
    snapshot: LedgerSnapshot,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    tax: Decimal = ZERO,
    other_income: Optional[OtherIncome] = None,
) -> IncomeStatement:
    """Filter a snapshot to a period and build its income statement."""
    return build_income_statement(
        sales=select_period(snapshot.sales, start_date, end_date),
        costs=select_period(snapshot.costs, start_date, end_date),
        payroll=select_period(snapshot.payroll, start_date, end_date),
        other_revenue=select_period(snapshot.other_revenue, start_date, end_date),
        tax=tax,
        other_income=other_income,
        start_date=start_date,
        end_date=end_date,
    )


def ledger_totals(snapshot: LedgerSnapshot, as_of: Optional[date] = None) -> LedgerTotals:
    """Sum each record category, optionally only up to a date."""

    def upto(records):
        return select_period(records, None, as_of)

    return LedgerTotals(
        sales=sum_amounts(upto(snapshot.sales)),
        costs=sum_amounts(upto(snapshot.costs)),
        payroll=sum_net_pay(upto(snapshot.payroll)),
        miscellaneous=sum_amounts(upto(snapshot.miscellaneous)),
        capital=sum_amounts(upto(snapshot.capital)),
    )


def heuristic_balances(totals: LedgerTotals) -> dict[str, Decimal]:
    """Approximate balance-sheet line items from ledger totals.

    There is no double-entry ledger behind these figures. Earnings are sales
    less costs, payroll and miscellaneous spend; cash is the positive part of
    earnings; inventory and accounts payable are fixed shares of costs and
    accrued wages a fixed share of payroll. Swap in a different strategy to
    use real ledger balances.
    """
    earnings = totals.sales - totals.costs - totals.payroll - totals.miscellaneous
    return {
        "cash": max(earnings, ZERO),
        "inventory": totals.costs * INVENTORY_SHARE_OF_COSTS,
        "accounts_payable": totals.costs * PAYABLE_SHARE_OF_COSTS,
        "accrued_salaries_wages": totals.payroll * ACCRUED_SHARE_OF_PAYROLL,
        "owner_investment": totals.capital,
        "retained_earnings": earnings,
    }


def build_balance_sheet(
    totals: LedgerTotals,
    strategy: BalanceStrategy = heuristic_balances,
    as_of: Optional[date] = None,
) -> BalanceSheet:
    """Build a balance sheet from ledger totals using a balance strategy."""
    return BalanceSheet(as_of=as_of, **strategy(totals))


def compute_cash_flow_entry(
    month: str,
    beginning_cash: Decimal,
    operating_inflow: Decimal,
    operating_outflow: Decimal,
    investing: Iterable[LineItem] = (),
    financing: Iterable[LineItem] = (),
) -> CashFlowEntry:
    """Build the cash-flow entry for a month.

    Investing amounts are cash spent and reduce cash; financing amounts are
    cash raised and increase it.
    """
    return CashFlowEntry(
        month_key=month,
        beginning_cash=beginning_cash,
        operating_inflow=operating_inflow,
        operating_outflow=operating_outflow,
        investing=tuple(investing),
        financing=tuple(financing),
    )


def beginning_cash_for(
    history: Iterable[CashFlowEntry],
    year: int,
    month: int,
    opening_cash: Decimal = ZERO,
) -> Decimal:
    """Beginning cash for a month: the previous calendar month's ending cash.

    Falls back to opening_cash when the previous month was never recorded.
    """
    prior_key = previous_month_key(year, month)
    for entry in history:
        if entry.month_key == prior_key:
            return entry.ending_cash
    return opening_cash


def derive_operating_flows(
    snapshot: LedgerSnapshot, year: int, month: int
) -> tuple[Decimal, Decimal, tuple[LineItem, ...], tuple[LineItem, ...]]:
    """Derive a month's cash movements from its records.

    Inflow is paid sales plus other revenue; outflow is operating costs,
    payroll and miscellaneous spend. Capital records become investing or
    financing line items according to their cash-flow classification.

    Returns:
        Tuple of (inflow, outflow, investing items, financing items)
    """
    start, end = month_bounds(year, month)

    def in_month(records):
        return select_period(records, start, end)

    paid_sales = [s for s in in_month(snapshot.sales) if s.paid != "no"]
    inflow = sum_amounts(paid_sales) + sum_amounts(in_month(snapshot.other_revenue))

    operating_costs = filter_by_category(
        in_month(snapshot.costs), CashFlowType.OPERATING, field="cash_flow_type"
    )
    operating_misc = filter_by_category(
        in_month(snapshot.miscellaneous), CashFlowType.OPERATING, field="cash_flow_type"
    )
    outflow = (
        sum_amounts(operating_costs)
        + sum_net_pay(in_month(snapshot.payroll))
        + sum_amounts(operating_misc)
    )

    capital = in_month(snapshot.capital)
    spent = filter_by_categories(
        in_month(snapshot.costs) + in_month(snapshot.miscellaneous) + capital,
        [CashFlowType.INVESTING],
        field="cash_flow_type",
    )
    raised = filter_by_category(capital, CashFlowType.FINANCING, field="cash_flow_type")
    investing = tuple(LineItem(label=r.description, amount=r.amount) for r in spent)
    financing = tuple(LineItem(label=r.description, amount=r.amount) for r in raised)
    return inflow, outflow, investing, financing