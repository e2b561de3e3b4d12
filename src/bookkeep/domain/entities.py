"""Domain model entities for bookkeep.

These are pure data classes representing bookkeeping concepts, independent of
how the record store serializes them. Raw stored dicts are turned into these
by the tolerant parse in ``bookkeep.domain.normalize``.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")
BALANCE_EPSILON = Decimal("0.01")


class RecordKind(str, Enum):
    """Record store keys that hold user-entered records."""

    SALES = "sales"
    OTHER_REVENUE = "otherRevenue"
    COSTS = "costs"
    PAYROLL = "payroll"
    CAPITAL = "capital"
    MISCELLANEOUS = "miscellaneous"
    INVENTORY_MOVEMENTS = "inventoryMovements"


class CashFlowType(str, Enum):
    """Cash-flow classification of a transaction."""

    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


class AlertSeverity(str, Enum):
    """Severity of an advisory alert."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class StockStatus(str, Enum):
    """Stock level status relative to the minimum level."""

    LOW = "low"
    WARNING = "warning"
    GOOD = "good"


@dataclass(frozen=True)
class LedgerRecord:
    """Sales, cost, capital, miscellaneous or other-revenue record."""

    id: int
    date: Optional[date]
    amount: Decimal
    category: str = ""
    description: str = ""
    cash_flow_type: CashFlowType = CashFlowType.OPERATING
    paid: str = ""
    paid_via: str = ""
    used_in_production: bool = False
    capital_type: str = ""
    reference_number: str = ""
    note: str = ""


@dataclass(frozen=True)
class Payslip:
    """Payroll record for one employee and pay date."""

    id: int
    date: Optional[date]
    name: str
    position: str
    basic_salary: Decimal
    total_benefits: Decimal
    total_deductions: Decimal
    net_pay: Decimal


@dataclass(frozen=True)
class InventoryMovement:
    """Stock movement of a single inventory item."""

    id: int
    date: Optional[date]
    item_type: str
    name: str
    quantity_in: Decimal
    quantity_out: Decimal
    unit: str = ""
    reference_number: str = ""

    @property
    def net_change(self) -> Decimal:
        return self.quantity_in - self.quantity_out


@dataclass(frozen=True)
class StockItem:
    """Current stock of an inventory item, derived from its movements."""

    name: str
    item_type: str
    unit: str
    current_stock: Decimal
    minimum_level: Decimal = ZERO


@dataclass(frozen=True)
class LineItem:
    """Labelled amount on the cash-flow statement."""

    label: str
    amount: Decimal


@dataclass(frozen=True)
class OtherIncome:
    """Non-operating income and expense figures."""

    interest_income: Decimal = ZERO
    interest_expense: Decimal = ZERO
    gain_loss_on_assets: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.interest_income - self.interest_expense + self.gain_loss_on_assets


@dataclass(frozen=True)
class IncomeStatement:
    """Income statement for a period."""

    total_sales: Decimal
    total_other_revenue: Decimal
    cogs_breakdown: dict[str, Decimal]
    total_payroll: Decimal
    operating_cost_breakdown: dict[str, Decimal]
    other_income: OtherIncome
    tax: Decimal
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def total_revenue(self) -> Decimal:
        return self.total_sales + self.total_other_revenue

    @property
    def total_cogs(self) -> Decimal:
        return sum(self.cogs_breakdown.values(), ZERO)

    @property
    def gross_profit(self) -> Decimal:
        return self.total_revenue - self.total_cogs

    @property
    def total_operating_expenses(self) -> Decimal:
        return self.total_payroll + sum(self.operating_cost_breakdown.values(), ZERO)

    @property
    def operating_profit(self) -> Decimal:
        return self.gross_profit - self.total_operating_expenses

    @property
    def net_other_income_expense(self) -> Decimal:
        return self.other_income.net

    @property
    def net_profit_before_tax(self) -> Decimal:
        return self.operating_profit + self.net_other_income_expense

    @property
    def net_profit(self) -> Decimal:
        return self.net_profit_before_tax - self.tax


@dataclass(frozen=True)
class LedgerTotals:
    """Whole-ledger sums that feed the balance-sheet strategy."""

    sales: Decimal = ZERO
    costs: Decimal = ZERO
    payroll: Decimal = ZERO
    miscellaneous: Decimal = ZERO
    capital: Decimal = ZERO


@dataclass(frozen=True)
class BalanceSheet:
    """Balance sheet line items with derived totals."""

    # Current assets
    cash: Decimal = ZERO
    accounts_receivable: Decimal = ZERO
    inventory: Decimal = ZERO
    prepaid_expenses: Decimal = ZERO
    short_term_investments: Decimal = ZERO
    # Fixed assets
    long_term_investments: Decimal = ZERO
    property_plant_equipment: Decimal = ZERO
    accumulated_depreciation: Decimal = ZERO
    intangible_assets: Decimal = ZERO
    # Other assets
    deferred_income_tax: Decimal = ZERO
    other_assets: Decimal = ZERO
    # Current liabilities
    accounts_payable: Decimal = ZERO
    short_term_loans: Decimal = ZERO
    income_taxes_payable: Decimal = ZERO
    accrued_salaries_wages: Decimal = ZERO
    unearned_revenue: Decimal = ZERO
    current_portion_long_term_debt: Decimal = ZERO
    # Long-term liabilities
    long_term_debt: Decimal = ZERO
    deferred_income_tax_liability: Decimal = ZERO
    other_liabilities: Decimal = ZERO
    # Owner's equity
    owner_investment: Decimal = ZERO
    retained_earnings: Decimal = ZERO
    other_equity: Decimal = ZERO
    as_of: Optional[date] = None

    @property
    def total_current_assets(self) -> Decimal:
        return (
            self.cash
            + self.accounts_receivable
            + self.inventory
            + self.prepaid_expenses
            + self.short_term_investments
        )

    @property
    def total_fixed_assets(self) -> Decimal:
        # Accumulated depreciation is stored negative
        return (
            self.long_term_investments
            + self.property_plant_equipment
            + self.accumulated_depreciation
            + self.intangible_assets
        )

    @property
    def total_other_assets(self) -> Decimal:
        return self.deferred_income_tax + self.other_assets

    @property
    def total_assets(self) -> Decimal:
        return self.total_current_assets + self.total_fixed_assets + self.total_other_assets

    @property
    def total_current_liabilities(self) -> Decimal:
        return (
            self.accounts_payable
            + self.short_term_loans
            + self.income_taxes_payable
            + self.accrued_salaries_wages
            + self.unearned_revenue
            + self.current_portion_long_term_debt
        )

    @property
    def total_long_term_liabilities(self) -> Decimal:
        return self.long_term_debt + self.deferred_income_tax_liability + self.other_liabilities

    @property
    def total_owner_equity(self) -> Decimal:
        return self.owner_investment + self.retained_earnings + self.other_equity

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return (
            self.total_current_liabilities
            + self.total_long_term_liabilities
            + self.total_owner_equity
        )

    @property
    def balance_check(self) -> Decimal:
        return self.total_assets - self.total_liabilities_and_equity

    @property
    def is_balanced(self) -> bool:
        return abs(self.balance_check) < BALANCE_EPSILON


@dataclass(frozen=True)
class CashFlowEntry:
    """Cash-flow statement for one calendar month."""

    month_key: str
    beginning_cash: Decimal
    operating_inflow: Decimal
    operating_outflow: Decimal
    investing: tuple[LineItem, ...] = ()
    financing: tuple[LineItem, ...] = ()
    # endingCash as read from the store; None for freshly computed entries
    stored_ending_cash: Optional[Decimal] = None

    @property
    def net_operating(self) -> Decimal:
        return self.operating_inflow - self.operating_outflow

    @property
    def total_investing(self) -> Decimal:
        return sum((item.amount for item in self.investing), ZERO)

    @property
    def total_financing(self) -> Decimal:
        return sum((item.amount for item in self.financing), ZERO)

    @property
    def net_change(self) -> Decimal:
        return self.net_operating - self.total_investing + self.total_financing

    @property
    def ending_cash(self) -> Decimal:
        if self.stored_ending_cash is not None:
            return self.stored_ending_cash
        return self.beginning_cash + self.net_change


@dataclass(frozen=True)
class Alert:
    """Advisory finding from the consistency checker or the summary."""

    kind: str
    severity: AlertSeverity
    message: str
    details: tuple[str, ...] = ()
    action: str = ""


@dataclass(frozen=True)
class FlaggedRecord:
    """Record singled out by a consistency check."""

    record: LedgerRecord
    days_overdue: Optional[int] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """In-memory view of every record category, loaded once from the store."""

    sales: tuple[LedgerRecord, ...] = ()
    other_revenue: tuple[LedgerRecord, ...] = ()
    costs: tuple[LedgerRecord, ...] = ()
    payroll: tuple[Payslip, ...] = ()
    capital: tuple[LedgerRecord, ...] = ()
    miscellaneous: tuple[LedgerRecord, ...] = ()
    movements: tuple[InventoryMovement, ...] = ()
    cash_flow: tuple[CashFlowEntry, ...] = ()
    minimum_levels: dict[tuple[str, str], Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class TransactionSummary:
    """Per-category totals across the whole ledger."""

    sales_total: Decimal = ZERO
    sales_count: int = 0
    sales_unpaid: Decimal = ZERO
    costs_total: Decimal = ZERO
    costs_count: int = 0
    costs_cogs: Decimal = ZERO
    costs_non_production: Decimal = ZERO
    payroll_total: Decimal = ZERO
    payroll_count: int = 0
    misc_total: Decimal = ZERO
    misc_count: int = 0
    misc_operating: Decimal = ZERO
    misc_assets: Decimal = ZERO
    capital_assets: Decimal = ZERO
    capital_liabilities: Decimal = ZERO
    capital_equity: Decimal = ZERO
    insights: tuple[Alert, ...] = ()

    @property
    def gross_profit(self) -> Decimal:
        return self.sales_total - self.costs_cogs

    @property
    def net_profit(self) -> Decimal:
        return self.gross_profit - self.payroll_total - self.misc_operating
