"""Financial statement commands."""

import click

from bookkeep.cli.date_filters import period_options, resolve_cli_date_range
from bookkeep.cli.error_handling import run_or_exit
from bookkeep.cli.formatting import echo_heading, echo_row, format_money
from bookkeep.cli.parsing import parse_amount_option
from bookkeep.domain.entities import ZERO, BalanceSheet, IncomeStatement, OtherIncome
from bookkeep.domain.reporting import ReportService
from bookkeep.utils.date_parser import parse_date


def _period_label(start, end) -> str:
    if start is None and end is None:
        return "all records"
    if start is None:
        return f"up to {end}"
    if end is None:
        return f"from {start}"
    return f"{start} to {end}"


def _display_income_statement(statement: IncomeStatement) -> None:
    click.echo(f"Income Statement ({_period_label(statement.start_date, statement.end_date)})")
    click.echo("=" * 64)

    echo_heading("Revenue")
    echo_row("Sales", statement.total_sales)
    echo_row("Other revenue", statement.total_other_revenue)
    echo_row("Total revenue", statement.total_revenue, indent=0)

    echo_heading("Cost of goods sold")
    for label, amount in statement.cogs_breakdown.items():
        echo_row(label, amount)
    echo_row("Total COGS", statement.total_cogs, indent=0)
    echo_row("Gross profit", statement.gross_profit, indent=0)

    echo_heading("Operating expenses")
    echo_row("Salaries and wages", statement.total_payroll)
    for label, amount in statement.operating_cost_breakdown.items():
        echo_row(label, amount)
    echo_row("Total operating expenses", statement.total_operating_expenses, indent=0)
    echo_row("Operating profit", statement.operating_profit, indent=0)

    echo_heading("Other income / expense")
    echo_row("Interest income", statement.other_income.interest_income)
    echo_row("Interest expense", statement.other_income.interest_expense)
    echo_row("Gain/loss on assets", statement.other_income.gain_loss_on_assets)
    echo_row("Net other income/expense", statement.net_other_income_expense, indent=0)

    click.echo()
    echo_row("Net profit before tax", statement.net_profit_before_tax, indent=0)
    echo_row("Tax", statement.tax, indent=0)
    echo_row("NET PROFIT", statement.net_profit, indent=0)


def _display_balance_sheet(sheet: BalanceSheet) -> None:
    as_of = f"as of {sheet.as_of}" if sheet.as_of else "all records"
    click.echo(f"Balance Sheet ({as_of})")
    click.echo("=" * 64)

    echo_heading("Current assets")
    echo_row("Cash", sheet.cash)
    echo_row("Accounts receivable", sheet.accounts_receivable)
    echo_row("Inventory", sheet.inventory)
    echo_row("Prepaid expenses", sheet.prepaid_expenses)
    echo_row("Short-term investments", sheet.short_term_investments)
    echo_row("Total current assets", sheet.total_current_assets, indent=0)

    echo_heading("Fixed assets")
    echo_row("Long-term investments", sheet.long_term_investments)
    echo_row("Property, plant and equipment", sheet.property_plant_equipment)
    echo_row("Accumulated depreciation", sheet.accumulated_depreciation)
    echo_row("Intangible assets", sheet.intangible_assets)
    echo_row("Total fixed assets", sheet.total_fixed_assets, indent=0)

    echo_heading("Other assets")
    echo_row("Deferred income tax", sheet.deferred_income_tax)
    echo_row("Other", sheet.other_assets)
    echo_row("Total other assets", sheet.total_other_assets, indent=0)
    echo_row("TOTAL ASSETS", sheet.total_assets, indent=0)

    echo_heading("Current liabilities")
    echo_row("Accounts payable", sheet.accounts_payable)
    echo_row("Short-term loans", sheet.short_term_loans)
    echo_row("Income taxes payable", sheet.income_taxes_payable)
    echo_row("Accrued salaries and wages", sheet.accrued_salaries_wages)
    echo_row("Unearned revenue", sheet.unearned_revenue)
    echo_row("Current portion of long-term debt", sheet.current_portion_long_term_debt)
    echo_row("Total current liabilities", sheet.total_current_liabilities, indent=0)

    echo_heading("Long-term liabilities")
    echo_row("Long-term debt", sheet.long_term_debt)
    echo_row("Deferred income tax", sheet.deferred_income_tax_liability)
    echo_row("Other", sheet.other_liabilities)
    echo_row("Total long-term liabilities", sheet.total_long_term_liabilities, indent=0)

    echo_heading("Owner's equity")
    echo_row("Owner's investment", sheet.owner_investment)
    echo_row("Retained earnings", sheet.retained_earnings)
    echo_row("Other", sheet.other_equity)
    echo_row("Total owner's equity", sheet.total_owner_equity, indent=0)
    echo_row("TOTAL LIABILITIES AND EQUITY", sheet.total_liabilities_and_equity, indent=0)

    click.echo()
    if sheet.is_balanced:
        click.echo("Balance check: balanced")
    else:
        click.echo(f"Balance check: out of balance by {format_money(sheet.balance_check)}")


@click.group()
def statement_group():
    """Build financial statements from the ledger."""
    pass


@statement_group.command("income")
@period_options
@click.option("--tax", help="Tax for the period (entered manually)")
@click.option("--interest-income", help="Interest income for the period")
@click.option("--interest-expense", help="Interest expense for the period")
@click.option("--gain-loss", help="Gain or loss on sale of assets for the period")
@click.pass_context
def income_statement(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    this_week: bool,
    last_month: bool,
    last_year: bool,
    last_week: bool,
    tax: str | None,
    interest_income: str | None,
    interest_expense: str | None,
    gain_loss: str | None,
):
    """Show the income statement.

    Without a period option every dated record is included.

    Examples:
        bookkeep statement income --this-month --tax 120
        bookkeep statement income --start-date 2024-01-01 --end-date 2024-03-31
    """
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "this-week": this_week,
            "last-month": last_month,
            "last-year": last_year,
            "last-week": last_week,
        },
    )
    other_income = OtherIncome(
        interest_income=parse_amount_option(ctx, interest_income, "interest income") or ZERO,
        interest_expense=parse_amount_option(ctx, interest_expense, "interest expense") or ZERO,
        gain_loss_on_assets=parse_amount_option(ctx, gain_loss, "gain/loss") or ZERO,
    )
    service = ReportService(ctx.obj["store"])

    statement = run_or_exit(
        ctx,
        service.income_statement(
            start_date=start,
            end_date=end,
            tax=parse_amount_option(ctx, tax, "tax") or ZERO,
            other_income=other_income,
        ),
    )
    _display_income_statement(statement)


@statement_group.command("balance")
@click.option("--as-of", help="Include records dated on or before this date (default: all)")
@click.pass_context
def balance_sheet(ctx, as_of: str | None):
    """Show the balance sheet."""
    as_of_date = None
    if as_of:
        try:
            as_of_date = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid as-of date: {e}", err=True)
            ctx.exit(1)
    service = ReportService(ctx.obj["store"])

    sheet = run_or_exit(ctx, service.balance_sheet(as_of=as_of_date))
    _display_balance_sheet(sheet)


def register_commands(cli):
    """Register statement commands with main CLI."""
    cli.add_command(statement_group, name="statement")
