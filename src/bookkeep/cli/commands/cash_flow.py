"""Cash-flow statement commands."""

import click

from bookkeep.cli.error_handling import run_or_exit
from bookkeep.cli.formatting import echo_heading, echo_row
from bookkeep.cli.parsing import parse_amount_option, parse_line_items
from bookkeep.domain.cash_flow import CashFlowService
from bookkeep.domain.entities import ZERO, CashFlowEntry, LineItem
from bookkeep.utils.date_parser import parse_month_key


def _month_arg(ctx: click.Context, value: str) -> tuple[int, int]:
    try:
        return parse_month_key(value)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def _display_entry(entry: CashFlowEntry) -> None:
    click.echo(f"Cash Flow Statement ({entry.month_key})")
    click.echo("=" * 64)
    echo_row("Beginning cash", entry.beginning_cash, indent=0)

    echo_heading("Operating activities")
    echo_row("Cash inflow", entry.operating_inflow)
    echo_row("Cash outflow", entry.operating_outflow)
    echo_row("Net operating cash flow", entry.net_operating, indent=0)

    echo_heading("Investing activities")
    for item in entry.investing:
        echo_row(item.label, item.amount)
    echo_row("Total investing", entry.total_investing, indent=0)

    echo_heading("Financing activities")
    for item in entry.financing:
        echo_row(item.label, item.amount)
    echo_row("Total financing", entry.total_financing, indent=0)

    click.echo()
    echo_row("Net change in cash", entry.net_change, indent=0)
    echo_row("ENDING CASH", entry.ending_cash, indent=0)


@click.group()
def cash_flow_group():
    """Record and review monthly cash-flow statements."""
    pass


@cash_flow_group.command("record")
@click.argument("month")
@click.option("--inflow", help="Operating cash inflow")
@click.option("--outflow", help="Operating cash outflow")
@click.option("--investing", multiple=True, help="Investing outflow as LABEL=AMOUNT (repeatable)")
@click.option("--financing", multiple=True, help="Financing inflow as LABEL=AMOUNT (repeatable)")
@click.option(
    "--opening-cash",
    help="Beginning cash when the previous month has no statement (default: 0)",
)
@click.option(
    "--from-ledger",
    is_flag=True,
    help="Derive every flow from the month's ledger records",
)
@click.pass_context
def record_month(
    ctx,
    month: str,
    inflow: str | None,
    outflow: str | None,
    investing: tuple[str, ...],
    financing: tuple[str, ...],
    opening_cash: str | None,
    from_ledger: bool,
):
    """Record the cash-flow statement for MONTH (YYYY-MM).

    Beginning cash is the previous month's ending cash. Recording a month
    again replaces its statement and carries the new ending cash into the
    months that follow it.

    Examples:
        bookkeep cash-flow record 2024-03 --inflow 5000 --outflow 3200 --investing Oven=1500
        bookkeep cash-flow record 2024-04 --from-ledger
    """
    year, month_number = _month_arg(ctx, month)
    opening = parse_amount_option(ctx, opening_cash, "opening cash") or ZERO
    service = CashFlowService(ctx.obj["store"])

    if from_ledger:
        if inflow or outflow or investing or financing:
            click.echo(
                "Error: --from-ledger cannot be combined with --inflow, --outflow, "
                "--investing or --financing.",
                err=True,
            )
            ctx.exit(1)
        entry = run_or_exit(
            ctx, service.record_month_from_ledger(year, month_number, opening_cash=opening)
        )
    else:
        entry = run_or_exit(
            ctx,
            service.record_month(
                year,
                month_number,
                parse_amount_option(ctx, inflow, "inflow") or ZERO,
                parse_amount_option(ctx, outflow, "outflow") or ZERO,
                investing=[LineItem(label, amount) for label, amount in parse_line_items(ctx, investing)],
                financing=[LineItem(label, amount) for label, amount in parse_line_items(ctx, financing)],
                opening_cash=opening,
            ),
        )
    _display_entry(entry)


@cash_flow_group.command("show")
@click.argument("month", required=False)
@click.pass_context
def show_months(ctx, month: str | None):
    """Show the statement for MONTH (YYYY-MM), or list every recorded month."""
    service = CashFlowService(ctx.obj["store"])

    if month:
        year, month_number = _month_arg(ctx, month)
        entry = run_or_exit(ctx, service.get_month(year, month_number))
        if entry is None:
            click.echo(f"No cash-flow statement recorded for {month}.")
            return
        _display_entry(entry)
        return

    history = run_or_exit(ctx, service.history())
    if not history:
        click.echo("No cash-flow statements recorded.")
        return

    click.echo(f"{'Month':<8} {'Beginning':>16} {'Net change':>16} {'Ending':>16}")
    click.echo("-" * 59)
    for entry in history:
        click.echo(
            f"{entry.month_key:<8} {entry.beginning_cash:>16,.2f} "
            f"{entry.net_change:>16,.2f} {entry.ending_cash:>16,.2f}"
        )


def register_commands(cli):
    """Register cash-flow commands with main CLI."""
    cli.add_command(cash_flow_group, name="cash-flow")
