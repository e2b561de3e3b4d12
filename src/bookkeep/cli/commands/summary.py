"""Transaction summary command."""

import click

from bookkeep.cli.error_handling import run_or_exit
from bookkeep.cli.formatting import echo_alerts, echo_heading, echo_row
from bookkeep.domain.summary import SummaryService


@click.command("summary")
@click.pass_context
def summary(ctx):
    """Show totals for every record category with insights."""
    service = SummaryService(ctx.obj["store"])
    result = run_or_exit(ctx, service.build_summary())

    click.echo("Transaction Summary")
    click.echo("=" * 64)

    echo_heading(f"Sales ({result.sales_count})")
    echo_row("Total", result.sales_total)
    echo_row("Unpaid (accounts receivable)", result.sales_unpaid)

    echo_heading(f"Costs ({result.costs_count})")
    echo_row("Total", result.costs_total)
    echo_row("Used in production (COGS)", result.costs_cogs)
    echo_row("Not used in production", result.costs_non_production)

    echo_heading(f"Payroll ({result.payroll_count})")
    echo_row("Total net pay", result.payroll_total)

    echo_heading(f"Miscellaneous ({result.misc_count})")
    echo_row("Total", result.misc_total)
    echo_row("Operating", result.misc_operating)
    echo_row("Assets", result.misc_assets)

    echo_heading("Capital")
    echo_row("Assets", result.capital_assets)
    echo_row("Liabilities", result.capital_liabilities)
    echo_row("Equity", result.capital_equity)

    click.echo()
    echo_row("Gross profit", result.gross_profit, indent=0)
    echo_row("Net profit", result.net_profit, indent=0)

    if result.insights:
        echo_heading("Insights")
        echo_alerts(result.insights)


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
