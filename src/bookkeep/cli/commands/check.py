"""Consistency check command."""

import click

from bookkeep.cli.error_handling import run_or_exit
from bookkeep.cli.formatting import echo_alerts
from bookkeep.domain.reporting import ReportService
from bookkeep.utils.date_parser import parse_date


@click.command("check")
@click.option("--today", "today_str", help="Date to measure overdue receivables against (default: today)")
@click.pass_context
def check_ledger(ctx, today_str: str | None):
    """Check the ledger for duplicates, unusual costs, overdue sales and balance.

    Findings are advisory; the command exits 0 whatever it finds.
    """
    today = None
    if today_str:
        try:
            today = parse_date(today_str)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)
    service = ReportService(ctx.obj["store"])

    alerts = run_or_exit(ctx, service.alerts(today=today))
    if not alerts:
        click.echo("No issues found.")
        return
    echo_alerts(alerts)


def register_commands(cli):
    """Register check command with main CLI."""
    cli.add_command(check_ledger)
