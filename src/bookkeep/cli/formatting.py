"""Plain-text rendering helpers shared by CLI commands."""

from decimal import Decimal
from typing import Iterable

import click

from bookkeep.domain.entities import Alert, AlertSeverity

LABEL_WIDTH = 44
AMOUNT_WIDTH = 18

SEVERITY_MARKERS = {
    AlertSeverity.INFO: "[info]",
    AlertSeverity.SUCCESS: "[ok]",
    AlertSeverity.WARNING: "[warning]",
    AlertSeverity.ERROR: "[error]",
}


def format_money(amount: Decimal) -> str:
    """Format an amount as dollars, e.g. $1,234.50 or $-12.00."""
    return f"${amount:,.2f}"


def echo_heading(title: str) -> None:
    click.echo()
    click.echo(title.upper())


def echo_row(label: str, amount: Decimal, indent: int = 1) -> None:
    """Print a label and a right-aligned amount."""
    pad = "    " * indent
    width = LABEL_WIDTH - len(pad)
    click.echo(f"{pad}{label:<{width}} {format_money(amount):>{AMOUNT_WIDTH}}")


def echo_alerts(alerts: Iterable[Alert]) -> None:
    """Print alerts with their details and suggested action."""
    for alert in alerts:
        click.echo(f"{SEVERITY_MARKERS[alert.severity]} {alert.message}")
        for detail in alert.details:
            click.echo(f"    {detail}")
        if alert.action:
            click.echo(f"    -> {alert.action}")
