"""CLI helpers for parsing option values."""

from decimal import Decimal

import click

from bookkeep.utils.amount_parser import parse_amount
from bookkeep.utils.date_parser import parse_date


def parse_date_option(ctx: click.Context, value: str | None, label: str = "date") -> str | None:
    """Parse a date option to an ISO string, exiting on bad input."""
    if value is None:
        return None
    try:
        return parse_date(value).isoformat()
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_amount_option(
    ctx: click.Context, value: str | None, label: str = "amount"
) -> Decimal | None:
    """Parse an amount option, exiting on bad input."""
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def parse_line_items(ctx: click.Context, values: tuple[str, ...]) -> list[tuple[str, Decimal]]:
    """Parse repeated LABEL=AMOUNT options into (label, amount) pairs."""
    pairs = []
    for value in values:
        label, sep, amount = value.rpartition("=")
        if not sep or not label.strip():
            click.echo(f"Error: Expected LABEL=AMOUNT, got '{value}'", err=True)
            ctx.exit(1)
        pairs.append((label.strip(), parse_amount_option(ctx, amount, f"amount for '{label}'")))
    return pairs
