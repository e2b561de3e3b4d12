"""Ledger record commands."""

from typing import Any

import click

from bookkeep.cli.error_handling import handle_domain_error, run_or_exit
from bookkeep.cli.formatting import format_money
from bookkeep.cli.parsing import parse_amount_option, parse_date_option, parse_line_items
from bookkeep.domain.entities import CashFlowType, RecordKind
from bookkeep.domain.errors import ValidationError
from bookkeep.domain.ledger import (
    LedgerService,
    line_items_from_pairs,
    parse_kind,
    suggest_category,
)
from bookkeep.utils.amount_parser import coerce_amount


def record_field_options(command):
    """Attach the record field options shared by add and edit."""
    options = [
        click.option("--date", help="Record date (YYYY-MM-DD or relative like 'today')"),
        click.option("--amount", help="Amount (e.g., 123.45 or $1,200.00)"),
        click.option("--description", help="Description"),
        click.option("--category", help="Category (e.g., 'Raw Materials', 'Rent', 'liability')"),
        click.option(
            "--paid",
            type=click.Choice(["yes", "no"], case_sensitive=False),
            help="Whether a sale has been paid",
        ),
        click.option("--paid-via", help="Payment method (capital records)"),
        click.option(
            "--cash-flow-type",
            type=click.Choice([t.value for t in CashFlowType], case_sensitive=False),
            help="Cash-flow classification",
        ),
        click.option(
            "--used-in-production/--not-used-in-production",
            default=None,
            help="Whether a cost went into production (counts as COGS)",
        ),
        click.option("--type", "record_type", help="Capital type (e.g., loan, investment, purchase)"),
        click.option("--name", help="Employee name (payroll)"),
        click.option("--position", help="Employee position (payroll)"),
        click.option("--basic-salary", help="Basic salary (payroll)"),
        click.option("--benefit", multiple=True, help="Payroll benefit as LABEL=AMOUNT (repeatable)"),
        click.option("--deduction", multiple=True, help="Payroll deduction as LABEL=AMOUNT (repeatable)"),
        click.option("--reference", help="Reference number (generated when omitted)"),
        click.option("--note", help="Note"),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _resolve_kind(ctx: click.Context, value: str) -> RecordKind:
    try:
        kind = parse_kind(value)
    except ValidationError as e:
        handle_domain_error(ctx, e)
    return kind


def _ledger_kind(ctx: click.Context, value: str) -> RecordKind:
    kind = _resolve_kind(ctx, value)
    if kind == RecordKind.INVENTORY_MOVEMENTS:
        click.echo("Error: Use 'bookkeep inventory' commands for inventory movements", err=True)
        ctx.exit(1)
    return kind


def _collect_fields(ctx: click.Context, options: dict[str, Any]) -> dict[str, Any]:
    """Build a stored-record field dict from CLI options; unset options are None."""
    used = options["used_in_production"]
    benefits = parse_line_items(ctx, options["benefit"])
    deductions = parse_line_items(ctx, options["deduction"])
    paid = options["paid"]
    cash_flow_type = options["cash_flow_type"]
    return {
        "date": parse_date_option(ctx, options["date"]),
        "amount": parse_amount_option(ctx, options["amount"]),
        "description": options["description"],
        "category": options["category"],
        "paid": paid.lower() if paid else None,
        "paidVia": options["paid_via"],
        "cashFlowType": cash_flow_type.lower() if cash_flow_type else None,
        "usedInProduction": None if used is None else ("yes" if used else "no"),
        "type": options["record_type"],
        "name": options["name"],
        "position": options["position"],
        "basicSalary": parse_amount_option(ctx, options["basic_salary"], "basic salary"),
        "benefits": line_items_from_pairs(benefits) if benefits else None,
        "deductions": line_items_from_pairs(deductions) if deductions else None,
        "referenceNumber": options["reference"],
        "note": options["note"],
    }


def _record_label(record: dict[str, Any]) -> str:
    return str(record.get("description") or record.get("name") or "")


def _record_amount(kind: RecordKind, record: dict[str, Any]):
    if kind == RecordKind.PAYROLL:
        return coerce_amount(record.get("netPay"))
    if kind == RecordKind.INVENTORY_MOVEMENTS:
        return coerce_amount(record.get("netChange"))
    return coerce_amount(record.get("amount"))


@click.group()
def record_group():
    """Add, edit, delete and list ledger records.

    KIND is one of sales, otherRevenue, costs, payroll, capital or
    miscellaneous (short forms like sale, cost and misc also work).
    """
    pass


@record_group.command("add")
@click.argument("kind")
@record_field_options
@click.option(
    "--suggest",
    is_flag=True,
    help="Fill in unset classification fields from the description",
)
@click.pass_context
def add_record(ctx, kind: str, suggest: bool, **options):
    """Add a record.

    Examples:
        bookkeep record add sales --date today --description "Bread" --amount 120 --paid yes
        bookkeep record add costs --date 2024-03-02 --category "Raw Materials" \\
            --description Flour --amount 40 --used-in-production
        bookkeep record add payroll --date today --name Ana --position Baker \\
            --basic-salary 1500 --benefit Transport=100 --deduction Tax=150
        bookkeep record add capital --date today --description "Bank loan" \\
            --category liability --amount 5000 --paid-via bank --suggest
    """
    record_kind = _ledger_kind(ctx, kind)
    fields = _collect_fields(ctx, options)
    if suggest:
        suggested = suggest_category(record_kind, fields["description"], fields["amount"])
        for name, value in suggested.items():
            if fields.get(name) is None:
                fields[name] = value
    service = LedgerService(ctx.obj["store"])

    record = run_or_exit(ctx, service.add_record(record_kind, fields))
    click.echo(
        f"Added {record_kind.value} record {record['id']} "
        f"({format_money(_record_amount(record_kind, record))})"
    )


@record_group.command("edit")
@click.argument("kind")
@click.argument("record_id", type=int)
@record_field_options
@click.pass_context
def edit_record(ctx, kind: str, record_id: int, **options):
    """Edit a record.

    Updates only the fields that are provided; benefits and deductions,
    when given, replace the stored lists.

    Examples:
        bookkeep record edit sales 1710000000000 --paid yes
    """
    record_kind = _ledger_kind(ctx, kind)
    fields = _collect_fields(ctx, options)
    service = LedgerService(ctx.obj["store"])

    run_or_exit(ctx, service.edit_record(record_kind, record_id, fields))
    click.echo(f"Updated {record_kind.value} record {record_id}")


@record_group.command("delete")
@click.argument("kind")
@click.argument("record_id", type=int)
@click.pass_context
def delete_record(ctx, kind: str, record_id: int):
    """Delete a record."""
    record_kind = _ledger_kind(ctx, kind)
    service = LedgerService(ctx.obj["store"])

    run_or_exit(ctx, service.delete_record(record_kind, record_id))
    click.echo(f"Deleted {record_kind.value} record {record_id}")


@record_group.command("list")
@click.argument("kind")
@click.option("--verbose", "-v", is_flag=True, help="Show every stored field")
@click.pass_context
def list_records(ctx, kind: str, verbose: bool):
    """List stored records of a kind."""
    record_kind = _resolve_kind(ctx, kind)
    service = LedgerService(ctx.obj["store"])

    records = run_or_exit(ctx, service.list_records(record_kind))
    if not records:
        click.echo(f"No {record_kind.value} records found.")
        return

    if verbose:
        click.echo(f"\nFound {len(records)} {record_kind.value} record(s):")
        click.echo("=" * 80)
        for record in records:
            click.echo(f"\nRecord ID: {record.get('id')}")
            for key, value in record.items():
                if key != "id":
                    click.echo(f"  {key}: {value}")
        return

    click.echo(f"{'ID':<15} {'Date':<12} {'Description':<36} {'Amount':>16}")
    click.echo("-" * 82)
    for record in records:
        label = _record_label(record)
        if len(label) > 36:
            label = label[:33] + "..."
        click.echo(
            f"{str(record.get('id', '')):<15} {str(record.get('date', '')):<12} {label:<36} "
            f"{format_money(_record_amount(record_kind, record)):>16}"
        )


def register_commands(cli):
    """Register record commands with main CLI."""
    cli.add_command(record_group, name="record")
