"""Inventory commands."""

import click

from bookkeep.cli.error_handling import run_or_exit
from bookkeep.cli.parsing import parse_amount_option, parse_date_option
from bookkeep.domain.entities import ZERO, StockStatus
from bookkeep.domain.inventory import ITEM_TYPES, InventoryService, stock_status

STATUS_LABELS = {
    StockStatus.LOW: "LOW",
    StockStatus.WARNING: "warning",
    StockStatus.GOOD: "good",
}


@click.group()
def inventory_group():
    """Record stock movements and review stock levels."""
    pass


@inventory_group.command("move")
@click.option("--date", "move_date", required=True, help="Movement date (YYYY-MM-DD or relative like 'today')")
@click.option("--type", "item_type", required=True, type=click.Choice(ITEM_TYPES), help="Item type")
@click.option("--name", required=True, help="Item name")
@click.option("--in", "quantity_in", help="Quantity received")
@click.option("--out", "quantity_out", help="Quantity used or sold")
@click.option("--unit", required=True, help="Unit of measure (e.g., kg, pcs)")
@click.option("--reference", help="Reference number (generated when omitted)")
@click.pass_context
def record_movement(
    ctx,
    move_date: str,
    item_type: str,
    name: str,
    quantity_in: str | None,
    quantity_out: str | None,
    unit: str,
    reference: str | None,
):
    """Record a stock movement.

    Examples:
        bookkeep inventory move --date today --type raw-material --name Flour --in 50 --unit kg
        bookkeep inventory move --date today --type finished-product --name Bread --out 20 --unit pcs
    """
    fields = {
        "date": parse_date_option(ctx, move_date),
        "type": item_type,
        "name": name,
        "quantityIn": parse_amount_option(ctx, quantity_in, "quantity in"),
        "quantityOut": parse_amount_option(ctx, quantity_out, "quantity out"),
        "unit": unit,
        "referenceNumber": reference,
    }
    service = InventoryService(ctx.obj["store"])

    record = run_or_exit(ctx, service.record_movement(fields))
    click.echo(f"Recorded movement {record['id']}: {name} {record['netChange']} {unit}")


@inventory_group.command("delete")
@click.argument("movement_id", type=int)
@click.pass_context
def delete_movement(ctx, movement_id: int):
    """Delete a stock movement and recompute stock levels."""
    service = InventoryService(ctx.obj["store"])

    run_or_exit(ctx, service.delete_movement(movement_id))
    click.echo(f"Deleted movement {movement_id}")


@inventory_group.command("stock")
@click.option("--type", "item_type", type=click.Choice(ITEM_TYPES), help="Show only this item type")
@click.pass_context
def show_stock(ctx, item_type: str | None):
    """Show current stock per item with its status against the minimum level."""
    service = InventoryService(ctx.obj["store"])

    items = run_or_exit(ctx, service.stock())
    if item_type:
        items = [item for item in items if item.item_type == item_type]

    if not items:
        click.echo("No inventory found.")
        return

    click.echo(f"{'Item':<24} {'Type':<18} {'Stock':>12} {'Minimum':>12}  Status")
    click.echo("-" * 78)
    for item in items:
        status = STATUS_LABELS[stock_status(item.current_stock, item.minimum_level)]
        stock = f"{item.current_stock} {item.unit}".strip()
        click.echo(
            f"{item.name:<24} {item.item_type:<18} {stock:>12} {str(item.minimum_level):>12}  {status}"
        )


@inventory_group.command("minimum")
@click.argument("name")
@click.option("--type", "item_type", required=True, type=click.Choice(ITEM_TYPES), help="Item type")
@click.option("--level", required=True, help="Minimum stock level")
@click.pass_context
def set_minimum(ctx, name: str, item_type: str, level: str):
    """Set the minimum stock level for an item."""
    minimum = parse_amount_option(ctx, level, "level")
    if minimum < ZERO:
        click.echo("Error: Minimum level cannot be negative", err=True)
        ctx.exit(1)
    service = InventoryService(ctx.obj["store"])

    item = run_or_exit(ctx, service.set_minimum_level(name, item_type, minimum))
    status = STATUS_LABELS[stock_status(item.current_stock, item.minimum_level)]
    click.echo(f"Minimum level for {name} ({item_type}) set to {minimum}; stock is {status}")


def register_commands(cli):
    """Register inventory commands with main CLI."""
    cli.add_command(inventory_group, name="inventory")
