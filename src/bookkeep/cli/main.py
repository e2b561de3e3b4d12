"""Main CLI entry point."""

import click

from bookkeep.database.factories import create_sqlite_store
from bookkeep.logging_config import configure_logging

# Import and register all commands at module level
from bookkeep.cli.commands import (
    record,
    inventory,
    statement,
    cash_flow,
    check,
    summary,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BOOKKEEP_DB_PATH environment variable)",
    envvar="BOOKKEEP_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="BOOKKEEP_LOG_LEVEL",
    help="Minimum level for log lines written to stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Bookkeep - small-business bookkeeping.

    Record sales, costs, payroll, capital and inventory, then derive the
    income statement, balance sheet and cash-flow statement from them.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open the record store only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None and "store" not in ctx.obj:
        store = create_sqlite_store(database_path=db_path)
        ctx.obj["store"] = store
        ctx.call_on_close(store.close)


# Register all commands
record.register_commands(cli)
inventory.register_commands(cli)
statement.register_commands(cli)
cash_flow.register_commands(cli)
check.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
