"""Main CLI entry point."""

import logging

import click
from farmledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from farmledger.cli.commands import (
    farm,
    init_categories,
    category,
    assumption,
    cell,
    actuals,
    budget,
    gl,
    forecast,
    dashboard,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FARMLEDGER_DB_PATH environment variable)",
    envvar="FARMLEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Farmledger - Farm budgeting and forecasting.

    Plan a fiscal year per acre or in dollars, import GL actuals and
    compare the forecast against a frozen budget.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
farm.register_commands(cli)
init_categories.register_commands(cli)
category.register_commands(cli)
assumption.register_commands(cli)
cell.register_commands(cli)
actuals.register_commands(cli)
budget.register_commands(cli)
gl.register_commands(cli)
forecast.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
