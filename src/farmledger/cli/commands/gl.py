"""GL account and GL actuals commands."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit, year_option
from farmledger.domain.assumption import AssumptionService
from farmledger.domain.errors import DomainError
from farmledger.domain.gl_account import GlAccountService
from farmledger.domain.gl_import import GlImportService
from farmledger.domain.gl_rollup import GlRollupService
from farmledger.utils.money import format_money


@click.group()
def gl_group():
    """Manage GL accounts and import GL actuals."""
    pass


@gl_group.command("accounts")
@farm_option
@year_option(required=False, help_text="Show year-to-date totals for this fiscal year")
@click.pass_context
def list_accounts(ctx, farm: str, fiscal_year: int | None):
    """List active GL accounts and their category mapping."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = GlAccountService(ctx.obj["db"])

    chart = service.chart_of_accounts(farm_id, fiscal_year)
    if not chart["gl_accounts"]:
        click.echo("No GL accounts found.")
        return

    click.echo("\nGL accounts:")
    click.echo("-" * 80)
    for entry in chart["gl_accounts"]:
        account = entry["account"]
        category = entry["category_code"] or "(unmapped)"
        line = f"{account.account_number:>8s} | {account.account_name:30s} | {category:20s}"
        if fiscal_year is not None:
            line += f" | {format_money(entry['ytd_total']):>14s}"
        click.echo(line)


@gl_group.command("add-account")
@farm_option
@click.argument("account_number")
@click.argument("account_name")
@click.option("--category", "category_code", help="Leaf category code to map the account to")
@click.pass_context
def add_account(ctx, farm: str, account_number: str, account_name: str, category_code: str | None):
    """Create or update a GL account."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = GlAccountService(ctx.obj["db"])

    try:
        account = service.add_account(farm_id, account_number, account_name, category_code)
        mapped = f" -> {category_code}" if category_code else ""
        click.echo(f"Saved GL account {account.account_number} '{account.account_name}'{mapped}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@gl_group.command("assign")
@farm_option
@click.argument("assignments", nargs=-1, required=True, metavar="ACCOUNT=CODE...")
@year_option(required=False, help_text="Re-run the rollup for this fiscal year")
@click.pass_context
def assign_accounts(ctx, farm: str, assignments: tuple[str, ...], fiscal_year: int | None):
    """Map GL accounts to leaf categories (ACCOUNT= with no code unmaps it).

    Examples:
        farmledger gl assign -f "North Farm" 5100=input_seed 4100=rev_canola -y 2025
    """
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = GlAccountService(ctx.obj["db"])

    pairs = []
    for item in assignments:
        number, sep, code = item.partition("=")
        if not sep or not number:
            click.echo(f"Error: Expected ACCOUNT=CODE, got '{item}'", err=True)
            ctx.exit(1)
        pairs.append((number.strip(), code.strip() or None))

    result = service.bulk_assign(farm_id, pairs, fiscal_year=fiscal_year)
    click.echo(f"Updated {result['updated']} GL account assignment(s).")
    for number, reason in result["skipped"]:
        click.echo(f"  Skipped {number}: {reason}")
    if result["rolled_up"]:
        click.echo(f"Rolled up FY{fiscal_year}.")


@gl_group.command("deactivate")
@farm_option
@click.argument("account_number")
@year_option(required=False, help_text="Re-run the rollup for this fiscal year")
@click.pass_context
def deactivate_account(ctx, farm: str, account_number: str, fiscal_year: int | None):
    """Deactivate a GL account so its amounts leave the rollup."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = GlAccountService(ctx.obj["db"])

    try:
        service.deactivate_account(farm_id, account_number, fiscal_year=fiscal_year)
        click.echo(f"Deactivated GL account {account_number}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@gl_group.command("import")
@farm_option
@year_option()
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_actuals(ctx, farm: str, fiscal_year: int, csv_file: str):
    """Import GL actual amounts from a CSV file and roll them up.

    The CSV needs account_number and amount columns and either a month
    (Jan..Dec) or a date column.
    """
    db = ctx.obj["db"]
    farm_id = resolve_farm_or_exit(ctx, farm)
    start_month = AssumptionService(db).get_start_month(farm_id, fiscal_year)
    service = GlImportService(db)

    try:
        result = service.import_csv(csv_file, farm_id, fiscal_year, start_month)
    except (ValueError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
        return

    click.echo(
        f"Imported {result['rows_written']} row(s) across {result['months_imported']} month(s)"
    )
    if result["rows_skipped"]:
        click.echo(
            f"Skipped {result['rows_skipped']} row(s) for unknown accounts: "
            f"{', '.join(result['skipped_accounts'])}"
        )
    if result["errors"]:
        click.echo(f"\n{len(result['errors'])} row(s) could not be read:", err=True)
        for error in result["errors"]:
            click.echo(f"  {error}", err=True)


@gl_group.command("rollup")
@farm_option
@year_option()
@click.pass_context
def rollup(ctx, farm: str, fiscal_year: int):
    """Re-run the GL rollup for every month of a fiscal year."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = GlRollupService(ctx.obj["db"])

    results = service.rollup_year(farm_id, fiscal_year)
    click.echo(f"Rolled up {len(results)} month(s) for FY{fiscal_year}.")


@gl_group.command("clear")
@farm_option
@year_option()
@click.confirmation_option(prompt="Delete all GL actuals and reset the year's monthly data?")
@click.pass_context
def clear_year(ctx, farm: str, fiscal_year: int):
    """Delete a year's GL actuals and reset its monthly data."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = GlRollupService(ctx.obj["db"])

    result = service.clear_year(farm_id, fiscal_year)
    click.echo(
        f"Cleared FY{fiscal_year}: {result['deleted_details']} GL detail(s) removed, "
        f"{result['reset_records']} monthly record(s) reset"
    )


def register_commands(cli):
    """Register GL commands with main CLI."""
    cli.add_command(gl_group, name="gl")
