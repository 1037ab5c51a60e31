"""Single cell edit commands."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit, year_option
from farmledger.domain.calculation import CalculationService
from farmledger.domain.entities import RecordType
from farmledger.domain.errors import DomainError
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.fiscal_year import CALENDAR_MONTHS
from farmledger.utils.money import format_money


@click.group()
def cell_group():
    """Edit budget cells."""
    pass


@cell_group.command("set")
@farm_option
@year_option()
@click.argument("month", type=click.Choice(CALENDAR_MONTHS))
@click.argument("code")
@click.argument("value")
@click.option("--accounting", is_flag=True, help="VALUE is in dollars rather than $/acre")
@click.option("--comment", help="Note to store with the per-acre cell")
@click.option("--allow-frozen", is_flag=True, help="Allow the edit while the budget is frozen")
@click.pass_context
def set_cell(
    ctx,
    farm: str,
    fiscal_year: int,
    month: str,
    code: str,
    value: str,
    accounting: bool,
    comment: str | None,
    allow_frozen: bool,
):
    """Set one leaf category value for a month.

    The other representation and all parent totals are recomputed.
    Months holding actuals cannot be edited, nor can a frozen budget
    unless --allow-frozen is given.

    Examples:
        farmledger cell set -f "North Farm" -y 2025 Mar input_seed 42.50
        farmledger cell set -f "North Farm" -y 2025 Mar input_seed 212500 --accounting
    """
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = CalculationService(ctx.obj["db"])
    record_type = RecordType.ACCOUNTING if accounting else RecordType.PER_UNIT

    if accounting and comment is not None:
        click.echo("Error: --comment only applies to per-acre cells.", err=True)
        ctx.exit(1)

    try:
        amount = parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid value: {e}", err=True)
        ctx.exit(1)

    try:
        service.check_cell_editable(farm_id, fiscal_year, month, record_type, block_frozen=not allow_frozen)
        if accounting:
            result = service.update_accounting_cell(farm_id, fiscal_year, month, code, amount)
        else:
            result = service.update_per_unit_cell(
                farm_id, fiscal_year, month, code, amount, comment=comment
            )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"{month} FY{fiscal_year} {code}: "
        f"{format_money(result['per_unit'][code])}/acre, {format_money(result['accounting'][code])}"
    )


def register_commands(cli):
    """Register cell commands with main CLI."""
    cli.add_command(cell_group, name="cell")
