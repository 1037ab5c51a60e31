"""Manual actuals entry commands."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit, year_option
from farmledger.domain.calculation import CalculationService
from farmledger.domain.errors import DomainError
from farmledger.utils.amount_parser import parse_amount
from farmledger.utils.fiscal_year import CALENDAR_MONTHS
from farmledger.utils.money import format_money


@click.group()
def actuals_group():
    """Enter actual amounts."""
    pass


@actuals_group.command("enter")
@farm_option
@year_option()
@click.argument("month", type=click.Choice(CALENDAR_MONTHS))
@click.argument("amounts", nargs=-1, required=True, metavar="CODE=AMOUNT...")
@click.pass_context
def enter_actuals(ctx, farm: str, fiscal_year: int, month: str, amounts: tuple[str, ...]):
    """Record actual dollar amounts for a month and lock it.

    Examples:
        farmledger actuals enter -f "North Farm" -y 2025 Dec input_fert=182000 lpm_fog=21500.75
    """
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = CalculationService(ctx.obj["db"])

    data = {}
    for item in amounts:
        code, sep, raw = item.partition("=")
        if not sep or not code:
            click.echo(f"Error: Expected CODE=AMOUNT, got '{item}'", err=True)
            ctx.exit(1)
        try:
            data[code.strip()] = parse_amount(raw)
        except ValueError as e:
            click.echo(f"Error: Invalid amount for '{code}': {e}", err=True)
            ctx.exit(1)

    try:
        result = service.save_manual_actuals(farm_id, fiscal_year, month, data)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Saved {len(data)} actual amount(s) for {month} FY{fiscal_year}:")
    for code in data:
        click.echo(f"  {code:<25s} {format_money(result['accounting'][code]):>15s}")


def register_commands(cli):
    """Register actuals commands with main CLI."""
    cli.add_command(actuals_group, name="actuals")
