"""Assumption commands."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit, year_option
from farmledger.domain.assumption import AssumptionService
from farmledger.domain.errors import DomainError
from farmledger.utils.fiscal_year import CALENDAR_MONTHS, DEFAULT_START_MONTH, end_month_for


def _parse_crop(value: str) -> dict:
    """Parse ``NAME=ACRES`` into a crop dict."""
    name, sep, acres = value.rpartition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected NAME=ACRES, got '{value}'", param_hint="--crop")
    try:
        return {"name": name.strip(), "acres": float(acres)}
    except ValueError:
        raise click.BadParameter(f"invalid acres in '{value}'", param_hint="--crop")


@click.group()
def assumption_group():
    """Manage per-year assumptions (acres, crops, fiscal start)."""
    pass


@assumption_group.command("set")
@farm_option
@year_option()
@click.option("--acres", type=float, required=True, help="Total farmed acres")
@click.option("--crop", "crops", multiple=True, help="Crop as NAME=ACRES (repeatable)")
@click.option(
    "--start-month",
    type=click.Choice(CALENDAR_MONTHS),
    default=DEFAULT_START_MONTH,
    show_default=True,
    help="First month of the fiscal year",
)
@click.pass_context
def set_assumption(ctx, farm: str, fiscal_year: int, acres: float, crops: tuple[str, ...], start_month: str):
    """Create or update a year's assumptions.

    Changing the acres of an existing year recomputes the accounting
    values from the per-acre values.

    Examples:
        farmledger assumption set -f "North Farm" -y 2025 --acres 5000 --crop Canola=2500 --crop Durum=2000
    """
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = AssumptionService(ctx.obj["db"])
    crop_list = [_parse_crop(value) for value in crops]

    try:
        assumption = service.save_assumption(
            farm_id, fiscal_year, acres, crops=crop_list, start_month=start_month
        )
        click.echo(
            f"Saved assumptions for FY{assumption.fiscal_year}: "
            f"{assumption.total_acres:,.0f} acres, {len(assumption.crops)} crop(s)"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@assumption_group.command("show")
@farm_option
@year_option()
@click.pass_context
def show_assumption(ctx, farm: str, fiscal_year: int):
    """Show a year's assumptions."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = AssumptionService(ctx.obj["db"])

    try:
        assumption = service.get_assumption(farm_id, fiscal_year)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nFY{assumption.fiscal_year}")
    click.echo("-" * 40)
    click.echo(f"Fiscal months: {assumption.start_month} - {end_month_for(assumption.start_month)}")
    click.echo(f"Total acres:   {assumption.total_acres:,.2f}")
    if assumption.is_frozen:
        click.echo(f"Budget:        frozen {assumption.frozen_at:%Y-%m-%d %H:%M}")
    else:
        click.echo("Budget:        not frozen")
    for crop in assumption.crops:
        click.echo(f"  {crop['name']:<20s} {crop.get('acres', 0):>10,.2f} acres")


def register_commands(cli):
    """Register assumption commands with main CLI."""
    cli.add_command(assumption_group, name="assumption")
