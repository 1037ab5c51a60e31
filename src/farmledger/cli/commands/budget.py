"""Budget freeze commands."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit, year_option
from farmledger.domain.assumption import AssumptionService
from farmledger.domain.errors import DomainError


@click.group()
def budget_group():
    """Freeze or unfreeze a year's budget."""
    pass


@budget_group.command("freeze")
@farm_option
@year_option()
@click.pass_context
def freeze_budget(ctx, farm: str, fiscal_year: int):
    """Snapshot the current budget as the comparison baseline."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = AssumptionService(ctx.obj["db"])

    try:
        copied = service.freeze(farm_id, fiscal_year)
        click.echo(f"Budget for FY{fiscal_year} frozen ({copied} records).")
    except DomainError as e:
        handle_domain_error(ctx, e)


@budget_group.command("unfreeze")
@farm_option
@year_option()
@click.pass_context
def unfreeze_budget(ctx, farm: str, fiscal_year: int):
    """Lift the freeze; the snapshot is kept for comparison."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = AssumptionService(ctx.obj["db"])

    try:
        service.unfreeze(farm_id, fiscal_year)
        click.echo(f"Budget for FY{fiscal_year} unfrozen.")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
