"""Farm management commands."""

import click
from farmledger.cli.error_handling import handle_domain_error
from farmledger.domain.errors import DomainError
from farmledger.domain.farm import FarmService


@click.group()
def farm_group():
    """Manage farms."""
    pass


@farm_group.command("create")
@click.argument("name", metavar="FARM_NAME")
@click.pass_context
def create_farm(ctx, name: str):
    """Create a new farm.

    Examples:
        farmledger farm create "North Farm"
    """
    service = FarmService(ctx.obj["db"])

    try:
        farm_id = service.create_farm(name)
        click.echo(f"Created farm '{name.strip()}' (ID: {farm_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@farm_group.command("list")
@click.pass_context
def list_farms(ctx):
    """List all farms."""
    service = FarmService(ctx.obj["db"])

    farms = service.list_farms()
    if not farms:
        click.echo("No farms found.")
        return

    click.echo("\nFarms:")
    click.echo("-" * 40)
    for farm in farms:
        click.echo(f"ID: {farm.id:3d} | {farm.name}")


def register_commands(cli):
    """Register farm commands with main CLI."""
    cli.add_command(farm_group, name="farm")
