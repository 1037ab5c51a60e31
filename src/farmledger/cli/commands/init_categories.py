"""Initialize the default chart of accounts."""

import click
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit
from farmledger.domain.category import CategoryService


@click.command("init-categories")
@farm_option
@click.option(
    "--crop",
    "crops",
    multiple=True,
    help="Crop to add a revenue category for (repeatable; defaults to the latest assumptions' crops)",
)
@click.pass_context
def init_categories(ctx, farm: str, crops: tuple[str, ...]):
    """Create the default category tree and GL accounts for a farm.

    Categories and GL accounts that already exist are left untouched.

    Examples:
        farmledger init-categories --farm "North Farm" --crop Canola --crop Durum
    """
    db = ctx.obj["db"]
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = CategoryService(db)

    if crops:
        crop_list = [{"name": name} for name in crops]
    else:
        latest = db.get_latest_assumption(farm_id)
        crop_list = list(latest.crops) if latest else []

    click.echo("Creating default category tree...")
    result = service.init_farm_categories(farm_id, crop_list)
    click.echo(
        f"Created {result['categories']} categories and {result['gl_accounts']} GL accounts."
    )


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
