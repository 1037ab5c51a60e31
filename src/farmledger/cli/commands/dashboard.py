"""Year dashboard command."""

import click
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit, year_option
from farmledger.domain.dashboard import DashboardService
from farmledger.utils.money import format_money


@click.command("dashboard")
@farm_option
@year_option()
@click.pass_context
def dashboard(ctx, farm: str, fiscal_year: int):
    """Show the key figures of a fiscal year."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    result = DashboardService(ctx.obj["db"]).build_dashboard(farm_id, fiscal_year)

    click.echo(f"\nFY{result.fiscal_year} dashboard")
    click.echo(f"  Yield vs target:     {result.yield_pct:>10.1f}%")
    click.echo(f"  Inputs adherence:    {result.inputs_adherence:>10.1f}%")
    click.echo(f"  Total expense/acre:  {format_money(result.expense_per_acre):>14s}")
    click.echo(f"  Labour cost/acre:    {format_money(result.labour_cost_per_acre):>14s}")
    click.echo(f"  Total expenses:      {format_money(result.total_expense):>14s}")
    click.echo(f"  Inputs total:        {format_money(result.inputs_total):>14s}")

    if result.budget_vs_forecast:
        click.echo(f"\n{'Category':<32s} {'Budget':>14s} {'Forecast':>14s}")
        for item in result.budget_vs_forecast:
            click.echo(
                f"{item.display_name[:32]:<32s} {format_money(item.budget):>14s} "
                f"{format_money(item.forecast):>14s}"
            )

    if result.crop_yields:
        click.echo(f"\n{'Crop':<20s} {'Acres':>10s} {'Target':>10s} {'Actual':>10s} {'%':>8s}")
        for crop in result.crop_yields:
            click.echo(
                f"{crop.name[:20]:<20s} {crop.acres:>10,.0f} {crop.target_yield:>10.1f} "
                f"{crop.actual_yield:>10.1f} {crop.yield_pct:>7.1f}%"
            )


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
