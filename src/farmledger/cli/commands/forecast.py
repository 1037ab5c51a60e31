"""Forecast / variance report command."""

import click
from farmledger.cli.farm_resolution import farm_option, resolve_farm_or_exit, year_option
from farmledger.domain.entities import RecordType
from farmledger.domain.forecast import ForecastService
from farmledger.utils.money import format_money

INDENT_SIZE = 2


@click.command("forecast")
@farm_option
@year_option()
@click.option(
    "--type",
    "record_type",
    type=click.Choice([t.value for t in RecordType]),
    default=RecordType.ACCOUNTING.value,
    show_default=True,
    help="Show dollars or $/acre",
)
@click.option("--months", "show_months", is_flag=True, help="Show every fiscal month")
@click.pass_context
def forecast(ctx, farm: str, fiscal_year: int, record_type: str, show_months: bool):
    """Show forecast, frozen budget and variance per category."""
    farm_id = resolve_farm_or_exit(ctx, farm)
    service = ForecastService(ctx.obj["db"])

    report = service.build_report(farm_id, fiscal_year, RecordType(record_type))
    if not report.rows:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    status = "frozen" if report.is_frozen else "not frozen"
    click.echo(f"\nFY{report.fiscal_year} {record_type} ({report.total_acres:,.0f} acres, budget {status})")

    header = f"{'Category':<32s} {'Prior year':>14s} {'Forecast':>14s} {'Budget':>14s} {'Variance':>14s} {'%':>8s}"
    if show_months:
        header += "".join(f" {month:>12s}" for month in report.months)
    click.echo(header)
    click.echo("-" * len(header))

    for row in report.rows:
        if row.is_computed:
            name = row.display_name
        else:
            name = " " * (INDENT_SIZE * row.level) + row.display_name
        line = (
            f"{name[:32]:<32s} {format_money(row.prior_year):>14s} {format_money(row.forecast_total):>14s} "
            f"{format_money(row.frozen_budget_total):>14s} {format_money(row.variance):>14s} "
            f"{row.pct_diff:>7.1f}%"
        )
        if show_months:
            line += "".join(f" {format_money(row.months[month]):>12s}" for month in report.months)
        click.echo(line)


def register_commands(cli):
    """Register forecast command with main CLI."""
    cli.add_command(forecast)
