"""CLI helpers for farm and fiscal year options."""

from __future__ import annotations

import click
from farmledger.domain.errors import FarmNotFoundError
from farmledger.domain.farm import FarmService
from farmledger.utils.farm_resolver import resolve_farm
from farmledger.utils.fiscal_year import MAX_FISCAL_YEAR, MIN_FISCAL_YEAR, parse_year


def resolve_farm_or_exit(ctx: click.Context, farm: str | int) -> int:
    """Resolve farm name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_farm(FarmService(ctx.obj["db"]), farm)
    except FarmNotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def _validate_year(ctx, param, value):
    if value is None:
        return None
    year = parse_year(value)
    if year is None:
        raise click.BadParameter(
            f"must be a year between {MIN_FISCAL_YEAR} and {MAX_FISCAL_YEAR}"
        )
    return year


def farm_option(f):
    """Add the required ``--farm`` option (name or ID)."""
    return click.option(
        "--farm",
        "-f",
        required=True,
        envvar="FARMLEDGER_FARM",
        help="Farm name or ID (or set FARMLEDGER_FARM)",
    )(f)


def year_option(required: bool = True, help_text: str = "Fiscal year (e.g. 2025)"):
    """Add a ``--year`` option validated as a fiscal year."""
    return click.option(
        "--year",
        "-y",
        "fiscal_year",
        required=required,
        callback=_validate_year,
        help=help_text,
    )
