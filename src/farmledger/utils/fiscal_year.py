"""Fiscal year and fiscal month utilities.

A fiscal year is a run of 12 months beginning at a farm-configured start
month, named for the calendar year in which it ends. With the default
``Nov`` start, November 2024 through October 2025 is FY2025.
"""

from datetime import date
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

CALENDAR_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

DEFAULT_START_MONTH = "Nov"

MIN_FISCAL_YEAR = 2000
MAX_FISCAL_YEAR = 2100


def is_valid_month(month: Any) -> bool:
    """Check for an exact three-letter month name (e.g. ``"Jan"``)."""
    return isinstance(month, str) and month in CALENDAR_MONTHS


def generate_fiscal_months(start_month: str = DEFAULT_START_MONTH) -> list[str]:
    """Return the 12 month names of a fiscal year in fiscal order.

    Raises:
        ValueError: If start_month is not a valid month name
    """
    if not is_valid_month(start_month):
        raise ValueError(f"Invalid start month '{start_month}'")
    start = CALENDAR_MONTHS.index(start_month)
    return [CALENDAR_MONTHS[(start + i) % 12] for i in range(12)]


def end_month_for(start_month: str = DEFAULT_START_MONTH) -> str:
    """Return the last month of a fiscal year with the given start."""
    return generate_fiscal_months(start_month)[-1]


def fiscal_month_index(month: str, start_month: str = DEFAULT_START_MONTH) -> int:
    """Return the 0-based position of ``month`` in the fiscal year, or -1."""
    if not is_valid_month(month) or not is_valid_month(start_month):
        return -1
    return generate_fiscal_months(start_month).index(month)


def calendar_to_fiscal(day: date, start_month: str = DEFAULT_START_MONTH) -> tuple[int, str]:
    """Map a calendar date to ``(fiscal_year, month_name)``."""
    start = CALENDAR_MONTHS.index(start_month) + 1
    month_name = CALENDAR_MONTHS[day.month - 1]
    if start == 1 or day.month < start:
        return day.year, month_name
    return day.year + 1, month_name


def fiscal_to_calendar(fiscal_year: int, month: str, start_month: str = DEFAULT_START_MONTH) -> date:
    """Return the first calendar day of a fiscal month."""
    index = fiscal_month_index(month, start_month)
    if index < 0:
        raise ValueError(f"Invalid month '{month}'")
    first_day = date(fiscal_year, CALENDAR_MONTHS.index(start_month) + 1, 1)
    if start_month != "Jan":
        first_day -= relativedelta(years=1)
    return first_day + relativedelta(months=index)


def parse_year(value: Any) -> Optional[int]:
    """Parse a fiscal year, returning None when invalid or out of range."""
    if value is None or isinstance(value, bool):
        return None
    try:
        year = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    if year < MIN_FISCAL_YEAR or year > MAX_FISCAL_YEAR:
        return None
    return year
