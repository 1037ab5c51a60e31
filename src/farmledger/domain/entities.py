"""Domain model entities for farmledger.

These are pure data classes representing business concepts, independent of
database schema. Monthly values are plain floats keyed by category code so
that the ledger engine can merge and recalculate them in memory before a
record is written back wholesale.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class CategoryType(str, Enum):
    """Financial category types."""

    REVENUE = "REVENUE"
    INPUT = "INPUT"
    LPM = "LPM"
    LBF = "LBF"
    INSURANCE = "INSURANCE"
    COMPUTED = "COMPUTED"


EXPENSE_CATEGORY_TYPES = frozenset(
    {CategoryType.INPUT, CategoryType.LPM, CategoryType.LBF, CategoryType.INSURANCE}
)


class RecordType(str, Enum):
    """The two parallel value representations of a month."""

    PER_UNIT = "per_unit"
    ACCOUNTING = "accounting"


@dataclass(frozen=True)
class Farm:
    """Farm (tenant) domain entity."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity with hierarchical structure."""

    id: int
    farm_id: int
    code: str
    display_name: str
    parent_id: Optional[int]
    path: str
    level: int
    sort_order: int
    category_type: CategoryType
    is_active: bool = True


@dataclass(frozen=True)
class CategoryTreeNode:
    """Category tree node for hierarchical display."""

    id: int
    code: str
    display_name: str
    parent_id: Optional[int]
    level: int
    category_type: CategoryType
    children: tuple["CategoryTreeNode", ...] = ()


@dataclass(frozen=True)
class Assumption:
    """Per farm and fiscal year planning assumptions."""

    id: int
    farm_id: int
    fiscal_year: int
    total_acres: float
    crops: tuple[dict[str, Any], ...]
    start_month: str
    is_frozen: bool
    frozen_at: Optional[datetime]


@dataclass(frozen=True)
class MonthlyRecord:
    """One month of category values in one representation."""

    farm_id: int
    fiscal_year: int
    month: str
    record_type: RecordType
    data: dict[str, float] = field(default_factory=dict)
    is_actual: bool = False
    comments: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GlAccount:
    """General ledger account, optionally mapped to one leaf category."""

    id: int
    farm_id: int
    account_number: str
    account_name: str
    category_id: Optional[int]
    is_active: bool = True


@dataclass(frozen=True)
class GlActualDetail:
    """Raw actual amount for one GL account in one fiscal month."""

    farm_id: int
    fiscal_year: int
    month: str
    gl_account_id: int
    amount: float
    category_code: Optional[str] = None


@dataclass(frozen=True)
class GlActualRow:
    """An incoming actual amount addressed by account number."""

    account_number: str
    month: str
    amount: float


@dataclass(frozen=True)
class ForecastRow:
    """One category row of a forecast/variance report."""

    code: str
    display_name: str
    level: int
    parent_code: Optional[str]
    category_type: CategoryType
    months: dict[str, float]
    actuals: dict[str, bool]
    comments: dict[str, str]
    prior_year: float
    forecast_total: float
    frozen_budget_total: float
    variance: float
    pct_diff: float
    is_computed: bool = False


@dataclass(frozen=True)
class ForecastReport:
    """Forecast/variance view of a fiscal year in one representation."""

    farm_id: int
    fiscal_year: int
    record_type: RecordType
    start_month: str
    months: tuple[str, ...]
    total_acres: float
    is_frozen: bool
    rows: tuple[ForecastRow, ...]
    summary: dict[str, dict[str, float]]


@dataclass(frozen=True)
class BudgetComparison:
    """Frozen budget against forecast for one expense root."""

    code: str
    display_name: str
    budget: float
    forecast: float


@dataclass(frozen=True)
class CropYield:
    """Actual yield of one crop against its target."""

    name: str
    acres: float
    target_yield: float
    actual_yield: float
    actual_acres: float
    actual_price: float
    yield_pct: float


@dataclass(frozen=True)
class Dashboard:
    """Key figures of a fiscal year."""

    farm_id: int
    fiscal_year: int
    total_expense: float
    expense_per_acre: float
    inputs_total: float
    inputs_adherence: float
    labour_cost_per_acre: float
    yield_pct: float
    budget_vs_forecast: tuple[BudgetComparison, ...]
    crop_yields: tuple[CropYield, ...]
