"""Year dashboard: key figures derived from the forecast report."""

import logging
from typing import Any, Mapping

from farmledger.database.base import Database
from farmledger.domain.entities import (
    EXPENSE_CATEGORY_TYPES,
    BudgetComparison,
    CropYield,
    Dashboard,
    RecordType,
)
from farmledger.domain.forecast import ForecastService
from farmledger.utils.money import round_money

logger = logging.getLogger(__name__)

INPUTS_CODE = "inputs"
LABOUR_CODE = "lpm_personnel"


def inputs_adherence(actual: float, frozen: float) -> float:
    """Return how closely actual inputs track the frozen budget, capped at 100%.

    A year without a frozen inputs budget scores 0.
    """
    if frozen <= 0:
        return 0.0
    return min(100.0, (1 - abs(actual - frozen) / frozen) * 100)


def _number(crop: Mapping[str, Any], key: str) -> float:
    return float(crop.get(key) or 0)


def crop_yield(crop: Mapping[str, Any]) -> CropYield:
    """Compare a crop's actual yield with its target."""
    target = _number(crop, "target_yield")
    actual = _number(crop, "actual_yield")
    return CropYield(
        name=crop.get("name", ""),
        acres=_number(crop, "acres"),
        target_yield=target,
        actual_yield=round_money(actual),
        actual_acres=_number(crop, "actual_acres"),
        actual_price=_number(crop, "actual_price"),
        yield_pct=round_money(actual / target * 100) if target > 0 else 0.0,
    )


def revenue_yield_pct(crops) -> float:
    """Return actual crop revenue as a percentage of target crop revenue."""
    target = sum(
        _number(crop, "acres") * _number(crop, "target_yield") * _number(crop, "price_per_unit")
        for crop in crops
    )
    actual = sum(
        _number(crop, "actual_acres") * _number(crop, "actual_yield") * _number(crop, "actual_price")
        for crop in crops
    )
    if target <= 0:
        return 0.0
    return actual / target * 100


class DashboardService:
    """Builds the key figures of a fiscal year."""

    def __init__(self, db: Database):
        """Initialize dashboard service.

        Args:
            db: Database instance
        """
        self.db = db
        self.forecast_service = ForecastService(db)

    def _frozen_total(self, farm_id: int, fiscal_year: int, code: str) -> float:
        records = self.db.list_frozen_records(farm_id, fiscal_year, RecordType.ACCOUNTING)
        return sum(record.data.get(code) or 0 for record in records)

    def build_dashboard(self, farm_id: int, fiscal_year: int) -> Dashboard:
        """Derive the dashboard of a fiscal year from its accounting records.

        Totals are the twelve-month forecast totals of the report. Inputs
        adherence compares them with the stored snapshot even after the
        budget has been unfrozen. Per-acre figures divide by one when the
        year has no acreage.

        Args:
            farm_id: Farm ID
            fiscal_year: Fiscal year

        Returns:
            Dashboard with rounded figures
        """
        report = self.forecast_service.build_report(farm_id, fiscal_year, RecordType.ACCOUNTING)
        assumption = self.db.get_assumption(farm_id, fiscal_year)
        crops = assumption.crops if assumption else ()
        acres = report.total_acres or 1

        forecast_totals = {row.code: row.forecast_total for row in report.rows if not row.is_computed}
        expense_roots = [
            row
            for row in report.rows
            if not row.is_computed
            and row.parent_code is None
            and row.category_type in EXPENSE_CATEGORY_TYPES
        ]

        total_expense = sum(row.forecast_total for row in expense_roots)
        inputs_total = forecast_totals.get(INPUTS_CODE, 0.0)
        frozen_inputs = self._frozen_total(farm_id, fiscal_year, INPUTS_CODE)
        labour = forecast_totals.get(LABOUR_CODE, 0.0)

        logger.debug("Built dashboard for farm=%s FY%s", farm_id, fiscal_year)
        return Dashboard(
            farm_id=farm_id,
            fiscal_year=fiscal_year,
            total_expense=round_money(total_expense),
            expense_per_acre=round_money(total_expense / acres),
            inputs_total=round_money(inputs_total),
            inputs_adherence=round_money(inputs_adherence(inputs_total, frozen_inputs)),
            labour_cost_per_acre=round_money(labour / acres),
            yield_pct=round_money(revenue_yield_pct(crops)),
            budget_vs_forecast=tuple(
                BudgetComparison(
                    code=row.code,
                    display_name=row.display_name,
                    budget=row.frozen_budget_total,
                    forecast=row.forecast_total,
                )
                for row in expense_roots
            ),
            crop_yields=tuple(crop_yield(crop) for crop in crops),
        )
