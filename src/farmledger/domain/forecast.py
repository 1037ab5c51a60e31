"""Forecast / variance report over a fiscal year."""

from collections import defaultdict
from typing import Iterable, Mapping

from farmledger.database.base import Database
from farmledger.domain.category import CategoryService
from farmledger.domain.entities import (
    EXPENSE_CATEGORY_TYPES,
    CategoryType,
    ForecastReport,
    ForecastRow,
    MonthlyRecord,
    RecordType,
)
from farmledger.utils.fiscal_year import DEFAULT_START_MONTH, generate_fiscal_months
from farmledger.utils.money import round_money

TOTAL_EXPENSE_CODE = "_total_expense"
PROFIT_CODE = "_profit"
COMPUTED_LEVEL = -1


def pct_diff(variance: float, budget: float) -> float:
    """Return variance as a percentage of the budget, or 0 for a zero budget."""
    if budget == 0:
        return 0.0
    return variance / abs(budget) * 100


def _month_maps(records: Iterable[MonthlyRecord]) -> dict[str, MonthlyRecord]:
    return {record.month: record for record in records}


class ForecastService:
    """Builds forecast, frozen budget and variance figures per category."""

    def __init__(self, db: Database):
        """Initialize forecast service.

        Args:
            db: Database instance
        """
        self.db = db
        self.category_service = CategoryService(db)

    def _prior_year_totals(self, farm_id: int, fiscal_year: int, record_type: RecordType) -> dict[str, float]:
        totals: dict[str, float] = defaultdict(float)
        for record in self.db.list_monthly_records(farm_id, fiscal_year - 1, record_type):
            for code, value in record.data.items():
                totals[code] += value or 0
        return totals

    def build_report(
        self, farm_id: int, fiscal_year: int, record_type: RecordType = RecordType.ACCOUNTING
    ) -> ForecastReport:
        """Build the forecast/variance report of a fiscal year.

        The forecast total of a category is the sum of its twelve current
        monthly values. Its budget total is the sum of the frozen snapshot
        while the year is frozen and the forecast total otherwise, so the
        variance is zero until a budget is frozen.

        Args:
            farm_id: Farm ID
            fiscal_year: Fiscal year
            record_type: Representation to report on

        Returns:
            ForecastReport with one row per active category, followed by the
            ``_total_expense`` and ``_profit`` rows when the farm has both a
            revenue root and an expense root
        """
        record_type = RecordType(record_type)
        assumption = self.db.get_assumption(farm_id, fiscal_year)
        start_month = assumption.start_month if assumption else DEFAULT_START_MONTH
        total_acres = assumption.total_acres if assumption else 0.0
        is_frozen = assumption.is_frozen if assumption else False
        months = generate_fiscal_months(start_month)

        categories = self.category_service.get_categories(farm_id)
        codes_by_id = {cat.id: cat.code for cat in categories}
        current = _month_maps(self.db.list_monthly_records(farm_id, fiscal_year, record_type))
        frozen = _month_maps(self.db.list_frozen_records(farm_id, fiscal_year, record_type))
        prior_year = self._prior_year_totals(farm_id, fiscal_year, record_type)

        def value_at(records: Mapping[str, MonthlyRecord], month: str, code: str) -> float:
            record = records.get(month)
            return (record.data.get(code) or 0) if record else 0

        actuals = {month: bool(current[month].is_actual) if month in current else False for month in months}

        rows: list[ForecastRow] = []
        raw_months: dict[str, dict[str, float]] = {}
        raw_totals: dict[str, tuple[float, float]] = {}
        for cat in categories:
            month_values = {month: value_at(current, month, cat.code) for month in months}
            forecast_total = sum(month_values.values())
            frozen_total = sum(value_at(frozen, month, cat.code) for month in months)
            budget_total = frozen_total if is_frozen else forecast_total
            variance = forecast_total - budget_total

            comments = {}
            if record_type == RecordType.PER_UNIT:
                for month in months:
                    comment = current[month].comments.get(cat.code) if month in current else None
                    if comment:
                        comments[month] = comment

            raw_months[cat.code] = month_values
            raw_totals[cat.code] = (forecast_total, budget_total)
            rows.append(
                ForecastRow(
                    code=cat.code,
                    display_name=cat.display_name,
                    level=cat.level,
                    parent_code=codes_by_id.get(cat.parent_id),
                    category_type=cat.category_type,
                    months={month: round_money(value) for month, value in month_values.items()},
                    actuals=dict(actuals),
                    comments=comments,
                    prior_year=round_money(prior_year.get(cat.code, 0)),
                    forecast_total=round_money(forecast_total),
                    frozen_budget_total=round_money(budget_total),
                    variance=round_money(variance),
                    pct_diff=round_money(pct_diff(variance, budget_total)),
                )
            )

        roots = [cat for cat in categories if cat.parent_id is None]
        revenue_codes = [cat.code for cat in roots if cat.category_type == CategoryType.REVENUE]
        expense_codes = [cat.code for cat in roots if cat.category_type in EXPENSE_CATEGORY_TYPES]

        def combine(codes: list[str], month: str) -> float:
            return sum(raw_months[code][month] for code in codes)

        summary = {}
        for month in months:
            revenue = combine(revenue_codes, month)
            total_expense = combine(expense_codes, month)
            summary[month] = {
                "revenue": round_money(revenue),
                "total_expense": round_money(total_expense),
                "profit": round_money(revenue - total_expense),
            }

        if revenue_codes and expense_codes:
            expense_months = {month: combine(expense_codes, month) for month in months}
            profit_months = {month: combine(revenue_codes, month) - expense_months[month] for month in months}

            expense_forecast = sum(raw_totals[code][0] for code in expense_codes)
            expense_budget = sum(raw_totals[code][1] for code in expense_codes)
            revenue_forecast = sum(raw_totals[code][0] for code in revenue_codes)
            revenue_budget = sum(raw_totals[code][1] for code in revenue_codes)
            expense_prior = sum(prior_year.get(code, 0) for code in expense_codes)
            revenue_prior = sum(prior_year.get(code, 0) for code in revenue_codes)

            rows.append(
                self._computed_row(
                    TOTAL_EXPENSE_CODE, "Total Expense", expense_months, actuals,
                    expense_prior, expense_forecast, expense_budget,
                )
            )
            rows.append(
                self._computed_row(
                    PROFIT_CODE, "Profit", profit_months, actuals,
                    revenue_prior - expense_prior,
                    revenue_forecast - expense_forecast,
                    revenue_budget - expense_budget,
                )
            )

        return ForecastReport(
            farm_id=farm_id,
            fiscal_year=fiscal_year,
            record_type=record_type,
            start_month=start_month,
            months=tuple(months),
            total_acres=total_acres,
            is_frozen=is_frozen,
            rows=tuple(rows),
            summary=summary,
        )

    @staticmethod
    def _computed_row(
        code: str,
        display_name: str,
        months: Mapping[str, float],
        actuals: Mapping[str, bool],
        prior: float,
        forecast_total: float,
        budget_total: float,
    ) -> ForecastRow:
        variance = forecast_total - budget_total
        return ForecastRow(
            code=code,
            display_name=display_name,
            level=COMPUTED_LEVEL,
            parent_code=None,
            category_type=CategoryType.COMPUTED,
            months={month: round_money(value) for month, value in months.items()},
            actuals=dict(actuals),
            comments={},
            prior_year=round_money(prior),
            forecast_total=round_money(forecast_total),
            frozen_budget_total=round_money(budget_total),
            variance=round_money(variance),
            pct_diff=round_money(pct_diff(variance, budget_total)),
            is_computed=True,
        )
