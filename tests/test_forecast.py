"""Tests for the forecast / variance report."""

import pytest
from farmledger.domain.entities import CategoryType, RecordType
from farmledger.domain.forecast import PROFIT_CODE, TOTAL_EXPENSE_CODE, pct_diff

FISCAL_YEAR = 2025


def rows_by_code(report):
    return {row.code: row for row in report.rows}


def test_pct_diff():
    """Test percentage difference against the budget."""
    assert pct_diff(10, 50) == 20
    assert pct_diff(-10, 50) == -20
    assert pct_diff(10, -50) == 20
    assert pct_diff(10, 0) == 0


def test_report_layout(seeded_farm, forecast_service):
    """Test one row per category plus the two computed rows."""
    report = forecast_service.build_report(seeded_farm.id, FISCAL_YEAR)

    assert report.months[0] == "Nov"
    assert report.total_acres == 5000
    assert report.record_type == RecordType.ACCOUNTING
    assert len(report.rows) == 18 + 2
    assert report.rows[-2].code == TOTAL_EXPENSE_CODE
    assert report.rows[-1].code == PROFIT_CODE
    assert report.rows[-1].is_computed
    assert report.rows[-1].category_type == CategoryType.COMPUTED


def test_variance_is_zero_before_freeze(seeded_farm, calculation_service, forecast_service):
    """Test the budget equals the forecast while unfrozen."""
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 10)
    row = rows_by_code(forecast_service.build_report(seeded_farm.id, FISCAL_YEAR))["input_seed"]

    assert row.forecast_total == 50000
    assert row.frozen_budget_total == 50000
    assert row.variance == 0
    assert row.pct_diff == 0


def test_variance_after_freeze(seeded_farm, calculation_service, assumption_service, forecast_service):
    """Test forecast minus frozen budget once the year is frozen."""
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 10)
    assumption_service.freeze(seeded_farm.id, FISCAL_YEAR)
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 12)

    report = forecast_service.build_report(seeded_farm.id, FISCAL_YEAR)
    row = rows_by_code(report)["input_seed"]
    assert report.is_frozen
    assert row.forecast_total == 60000
    assert row.frozen_budget_total == 50000
    assert row.variance == 10000
    assert row.pct_diff == 20

    per_unit_row = rows_by_code(
        forecast_service.build_report(seeded_farm.id, FISCAL_YEAR, RecordType.PER_UNIT)
    )["input_seed"]
    assert per_unit_row.variance == 2


def test_new_spending_has_zero_pct_diff(seeded_farm, calculation_service, assumption_service, forecast_service):
    """Test a category with no budget reports 0%."""
    assumption_service.freeze(seeded_farm.id, FISCAL_YEAR)
    calculation_service.update_accounting_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "lpm_shop", 500)

    row = rows_by_code(forecast_service.build_report(seeded_farm.id, FISCAL_YEAR))["lpm_shop"]
    assert row.variance == 500
    assert row.pct_diff == 0


def test_total_expense_and_profit(seeded_farm, calculation_service, forecast_service):
    """Test computed rows combine the revenue and expense roots."""
    calculation_service.update_accounting_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "rev_canola", 100000)
    calculation_service.update_accounting_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 30000)
    calculation_service.update_accounting_cell(seeded_farm.id, FISCAL_YEAR, "Dec", "lbf_rent_interest", 20000)

    report = forecast_service.build_report(seeded_farm.id, FISCAL_YEAR)
    rows = rows_by_code(report)

    assert rows[TOTAL_EXPENSE_CODE].months["Nov"] == 30000
    assert rows[TOTAL_EXPENSE_CODE].months["Dec"] == 20000
    assert rows[TOTAL_EXPENSE_CODE].forecast_total == 50000
    assert rows[PROFIT_CODE].months["Nov"] == 70000
    assert rows[PROFIT_CODE].months["Dec"] == -20000
    assert rows[PROFIT_CODE].forecast_total == 50000
    assert report.summary["Nov"] == {"revenue": 100000, "total_expense": 30000, "profit": 70000}


def test_prior_year_totals(seeded_farm, calculation_service, forecast_service):
    """Test last year's totals sit beside this year's."""
    calculation_service.save_manual_actuals(seeded_farm.id, FISCAL_YEAR - 1, "Mar", {"input_seed": 3000})
    calculation_service.save_manual_actuals(seeded_farm.id, FISCAL_YEAR - 1, "Apr", {"input_seed": 500})

    row = rows_by_code(forecast_service.build_report(seeded_farm.id, FISCAL_YEAR))["input_seed"]
    assert row.prior_year == 3500
    assert row.forecast_total == 0


def test_totals_are_rounded(seeded_farm, calculation_service, forecast_service):
    """Test float drift does not reach the report."""
    calculation_service.update_accounting_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 0.1)
    calculation_service.update_accounting_cell(seeded_farm.id, FISCAL_YEAR, "Dec", "input_seed", 0.2)

    row = rows_by_code(forecast_service.build_report(seeded_farm.id, FISCAL_YEAR))["input_seed"]
    assert row.forecast_total == 0.3


def test_actual_flags_and_comments(seeded_farm, calculation_service, forecast_service):
    """Test actual months and cell comments are reported."""
    calculation_service.save_manual_actuals(seeded_farm.id, FISCAL_YEAR, "Nov", {"input_seed": 100})
    calculation_service.update_per_unit_cell(
        seeded_farm.id, FISCAL_YEAR, "Dec", "input_fert", 4, comment="Split application"
    )

    report = forecast_service.build_report(seeded_farm.id, FISCAL_YEAR, "per_unit")
    rows = rows_by_code(report)
    assert rows["input_seed"].actuals["Nov"] is True
    assert rows["input_seed"].actuals["Dec"] is False
    assert rows["input_fert"].comments == {"Dec": "Split application"}
    assert rows["input_fert"].months["Dec"] == 4


def test_report_without_assumption(seeded_farm, forecast_service):
    """Test a year without assumptions reports zeros."""
    report = forecast_service.build_report(seeded_farm.id, 2030)
    assert report.total_acres == 0
    assert not report.is_frozen
    assert all(row.forecast_total == 0 for row in report.rows)


@pytest.mark.parametrize("record_type", list(RecordType))
def test_parent_rows_match_children(seeded_farm, calculation_service, forecast_service, record_type):
    """Test parent totals equal the sum of their children's totals."""
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 10)
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Jan", "input_chem", 7.5)

    rows = rows_by_code(forecast_service.build_report(seeded_farm.id, FISCAL_YEAR, record_type))
    children = ["input_seed", "input_fert", "input_chem"]
    assert rows["inputs"].forecast_total == pytest.approx(sum(rows[c].forecast_total for c in children))
