"""Tests for the year dashboard."""

import pytest
from farmledger.domain.dashboard import DashboardService, inputs_adherence

FISCAL_YEAR = 2025


@pytest.fixture
def dashboard_service(temp_db):
    """Create a DashboardService with a temporary database."""
    return DashboardService(temp_db)


def test_inputs_adherence():
    """Test adherence against the frozen inputs budget."""
    assert inputs_adherence(50000, 50000) == 100
    assert inputs_adherence(60000, 50000) == pytest.approx(80)
    assert inputs_adherence(40000, 50000) == pytest.approx(80)
    assert inputs_adherence(150000, 50000) == pytest.approx(-100)
    assert inputs_adherence(50000, 0) == 0


def test_dashboard_figures(seeded_farm, calculation_service, dashboard_service):
    """Test expense, inputs and labour figures over the year."""
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 10)
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Dec", "lpm_personnel", 2)
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Jan", "ins_crop", 1)

    result = dashboard_service.build_dashboard(seeded_farm.id, FISCAL_YEAR)

    assert result.total_expense == 65000
    assert result.expense_per_acre == 13
    assert result.inputs_total == 50000
    assert result.labour_cost_per_acre == 2
    assert result.inputs_adherence == 0
    assert [item.code for item in result.budget_vs_forecast] == ["inputs", "lpm", "lbf", "insurance"]
    inputs = result.budget_vs_forecast[0]
    assert inputs.budget == inputs.forecast == 50000


def test_adherence_after_freeze(seeded_farm, calculation_service, assumption_service, dashboard_service):
    """Test adherence drops as actual inputs move away from the frozen budget."""
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 10)
    assumption_service.freeze(seeded_farm.id, FISCAL_YEAR)
    calculation_service.update_per_unit_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_seed", 12)

    result = dashboard_service.build_dashboard(seeded_farm.id, FISCAL_YEAR)

    assert result.inputs_total == 60000
    assert result.inputs_adherence == 80
    inputs = result.budget_vs_forecast[0]
    assert inputs.budget == 50000
    assert inputs.forecast == 60000

    assumption_service.unfreeze(seeded_farm.id, FISCAL_YEAR)
    assert dashboard_service.build_dashboard(seeded_farm.id, FISCAL_YEAR).inputs_adherence == 80


def test_adherence_with_zero_frozen_inputs(seeded_farm, calculation_service, assumption_service, dashboard_service):
    """Test a frozen budget without inputs scores zero adherence."""
    assumption_service.freeze(seeded_farm.id, FISCAL_YEAR)
    calculation_service.update_accounting_cell(seeded_farm.id, FISCAL_YEAR, "Nov", "input_fert", 5000)

    result = dashboard_service.build_dashboard(seeded_farm.id, FISCAL_YEAR)

    assert result.inputs_total == 5000
    assert result.inputs_adherence == 0


def test_crop_yields(seeded_farm, assumption_service, dashboard_service):
    """Test yield against target per crop and by revenue."""
    crops = [
        {
            "name": "Canola",
            "acres": 3000,
            "target_yield": 50,
            "price_per_unit": 15,
            "actual_acres": 3000,
            "actual_yield": 45,
            "actual_price": 15,
        },
        {"name": "Durum", "acres": 2000},
    ]
    assumption_service.save_assumption(seeded_farm.id, FISCAL_YEAR, 5000, crops=crops)

    result = dashboard_service.build_dashboard(seeded_farm.id, FISCAL_YEAR)

    assert result.yield_pct == 90
    canola, durum = result.crop_yields
    assert canola.name == "Canola"
    assert canola.target_yield == 50
    assert canola.actual_yield == 45
    assert canola.yield_pct == 90
    assert durum.yield_pct == 0


def test_dashboard_without_assumption(sample_farm, category_service, dashboard_service):
    """Test an unplanned year divides per-acre figures by one."""
    category_service.init_farm_categories(sample_farm.id)

    result = dashboard_service.build_dashboard(sample_farm.id, FISCAL_YEAR)

    assert result.total_expense == 0
    assert result.expense_per_acre == 0
    assert result.yield_pct == 0
    assert result.crop_yields == ()
