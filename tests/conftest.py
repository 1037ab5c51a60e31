"""Shared pytest fixtures for farmledger tests."""

import tempfile
import os
from pathlib import Path
import pytest

from farmledger.database.factories import create_sqlite_database
from farmledger.domain.assumption import AssumptionService
from farmledger.domain.calculation import CalculationService
from farmledger.domain.category import CategoryService
from farmledger.domain.farm import FarmService
from farmledger.domain.forecast import ForecastService
from farmledger.domain.gl_account import GlAccountService
from farmledger.domain.gl_import import GlImportService
from farmledger.domain.gl_rollup import GlRollupService

FISCAL_YEAR = 2025
TOTAL_ACRES = 5000


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def farm_service(temp_db):
    """Create a FarmService with a temporary database."""
    return FarmService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def calculation_service(temp_db):
    """Create a CalculationService with a temporary database."""
    return CalculationService(temp_db)


@pytest.fixture
def assumption_service(temp_db):
    """Create an AssumptionService with a temporary database."""
    return AssumptionService(temp_db)


@pytest.fixture
def rollup_service(temp_db):
    """Create a GlRollupService with a temporary database."""
    return GlRollupService(temp_db)


@pytest.fixture
def gl_account_service(temp_db):
    """Create a GlAccountService with a temporary database."""
    return GlAccountService(temp_db)


@pytest.fixture
def gl_import_service(temp_db):
    """Create a GlImportService with a temporary database."""
    return GlImportService(temp_db)


@pytest.fixture
def forecast_service(temp_db):
    """Create a ForecastService with a temporary database."""
    return ForecastService(temp_db)


@pytest.fixture
def sample_farm(farm_service):
    """Create an empty sample farm."""
    farm_id = farm_service.create_farm("Test Farm")
    return farm_service.get_farm(farm_id)


@pytest.fixture
def seeded_farm(sample_farm, category_service, assumption_service):
    """Farm with the default chart (plus canola revenue) and 5000 acres for FY2025."""
    crops = [{"name": "Canola", "acres": 3000}, {"name": "Durum", "acres": 2000}]
    category_service.init_farm_categories(sample_farm.id, crops)
    assumption_service.save_assumption(sample_farm.id, FISCAL_YEAR, TOTAL_ACRES, crops=crops)
    return sample_farm


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
