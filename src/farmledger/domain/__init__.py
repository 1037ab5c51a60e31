"""Domain layer for farmledger application."""

_SERVICES = {
    "FarmService": "farmledger.domain.farm",
    "CategoryService": "farmledger.domain.category",
    "CalculationService": "farmledger.domain.calculation",
    "AssumptionService": "farmledger.domain.assumption",
    "GlRollupService": "farmledger.domain.gl_rollup",
    "GlAccountService": "farmledger.domain.gl_account",
    "GlImportService": "farmledger.domain.gl_import",
    "ForecastService": "farmledger.domain.forecast",
    "DashboardService": "farmledger.domain.dashboard",
    "recalc_parent_sums": "farmledger.domain.rollup",
}

__all__ = list(_SERVICES)


# Import services lazily; the database layer imports domain.entities
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
