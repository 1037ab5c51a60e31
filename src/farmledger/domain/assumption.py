"""Assumption domain service: acreage, crops and the frozen budget."""

import logging
from datetime import datetime, UTC
from typing import Any, Iterable, Optional

from farmledger.database.base import Database
from farmledger.domain.entities import Assumption, MonthlyRecord, RecordType
from farmledger.domain.errors import (
    AssumptionNotFoundError,
    BudgetFreezeError,
    ValidationError,
)
from farmledger.domain.rollup import scale_values
from farmledger.utils.fiscal_year import DEFAULT_START_MONTH, generate_fiscal_months, is_valid_month

logger = logging.getLogger(__name__)


def _normalize_crops(crops: Optional[Iterable[dict[str, Any]]]) -> list[dict[str, Any]]:
    normalized = []
    for crop in crops or []:
        name = (crop.get("name") or "").strip()
        if not name:
            raise ValidationError("Every crop needs a name")
        try:
            acres = float(crop.get("acres") or 0)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid acres for crop '{name}'")
        if acres < 0:
            raise ValidationError(f"Acres for crop '{name}' cannot be negative")
        normalized.append({**crop, "name": name, "acres": acres})
    return normalized


class AssumptionService:
    """Service for per-year planning assumptions and budget snapshots."""

    def __init__(self, db: Database):
        """Initialize assumption service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_assumption(self, farm_id: int, fiscal_year: int) -> Assumption:
        """Get the assumptions of a fiscal year.

        Raises:
            AssumptionNotFoundError: If none exist
        """
        assumption = self.db.get_assumption(farm_id, fiscal_year)
        if assumption is None:
            raise AssumptionNotFoundError(farm_id, fiscal_year)
        return assumption

    def get_start_month(self, farm_id: int, fiscal_year: int) -> str:
        """Return the fiscal start month, falling back to the default."""
        assumption = self.db.get_assumption(farm_id, fiscal_year)
        return assumption.start_month if assumption else DEFAULT_START_MONTH

    def save_assumption(
        self,
        farm_id: int,
        fiscal_year: int,
        total_acres: float,
        crops: Optional[Iterable[dict[str, Any]]] = None,
        start_month: str = DEFAULT_START_MONTH,
    ) -> Assumption:
        """Create or update the assumptions of a fiscal year.

        Empty monthly records are created for every fiscal month in both
        representations. When the acreage of an existing year changes, the
        accounting records are re-derived from the per-unit ones.

        Args:
            farm_id: Farm ID
            fiscal_year: Fiscal year
            total_acres: Farmed acres, must be positive
            crops: Optional list of ``{"name": ..., "acres": ...}`` dicts
            start_month: First month of the fiscal year

        Returns:
            The saved assumption

        Raises:
            ValidationError: If acres, crops or the start month are invalid
        """
        try:
            total_acres = float(total_acres)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid total acres '{total_acres}'")
        if total_acres <= 0:
            raise ValidationError("Total acres must be greater than zero")
        if not is_valid_month(start_month):
            raise ValidationError(f"Invalid start month '{start_month}'")

        crop_list = _normalize_crops(crops)
        if sum(crop["acres"] for crop in crop_list) > total_acres:
            raise ValidationError("Crop acres sum exceeds total acres")

        existing = self.db.get_assumption(farm_id, fiscal_year)
        old_acres = existing.total_acres if existing else None

        self.db.save_assumption(farm_id, fiscal_year, total_acres, crop_list, start_month)
        self.db.ensure_monthly_records(farm_id, fiscal_year, generate_fiscal_months(start_month))

        if old_acres and old_acres != total_acres:
            self._rederive_accounting(farm_id, fiscal_year, total_acres)

        return self.get_assumption(farm_id, fiscal_year)

    def _rederive_accounting(self, farm_id: int, fiscal_year: int, total_acres: float) -> None:
        per_unit_records = self.db.list_monthly_records(farm_id, fiscal_year, RecordType.PER_UNIT)
        updated = 0
        for record in per_unit_records:
            if not record.data:
                continue
            self.db.save_monthly_record(
                farm_id,
                fiscal_year,
                record.month,
                RecordType.ACCOUNTING,
                scale_values(record.data, total_acres),
            )
            updated += 1
        logger.info(
            "Total acres changed for farm=%s FY%s; re-derived %d accounting records",
            farm_id,
            fiscal_year,
            updated,
        )

    def freeze(self, farm_id: int, fiscal_year: int) -> int:
        """Snapshot every monthly record of the year as the frozen budget.

        Any earlier snapshot of the year is discarded, not merged.

        Returns:
            Number of records copied

        Raises:
            AssumptionNotFoundError: If the year has no assumptions
            BudgetFreezeError: If the budget is already frozen
        """
        assumption = self.get_assumption(farm_id, fiscal_year)
        if assumption.is_frozen:
            raise BudgetFreezeError(f"Budget for FY{fiscal_year} is already frozen")

        records: list[MonthlyRecord] = self.db.list_monthly_records(farm_id, fiscal_year)
        copied = self.db.replace_frozen_records(farm_id, fiscal_year, records)
        self.db.set_assumption_frozen(farm_id, fiscal_year, True, datetime.now(UTC))

        logger.info("Froze budget for farm=%s FY%s (%d records)", farm_id, fiscal_year, copied)
        return copied

    def unfreeze(self, farm_id: int, fiscal_year: int) -> None:
        """Lift the freeze; the snapshot stays available for comparison.

        Raises:
            AssumptionNotFoundError: If the year has no assumptions
            BudgetFreezeError: If the budget is not frozen
        """
        assumption = self.get_assumption(farm_id, fiscal_year)
        if not assumption.is_frozen:
            raise BudgetFreezeError(f"Budget for FY{fiscal_year} is not frozen")

        self.db.set_assumption_frozen(farm_id, fiscal_year, False, None)
        logger.info("Unfroze budget for farm=%s FY%s", farm_id, fiscal_year)
