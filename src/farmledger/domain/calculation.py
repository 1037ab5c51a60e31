"""Per-unit / accounting cascade for monthly cell edits."""

import logging
from typing import Mapping, Optional

from farmledger.database.base import Database
from farmledger.domain.category import CategoryService
from farmledger.domain.entities import Assumption, RecordType
from farmledger.domain.errors import (
    AssumptionNotFoundError,
    InvalidCategoryError,
    LOCK_REASON_ACTUAL,
    LOCK_REASON_FROZEN,
    LockedMonthError,
    ValidationError,
    category_not_found,
    category_not_leaf,
)
from farmledger.domain.rollup import divide_values, leaf_codes, recalc_parent_sums, scale_values
from farmledger.utils.fiscal_year import is_valid_month

logger = logging.getLogger(__name__)


def _require_month(month: str) -> None:
    if not is_valid_month(month):
        raise ValidationError(f"Invalid month '{month}'")


class CalculationService:
    """Keeps the per-unit and accounting records of a month in step.

    Every edit reads the current record, merges the new leaf value in
    memory, recomputes parent sums and writes both records back whole.
    Concurrent edits to the same month are last-write-wins.
    """

    def __init__(self, db: Database):
        """Initialize calculation service.

        Args:
            db: Database instance
        """
        self.db = db
        self.category_service = CategoryService(db)

    def _require_assumption(self, farm_id: int, fiscal_year: int) -> Assumption:
        assumption = self.db.get_assumption(farm_id, fiscal_year)
        if assumption is None:
            raise AssumptionNotFoundError(farm_id, fiscal_year)
        return assumption

    def check_cell_editable(
        self,
        farm_id: int,
        fiscal_year: int,
        month: str,
        record_type: RecordType,
        block_frozen: bool = False,
    ) -> None:
        """Refuse direct edits to months holding actuals (or a frozen budget).

        Raises:
            LockedMonthError: With reason ``"actual"`` when the target record
                is actual, or ``"frozen"`` when ``block_frozen`` is set and
                the year's budget is frozen
        """
        record_type = RecordType(record_type)
        if block_frozen:
            assumption = self.db.get_assumption(farm_id, fiscal_year)
            if assumption is not None and assumption.is_frozen:
                raise LockedMonthError(month, fiscal_year, LOCK_REASON_FROZEN, record_type.value)

        record = self.db.get_monthly_record(farm_id, fiscal_year, month, record_type)
        if record is not None and record.is_actual:
            raise LockedMonthError(month, fiscal_year, LOCK_REASON_ACTUAL, record_type.value)

    def update_per_unit_cell(
        self,
        farm_id: int,
        fiscal_year: int,
        month: str,
        category_code: str,
        value: float,
        comment: Optional[str] = None,
    ) -> dict[str, dict[str, float]]:
        """Set a per-unit leaf value and regenerate the month's accounting record.

        Args:
            farm_id: Farm ID
            fiscal_year: Fiscal year
            month: Three-letter month name
            category_code: Leaf category code
            value: Value in $/acre
            comment: Note for the cell; None leaves any stored note as is

        Returns:
            Dict with the recalculated ``per_unit`` and ``accounting`` maps

        Raises:
            InvalidCategoryError: If the code is unknown or not a leaf
            AssumptionNotFoundError: If the fiscal year has no assumptions
        """
        _require_month(month)
        self.category_service.validate_leaf(farm_id, category_code)
        assumption = self._require_assumption(farm_id, fiscal_year)
        categories = self.category_service.get_categories(farm_id)

        per_unit = self.db.get_monthly_record(farm_id, fiscal_year, month, RecordType.PER_UNIT)
        per_unit_data = dict(per_unit.data) if per_unit else {}
        per_unit_data[category_code] = float(value)
        per_unit_data = recalc_parent_sums(per_unit_data, categories)

        comments = None
        if comment is not None:
            comments = dict(per_unit.comments) if per_unit else {}
            comments[category_code] = comment

        accounting_data = scale_values(per_unit_data, assumption.total_acres)

        self.db.save_monthly_record(
            farm_id, fiscal_year, month, RecordType.PER_UNIT, per_unit_data, comments=comments
        )
        self.db.save_monthly_record(
            farm_id, fiscal_year, month, RecordType.ACCOUNTING, accounting_data
        )

        return {"per_unit": per_unit_data, "accounting": accounting_data}

    def update_accounting_cell(
        self,
        farm_id: int,
        fiscal_year: int,
        month: str,
        category_code: str,
        value: float,
        is_actual: bool = False,
    ) -> dict[str, dict[str, float]]:
        """Set an accounting leaf value and regenerate the month's per-unit record.

        Args:
            farm_id: Farm ID
            fiscal_year: Fiscal year
            month: Three-letter month name
            category_code: Leaf category code
            value: Value in dollars
            is_actual: True marks both records actual; False keeps their flags

        Returns:
            Dict with the recalculated ``per_unit`` and ``accounting`` maps

        Raises:
            InvalidCategoryError: If the code is unknown or not a leaf
            AssumptionNotFoundError: If the fiscal year has no assumptions
        """
        _require_month(month)
        self.category_service.validate_leaf(farm_id, category_code)
        assumption = self._require_assumption(farm_id, fiscal_year)
        categories = self.category_service.get_categories(farm_id)

        accounting = self.db.get_monthly_record(farm_id, fiscal_year, month, RecordType.ACCOUNTING)
        accounting_data = dict(accounting.data) if accounting else {}
        accounting_data[category_code] = float(value)
        accounting_data = recalc_parent_sums(accounting_data, categories)

        per_unit_data = divide_values(accounting_data, assumption.total_acres)

        # None keeps the stored flag
        actual_flag = True if is_actual else None
        self.db.save_monthly_record(
            farm_id, fiscal_year, month, RecordType.ACCOUNTING, accounting_data, is_actual=actual_flag
        )
        self.db.save_monthly_record(
            farm_id, fiscal_year, month, RecordType.PER_UNIT, per_unit_data, is_actual=actual_flag
        )

        return {"per_unit": per_unit_data, "accounting": accounting_data}

    def save_manual_actuals(
        self,
        farm_id: int,
        fiscal_year: int,
        month: str,
        data: Mapping[str, float],
    ) -> dict[str, dict[str, float]]:
        """Record a month of actual dollar amounts entered by hand.

        Args:
            farm_id: Farm ID
            fiscal_year: Fiscal year
            month: Three-letter month name
            data: Leaf category code to dollar amount

        Returns:
            Dict with the recalculated ``per_unit`` and ``accounting`` maps

        Raises:
            ValidationError: If data is empty
            InvalidCategoryError: If a code is unknown or not a leaf
        """
        _require_month(month)
        if not data:
            raise ValidationError("No actual amounts given")

        categories = self.category_service.get_categories(farm_id)
        known = {cat.code for cat in categories}
        leaves = set(leaf_codes(categories))
        for code in data:
            if code not in known:
                raise InvalidCategoryError(category_not_found(code))
            if code not in leaves:
                raise InvalidCategoryError(category_not_leaf(code))

        accounting = self.db.get_monthly_record(farm_id, fiscal_year, month, RecordType.ACCOUNTING)
        merged = dict(accounting.data) if accounting else {}
        merged.update({code: float(amount) for code, amount in data.items()})
        accounting_data = recalc_parent_sums(merged, categories)

        assumption = self.db.get_assumption(farm_id, fiscal_year)
        if assumption is None:
            logger.warning(
                "No assumptions for farm=%s FY%s; per-unit values will show raw dollars",
                farm_id,
                fiscal_year,
            )
            per_unit_data = divide_values(accounting_data, 1)
        else:
            per_unit_data = divide_values(accounting_data, assumption.total_acres)

        self.db.save_monthly_record(
            farm_id, fiscal_year, month, RecordType.ACCOUNTING, accounting_data, is_actual=True
        )
        self.db.save_monthly_record(
            farm_id, fiscal_year, month, RecordType.PER_UNIT, per_unit_data, is_actual=True
        )
        logger.info(
            "Saved %d manual actuals for farm=%s %s FY%s", len(data), farm_id, month, fiscal_year
        )

        return {"per_unit": per_unit_data, "accounting": accounting_data}
