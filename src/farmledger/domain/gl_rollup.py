"""GL actual rollup: ledger-account amounts into category monthly records."""

import logging
from collections import defaultdict
from typing import Any, Iterable

from farmledger.database.base import Database
from farmledger.domain.category import CategoryService
from farmledger.domain.entities import GlActualRow, RecordType
from farmledger.domain.errors import ValidationError
from farmledger.domain.rollup import divide_values, leaf_codes, recalc_parent_sums
from farmledger.utils.fiscal_year import DEFAULT_START_MONTH, generate_fiscal_months, is_valid_month

logger = logging.getLogger(__name__)


class GlRollupService:
    """Service that turns GL actual details into actual monthly records."""

    def __init__(self, db: Database):
        """Initialize GL rollup service.

        Args:
            db: Database instance
        """
        self.db = db
        self.category_service = CategoryService(db)

    def rollup_gl_actuals(self, farm_id: int, fiscal_year: int, month: str) -> dict[str, dict[str, float]]:
        """Rebuild one month's actual records from its GL details.

        Leaf values are reset to zero before the mapped sums are applied, so
        an account that was unmapped since the last run leaves no residue.
        Ad-hoc keys already stored in the accounting record survive. Running
        this twice with unchanged details gives the same result.
        Details mapped to a deactivated category are ignored.

        Returns:
            Dict with the resulting ``accounting`` and ``per_unit`` maps
        """
        categories = self.category_service.get_categories(farm_id)
        details = self.db.list_gl_actual_details(farm_id, fiscal_year, month)

        active_codes = {cat.code for cat in categories}
        category_sums: dict[str, float] = defaultdict(float)
        for detail in details:
            if detail.category_code not in active_codes:
                continue
            category_sums[detail.category_code] += detail.amount

        existing = self.db.get_monthly_record(farm_id, fiscal_year, month, RecordType.ACCOUNTING)
        merged = dict(existing.data) if existing else {}
        merged.update({code: 0.0 for code in leaf_codes(categories)})
        merged.update(category_sums)
        accounting_data = recalc_parent_sums(merged, categories)

        assumption = self.db.get_assumption(farm_id, fiscal_year)
        if assumption is None:
            logger.warning(
                "No assumptions for farm=%s FY%s; per-unit will divide by 1 (raw dollar amounts)",
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

        logger.debug(
            "Rolled up %d GL details into %d categories for farm=%s %s FY%s",
            len(details),
            len(category_sums),
            farm_id,
            month,
            fiscal_year,
        )
        return {"accounting": accounting_data, "per_unit": per_unit_data}

    def import_gl_actuals(
        self, farm_id: int, fiscal_year: int, rows: Iterable[GlActualRow]
    ) -> dict[str, Any]:
        """Store GL actual amounts and roll up every month they touch.

        All detail rows are written in one transaction before any rollup
        runs. Rows for unknown account numbers are skipped.

        Returns:
            Dict with import statistics:
            - months_imported: number of distinct months rolled up
            - rows_written: number of detail rows stored
            - rows_skipped: number of rows with an unknown account
            - skipped_accounts: sorted unknown account numbers
            - results: rollup result per month

        Raises:
            ValidationError: If a row names an invalid month
        """
        rows = list(rows)
        for row in rows:
            if not is_valid_month(row.month):
                raise ValidationError(
                    f"Invalid month '{row.month}' for GL account '{row.account_number}'"
                )

        accounts = {
            account.account_number: account
            for account in self.db.list_gl_accounts(farm_id, include_inactive=True)
        }

        details = []
        skipped_accounts = set()
        months_affected: list[str] = []
        for row in rows:
            account = accounts.get(row.account_number)
            if account is None:
                skipped_accounts.add(row.account_number)
                continue
            details.append((row.month, account.id, float(row.amount)))
            if row.month not in months_affected:
                months_affected.append(row.month)

        written = self.db.save_gl_actual_details(farm_id, fiscal_year, details) if details else 0

        results = {}
        for month in months_affected:
            results[month] = self.rollup_gl_actuals(farm_id, fiscal_year, month)

        logger.info(
            "Imported GL actuals for farm=%s FY%s: %d rows written, %d skipped, %d months rolled up",
            farm_id,
            fiscal_year,
            written,
            len(rows) - len(details),
            len(months_affected),
        )
        return {
            "months_imported": len(months_affected),
            "rows_written": written,
            "rows_skipped": len(rows) - len(details),
            "skipped_accounts": sorted(skipped_accounts),
            "results": results,
        }

    def rollup_year(self, farm_id: int, fiscal_year: int) -> dict[str, dict[str, dict[str, float]]]:
        """Roll up all twelve fiscal months of a year."""
        assumption = self.db.get_assumption(farm_id, fiscal_year)
        start_month = assumption.start_month if assumption else DEFAULT_START_MONTH
        return {
            month: self.rollup_gl_actuals(farm_id, fiscal_year, month)
            for month in generate_fiscal_months(start_month)
        }

    def clear_year(self, farm_id: int, fiscal_year: int) -> dict[str, int]:
        """Delete a year's GL details and empty its monthly records.

        Returns:
            Dict with ``deleted_details`` and ``reset_records`` counts
        """
        deleted = self.db.delete_gl_actual_details(farm_id, fiscal_year)
        reset = self.db.reset_monthly_records(farm_id, fiscal_year)
        logger.info(
            "Cleared FY%s for farm=%s: %d GL details removed, %d monthly records reset",
            fiscal_year,
            farm_id,
            deleted,
            reset,
        )
        return {"deleted_details": deleted, "reset_records": reset}
