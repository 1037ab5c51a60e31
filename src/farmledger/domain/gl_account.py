"""GL account domain service."""

import logging
from collections import defaultdict
from typing import Any, Iterable, Optional

from farmledger.database.base import Database
from farmledger.domain.category import CategoryService
from farmledger.domain.entities import GlAccount
from farmledger.domain.errors import GlAccountNotFoundError, ValidationError, gl_account_not_found
from farmledger.domain.gl_rollup import GlRollupService
from farmledger.domain.rollup import leaf_codes

logger = logging.getLogger(__name__)


class GlAccountService:
    """Service for a farm's GL accounts and their category mapping."""

    def __init__(self, db: Database):
        """Initialize GL account service.

        Args:
            db: Database instance
        """
        self.db = db
        self.category_service = CategoryService(db)
        self.rollup_service = GlRollupService(db)

    def upsert_accounts(self, farm_id: int, accounts: Iterable[dict[str, Any]]) -> dict[str, Any]:
        """Create or update GL accounts by account number.

        Each account is a dict with ``account_number``, ``account_name`` and
        an optional ``category_code``. Only leaf categories are mapped: an
        unknown or parent category code leaves the account unmapped and is
        reported as skipped. Entries without a number or name are ignored.

        Returns:
            Dict with the ``saved`` accounts and ``skipped`` mappings as
            ``(account_number, reason)`` pairs
        """
        categories = self.category_service.get_categories(farm_id)
        category_ids = {cat.code: cat.id for cat in categories}
        leaves = set(leaf_codes(categories))

        saved = []
        skipped = []
        for account in accounts:
            number = str(account.get("account_number") or "").strip()
            name = str(account.get("account_name") or "").strip()
            if not number or not name:
                continue
            category_code = account.get("category_code") or ""
            category_id = None
            if category_code in leaves:
                category_id = category_ids[category_code]
            elif category_code:
                reason = "not a leaf category" if category_code in category_ids else "unknown category"
                skipped.append((number, f"{reason} '{category_code}'"))
            account_id = self.db.save_gl_account(farm_id, number, name, category_id=category_id)
            saved.append(self.db.get_gl_account(account_id))
        return {"saved": saved, "skipped": skipped}

    def list_accounts(self, farm_id: int) -> list[GlAccount]:
        """List active GL accounts ordered by account number."""
        return self.db.list_gl_accounts(farm_id)

    def get_account(self, farm_id: int, account_number: str) -> GlAccount:
        """Get a GL account by number.

        Raises:
            GlAccountNotFoundError: If the account doesn't exist
        """
        account = self.db.get_gl_account_by_number(farm_id, account_number)
        if account is None:
            raise GlAccountNotFoundError(gl_account_not_found(account_number))
        return account

    def bulk_assign(
        self,
        farm_id: int,
        assignments: Iterable[tuple[str, Optional[str]]],
        fiscal_year: Optional[int] = None,
    ) -> dict[str, Any]:
        """Map GL accounts to leaf categories.

        Args:
            farm_id: Farm ID
            assignments: ``(account_number, category_code)`` pairs; a None
                code unmaps the account
            fiscal_year: If given, every month of that year is rolled up again

        Returns:
            Dict with ``updated`` count, ``skipped`` entries and ``rolled_up`` flag
        """
        categories = self.category_service.get_categories(farm_id)
        category_ids = {cat.code: cat.id for cat in categories}
        leaves = set(leaf_codes(categories))

        updated = 0
        skipped = []
        for account_number, category_code in assignments:
            account = self.db.get_gl_account_by_number(farm_id, account_number)
            if account is None:
                skipped.append((account_number, "unknown account"))
                continue
            if category_code and category_code not in leaves:
                reason = "not a leaf category" if category_code in category_ids else "unknown category"
                skipped.append((account_number, f"{reason} '{category_code}'"))
                continue
            self.db.update_gl_account(
                account.id,
                category_id=category_ids[category_code] if category_code else None,
                update_category=True,
            )
            updated += 1

        if fiscal_year is not None:
            self.rollup_service.rollup_year(farm_id, fiscal_year)

        logger.info("Updated %d GL account assignments for farm=%s", updated, farm_id)
        return {"updated": updated, "skipped": skipped, "rolled_up": fiscal_year is not None}

    def deactivate_account(
        self, farm_id: int, account_number: str, fiscal_year: Optional[int] = None
    ) -> None:
        """Deactivate a GL account and drop its category mapping.

        Raises:
            GlAccountNotFoundError: If the account doesn't exist
        """
        account = self.get_account(farm_id, account_number)
        self.db.update_gl_account(account.id, is_active=False, category_id=None, update_category=True)
        if fiscal_year is not None:
            self.rollup_service.rollup_year(farm_id, fiscal_year)

    def chart_of_accounts(self, farm_id: int, fiscal_year: Optional[int] = None) -> dict[str, Any]:
        """Return categories and active GL accounts, with amounts when a year is given.

        Returns:
            Dict with ``categories`` and ``gl_accounts``; each GL account entry
            holds the account, its category code, and when ``fiscal_year`` is
            set, ``ytd_total`` and ``month_totals``
        """
        categories = self.category_service.get_categories(farm_id)
        codes_by_id = {cat.id: cat.code for cat in categories}
        accounts = self.list_accounts(farm_id)

        month_totals: dict[int, dict[str, float]] = defaultdict(lambda: defaultdict(float))
        if fiscal_year is not None:
            for detail in self.db.list_gl_actual_details(farm_id, fiscal_year):
                month_totals[detail.gl_account_id][detail.month] += detail.amount

        entries = []
        for account in accounts:
            entry: dict[str, Any] = {
                "account": account,
                "category_code": codes_by_id.get(account.category_id),
            }
            if fiscal_year is not None:
                totals = dict(month_totals.get(account.id, {}))
                entry["month_totals"] = totals
                entry["ytd_total"] = sum(totals.values())
            entries.append(entry)

        return {"categories": categories, "gl_accounts": entries}

    def add_account(
        self,
        farm_id: int,
        account_number: str,
        account_name: str,
        category_code: Optional[str] = None,
    ) -> GlAccount:
        """Create or update a single GL account, validating its category.

        Raises:
            ValidationError: If the number or name is empty
            InvalidCategoryError: If ``category_code`` is not a leaf of the farm
        """
        if not account_number.strip() or not account_name.strip():
            raise ValidationError("account_number and account_name are required")
        category_id = None
        if category_code:
            category_id = self.category_service.validate_leaf(farm_id, category_code).id
        account_id = self.db.save_gl_account(
            farm_id, account_number.strip(), account_name.strip(), category_id=category_id
        )
        return self.db.get_gl_account(account_id)
