"""Abstract database interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Iterable, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from farmledger.domain.entities import (
    Assumption,
    Category,
    CategoryType,
    Farm,
    GlAccount,
    GlActualDetail,
    MonthlyRecord,
    RecordType,
)


class Database(ABC):
    """Abstract database interface for farmledger.

    Monthly records are always written wholesale per
    (farm, fiscal year, month, type) key; merging happens in the services.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Farm operations
    @abstractmethod
    def create_farm(self, name: str) -> int:
        """Create a farm. Returns farm ID."""
        pass

    @abstractmethod
    def get_farm(self, farm_id: int) -> Optional[Farm]:
        """Get farm by ID."""
        pass

    @abstractmethod
    def list_farms(self) -> list[Farm]:
        """List all farms."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        farm_id: int,
        code: str,
        display_name: str,
        category_type: CategoryType,
        parent_id: Optional[int],
        path: str,
        level: int,
        sort_order: int,
    ) -> int:
        """Create a category. Returns category ID.

        Raises DuplicateCategoryCodeError if the code exists for the farm.
        """
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_code(self, farm_id: int, code: str) -> Optional[Category]:
        """Get category by farm and code."""
        pass

    @abstractmethod
    def list_categories(self, farm_id: int, include_inactive: bool = False) -> list[Category]:
        """List a farm's categories ordered by (level, sort_order)."""
        pass

    @abstractmethod
    def update_category(
        self,
        category_id: int,
        display_name: Optional[str] = None,
        sort_order: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update category fields that are not None."""
        pass

    # Assumption operations
    @abstractmethod
    def get_assumption(self, farm_id: int, fiscal_year: int) -> Optional[Assumption]:
        """Get assumption for a farm and fiscal year."""
        pass

    @abstractmethod
    def get_latest_assumption(self, farm_id: int) -> Optional[Assumption]:
        """Get the assumption with the highest fiscal year for a farm."""
        pass

    @abstractmethod
    def save_assumption(
        self,
        farm_id: int,
        fiscal_year: int,
        total_acres: float,
        crops: Sequence[dict[str, Any]],
        start_month: str,
    ) -> int:
        """Create or update an assumption. Returns assumption ID."""
        pass

    @abstractmethod
    def set_assumption_frozen(
        self, farm_id: int, fiscal_year: int, is_frozen: bool, frozen_at: Optional[datetime]
    ) -> None:
        """Set the frozen flag and timestamp of an assumption."""
        pass

    # Monthly record operations
    @abstractmethod
    def get_monthly_record(
        self, farm_id: int, fiscal_year: int, month: str, record_type: RecordType
    ) -> Optional[MonthlyRecord]:
        """Get one monthly record."""
        pass

    @abstractmethod
    def list_monthly_records(
        self, farm_id: int, fiscal_year: int, record_type: Optional[RecordType] = None
    ) -> list[MonthlyRecord]:
        """List monthly records of a fiscal year, optionally by type."""
        pass

    @abstractmethod
    def save_monthly_record(
        self,
        farm_id: int,
        fiscal_year: int,
        month: str,
        record_type: RecordType,
        data: dict[str, float],
        comments: Optional[dict[str, str]] = None,
        is_actual: Optional[bool] = None,
    ) -> None:
        """Upsert a monthly record, replacing its data map wholesale.

        ``comments`` and ``is_actual`` keep their stored values when None
        (new records start with no comments and ``is_actual=False``).
        """
        pass

    @abstractmethod
    def ensure_monthly_records(
        self, farm_id: int, fiscal_year: int, months: Iterable[str]
    ) -> int:
        """Create empty records of both types for missing months. Returns count created."""
        pass

    @abstractmethod
    def reset_monthly_records(self, farm_id: int, fiscal_year: int) -> int:
        """Empty every record of a fiscal year and clear its actual flag. Returns count."""
        pass

    # Frozen budget operations
    @abstractmethod
    def replace_frozen_records(
        self, farm_id: int, fiscal_year: int, records: Sequence[MonthlyRecord]
    ) -> int:
        """Delete the year's frozen rows and store copies of ``records``. Returns count."""
        pass

    @abstractmethod
    def list_frozen_records(
        self, farm_id: int, fiscal_year: int, record_type: Optional[RecordType] = None
    ) -> list[MonthlyRecord]:
        """List frozen budget records of a fiscal year, optionally by type."""
        pass

    # GL account operations
    @abstractmethod
    def save_gl_account(
        self,
        farm_id: int,
        account_number: str,
        account_name: str,
        category_id: Optional[int] = None,
    ) -> int:
        """Create or update a GL account by account number. Returns GL account ID."""
        pass

    @abstractmethod
    def get_gl_account(self, gl_account_id: int) -> Optional[GlAccount]:
        """Get GL account by ID."""
        pass

    @abstractmethod
    def get_gl_account_by_number(self, farm_id: int, account_number: str) -> Optional[GlAccount]:
        """Get GL account by farm and account number."""
        pass

    @abstractmethod
    def list_gl_accounts(self, farm_id: int, include_inactive: bool = False) -> list[GlAccount]:
        """List a farm's GL accounts ordered by account number."""
        pass

    @abstractmethod
    def update_gl_account(
        self,
        gl_account_id: int,
        account_name: Optional[str] = None,
        category_id: Optional[int] = None,
        is_active: Optional[bool] = None,
        update_category: bool = False,
    ) -> None:
        """Update GL account fields.

        Args:
            update_category: If True, update category_id even if it's None (to unmap it)
        """
        pass

    # GL actual detail operations
    @abstractmethod
    def save_gl_actual_details(
        self, farm_id: int, fiscal_year: int, details: Sequence[tuple[str, int, float]]
    ) -> int:
        """Upsert ``(month, gl_account_id, amount)`` details in one transaction.

        Either every detail is written or none is. Returns count written.
        """
        pass

    @abstractmethod
    def list_gl_actual_details(
        self, farm_id: int, fiscal_year: int, month: Optional[str] = None
    ) -> list[GlActualDetail]:
        """List GL actual details joined to their account's mapped category code."""
        pass

    @abstractmethod
    def delete_gl_actual_details(self, farm_id: int, fiscal_year: int) -> int:
        """Delete every GL actual detail of a fiscal year. Returns count."""
        pass
