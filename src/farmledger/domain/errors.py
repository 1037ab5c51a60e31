"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class InvalidCategoryError(ValidationError):
    """Category code is unknown for the farm or is not a leaf."""


class AssumptionNotFoundError(NotFoundError):
    """No assumption exists for the farm and fiscal year."""

    def __init__(self, farm_id: int, fiscal_year: int):
        super().__init__(assumption_not_found(farm_id, fiscal_year))
        self.farm_id = farm_id
        self.fiscal_year = fiscal_year


class FarmNotFoundError(NotFoundError):
    """Farm does not exist."""


class GlAccountNotFoundError(NotFoundError):
    """GL account does not exist for the farm."""


class DuplicateCategoryCodeError(ConflictError):
    """Category code already exists for the farm."""


class BudgetFreezeError(ConflictError):
    """Freeze or unfreeze attempted in the wrong state."""


LOCK_REASON_ACTUAL = "actual"
LOCK_REASON_FROZEN = "frozen"


class LockedMonthError(ConflictError):
    """Direct edit attempted on a locked month.

    ``reason`` is either ``"actual"`` (month holds actual data) or
    ``"frozen"`` (the year's budget is frozen).
    """

    def __init__(self, month: str, fiscal_year: int, reason: str, record_type: Optional[str] = None):
        super().__init__(month_locked(month, fiscal_year, reason))
        self.month = month
        self.fiscal_year = fiscal_year
        self.reason = reason
        self.record_type = record_type


def farm_not_found(farm: int | str) -> str:
    """Return message for missing farm."""
    if isinstance(farm, int):
        return f"Farm ID {farm} not found"
    return f"Farm '{farm}' not found"


def category_not_found(code: str) -> str:
    """Return message for missing category by code."""
    return f"Category '{code}' not found"


def category_not_leaf(code: str) -> str:
    """Return message when a computed parent category is edited directly."""
    return f"Cannot edit parent category '{code}' directly; edit one of its subcategories instead"


def duplicate_category_code(code: str) -> str:
    """Return message for duplicate category code."""
    return f"Category code '{code}' already exists for this farm"


def assumption_not_found(farm_id: int, fiscal_year: int) -> str:
    """Return message for missing assumptions."""
    return f"Assumptions not found for farm {farm_id}, FY{fiscal_year}"


def gl_account_not_found(account_number: str) -> str:
    """Return message for missing GL account."""
    return f"GL account '{account_number}' not found"


def month_locked(month: str, fiscal_year: int, reason: str) -> str:
    """Return message for an edit on a locked month."""
    if reason == LOCK_REASON_FROZEN:
        return (
            f"Cannot edit {month} FY{fiscal_year}: the budget is frozen. "
            "Unfreeze the budget first."
        )
    return (
        f"Cannot edit {month} FY{fiscal_year}: month holds actual data and is locked. "
        "Correct the GL actuals and re-run the rollup instead."
    )


def category_has_children(code: str, child_count: int) -> str:
    """Return message when deactivating a category that still has children."""
    return (
        f"Cannot deactivate category '{code}': it has {child_count} active "
        f"subcategor{'ies' if child_count != 1 else 'y'}. Deactivate them first."
    )
