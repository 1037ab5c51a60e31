"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the JSON columns and string
enums of the storage schema never leak into the ledger engine.
"""

from typing import Optional

from farmledger.domain import entities as domain
from farmledger.database.models import (
    Assumption as ORMAssumption,
    Category as ORMCategory,
    Farm as ORMFarm,
    GlAccount as ORMGlAccount,
    GlActualDetail as ORMGlActualDetail,
    MonthlyData as ORMMonthlyData,
    MonthlyDataFrozen as ORMMonthlyDataFrozen,
)


def farm_to_domain(orm_farm: ORMFarm) -> domain.Farm:
    """Convert SQLAlchemy Farm model to domain Farm entity."""
    return domain.Farm(
        id=orm_farm.id,
        name=orm_farm.name,
        created_at=orm_farm.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        farm_id=orm_category.farm_id,
        code=orm_category.code,
        display_name=orm_category.display_name,
        parent_id=orm_category.parent_id,
        path=orm_category.path,
        level=orm_category.level,
        sort_order=orm_category.sort_order,
        category_type=domain.CategoryType(orm_category.category_type),
        is_active=orm_category.is_active,
    )


def assumption_to_domain(orm_assumption: ORMAssumption) -> domain.Assumption:
    """Convert SQLAlchemy Assumption model to domain Assumption entity."""
    return domain.Assumption(
        id=orm_assumption.id,
        farm_id=orm_assumption.farm_id,
        fiscal_year=orm_assumption.fiscal_year,
        total_acres=orm_assumption.total_acres,
        crops=tuple(dict(crop) for crop in (orm_assumption.crops_json or [])),
        start_month=orm_assumption.start_month,
        is_frozen=orm_assumption.is_frozen,
        frozen_at=orm_assumption.frozen_at,
    )


def monthly_record_to_domain(
    orm_row: ORMMonthlyData | ORMMonthlyDataFrozen,
) -> domain.MonthlyRecord:
    """Convert a live or frozen monthly row to a domain MonthlyRecord."""
    return domain.MonthlyRecord(
        farm_id=orm_row.farm_id,
        fiscal_year=orm_row.fiscal_year,
        month=orm_row.month,
        record_type=domain.RecordType(orm_row.type),
        data=dict(orm_row.data_json or {}),
        is_actual=bool(orm_row.is_actual),
        comments=dict(orm_row.comments_json or {}),
    )


def gl_account_to_domain(orm_account: ORMGlAccount) -> domain.GlAccount:
    """Convert SQLAlchemy GlAccount model to domain GlAccount entity."""
    return domain.GlAccount(
        id=orm_account.id,
        farm_id=orm_account.farm_id,
        account_number=orm_account.account_number,
        account_name=orm_account.account_name,
        category_id=orm_account.category_id,
        is_active=orm_account.is_active,
    )


def gl_actual_detail_to_domain(
    orm_detail: ORMGlActualDetail, category_code: Optional[str] = None
) -> domain.GlActualDetail:
    """Convert SQLAlchemy GlActualDetail model to domain GlActualDetail entity."""
    return domain.GlActualDetail(
        farm_id=orm_detail.farm_id,
        fiscal_year=orm_detail.fiscal_year,
        month=orm_detail.month,
        gl_account_id=orm_detail.gl_account_id,
        amount=orm_detail.amount,
        category_code=category_code,
    )
