"""Category domain service."""

import logging
from typing import Any, Iterable, Optional

from farmledger.database.base import Database
from farmledger.domain.category_template import (
    DEFAULT_CATEGORIES,
    DEFAULT_GL_ACCOUNTS,
    generate_crop_revenue_categories,
)
from farmledger.domain.entities import Category, CategoryTreeNode, CategoryType
from farmledger.domain.errors import (
    DependencyError,
    DuplicateCategoryCodeError,
    InvalidCategoryError,
    NotFoundError,
    ValidationError,
    category_has_children,
    category_not_found,
    category_not_leaf,
    duplicate_category_code,
)
from farmledger.domain.rollup import build_children_index, leaf_codes

logger = logging.getLogger(__name__)

ROOT_SORT_ORDER_GAP = 100


class CategoryService:
    """Service for managing a farm's category tree."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_categories(self, farm_id: int) -> list[Category]:
        """Get a farm's active categories ordered by (level, sort_order)."""
        return self.db.list_categories(farm_id)

    def get_leaf_categories(self, farm_id: int) -> list[Category]:
        """Get categories that have no children."""
        categories = self.get_categories(farm_id)
        leaves = set(leaf_codes(categories))
        return [cat for cat in categories if cat.code in leaves]

    def get_category(self, farm_id: int, code: str) -> Optional[Category]:
        """Get category by code, or None if not found."""
        return self.db.get_category_by_code(farm_id, code)

    def validate_leaf(self, farm_id: int, code: str) -> Category:
        """Ensure ``code`` names an existing leaf category of the farm.

        Returns:
            The leaf category

        Raises:
            InvalidCategoryError: If the code is unknown or has children
        """
        categories = self.get_categories(farm_id)
        category = next((cat for cat in categories if cat.code == code), None)
        if category is None:
            raise InvalidCategoryError(category_not_found(code))
        if any(cat.parent_id == category.id for cat in categories):
            raise InvalidCategoryError(category_not_leaf(code))
        return category

    def create_category(
        self,
        farm_id: int,
        code: str,
        display_name: str,
        category_type: CategoryType | str,
        parent_code: Optional[str] = None,
    ) -> int:
        """Create a category.

        Args:
            farm_id: Farm ID
            code: Category code, unique per farm
            display_name: Name shown to users
            category_type: One of the CategoryType values
            parent_code: Optional code of the parent category

        Returns:
            Category ID

        Raises:
            ValidationError: If a required field is missing or the type is unknown
            NotFoundError: If the parent category doesn't exist or is inactive
            DuplicateCategoryCodeError: If the code already exists for the farm
        """
        code = (code or "").strip()
        display_name = (display_name or "").strip()
        if not code or not display_name:
            raise ValidationError("code, display_name and category_type are required")
        try:
            category_type = CategoryType(category_type)
        except ValueError:
            raise ValidationError(f"Invalid category type '{category_type}'")

        if self.db.get_category_by_code(farm_id, code) is not None:
            raise DuplicateCategoryCodeError(duplicate_category_code(code))

        # Sort orders are computed over inactive rows too
        all_categories = self.db.list_categories(farm_id, include_inactive=True)

        if parent_code is not None:
            parent = self.db.get_category_by_code(farm_id, parent_code)
            if parent is None or not parent.is_active:
                raise NotFoundError(f"Parent category '{parent_code}' not found")
            siblings = [cat.sort_order for cat in all_categories if cat.parent_id == parent.id]
            sort_order = max(siblings) + 1 if siblings else parent.sort_order + 1
            return self.db.create_category(
                farm_id=farm_id,
                code=code,
                display_name=display_name,
                category_type=category_type,
                parent_id=parent.id,
                path=f"{parent.path}.{code}",
                level=parent.level + 1,
                sort_order=sort_order,
            )

        roots = [cat.sort_order for cat in all_categories if cat.parent_id is None]
        return self.db.create_category(
            farm_id=farm_id,
            code=code,
            display_name=display_name,
            category_type=category_type,
            parent_id=None,
            path=code,
            level=0,
            sort_order=max(roots, default=0) + ROOT_SORT_ORDER_GAP,
        )

    def update_category(
        self,
        farm_id: int,
        code: str,
        display_name: Optional[str] = None,
        sort_order: Optional[int] = None,
    ) -> None:
        """Rename or reorder a category.

        Raises:
            NotFoundError: If the category doesn't exist
            ValidationError: If the new display name is empty
        """
        category = self.db.get_category_by_code(farm_id, code)
        if category is None:
            raise NotFoundError(category_not_found(code))
        if display_name is not None and not display_name.strip():
            raise ValidationError("Category display name cannot be empty")

        self.db.update_category(
            category.id,
            display_name=display_name.strip() if display_name is not None else None,
            sort_order=sort_order,
        )

    def deactivate_category(self, farm_id: int, code: str) -> None:
        """Soft-delete a category.

        Raises:
            NotFoundError: If the category doesn't exist
            DependencyError: If the category still has active children
        """
        category = self.db.get_category_by_code(farm_id, code)
        if category is None:
            raise NotFoundError(category_not_found(code))

        children = [cat for cat in self.get_categories(farm_id) if cat.parent_id == category.id]
        if children:
            raise DependencyError(category_has_children(code, len(children)))

        self.db.update_category(category.id, is_active=False)

    def get_category_tree(self, farm_id: int) -> list[CategoryTreeNode]:
        """Get full category tree.

        Returns:
            List of root nodes with nested children, in display order
        """
        categories = self.get_categories(farm_id)
        children_index = build_children_index(categories)

        def build_node(cat: Category) -> CategoryTreeNode:
            kids = sorted(children_index.get(cat.id, []), key=lambda c: c.sort_order)
            return CategoryTreeNode(
                id=cat.id,
                code=cat.code,
                display_name=cat.display_name,
                parent_id=cat.parent_id,
                level=cat.level,
                category_type=cat.category_type,
                children=tuple(build_node(kid) for kid in kids),
            )

        roots = sorted(children_index.get(None, []), key=lambda c: c.sort_order)
        return [build_node(root) for root in roots]

    def init_farm_categories(
        self, farm_id: int, crops: Optional[Iterable[dict[str, Any]]] = None
    ) -> dict[str, int]:
        """Create the default category tree, crop revenue leaves and GL chart.

        Existing category codes and GL account numbers are left untouched, so
        running this twice is harmless.

        Returns:
            Dict with ``categories`` and ``gl_accounts`` created counts
        """
        crop_categories = generate_crop_revenue_categories(crops)
        template = []
        for entry in DEFAULT_CATEGORIES:
            if entry[0] == "rev_other_income":
                template.extend(crop_categories)
            template.append(entry)

        existing = {cat.code: cat for cat in self.db.list_categories(farm_id, include_inactive=True)}
        created_categories = 0

        for code, display_name, parent_code, sort_order, category_type in template:
            if code in existing:
                continue
            parent = existing.get(parent_code) if parent_code else None
            if parent_code and parent is None:
                logger.warning("Skipping category %s: parent %s missing", code, parent_code)
                continue
            category_id = self.db.create_category(
                farm_id=farm_id,
                code=code,
                display_name=display_name,
                category_type=category_type,
                parent_id=parent.id if parent else None,
                path=f"{parent.path}.{code}" if parent else code,
                level=parent.level + 1 if parent else 0,
                sort_order=sort_order,
            )
            existing[code] = self.db.get_category(category_id)
            created_categories += 1

        created_accounts = 0
        for account_number, account_name, category_code in DEFAULT_GL_ACCOUNTS:
            if self.db.get_gl_account_by_number(farm_id, account_number) is not None:
                continue
            category = existing.get(category_code) if category_code else None
            self.db.save_gl_account(
                farm_id,
                account_number,
                account_name,
                category_id=category.id if category else None,
            )
            created_accounts += 1

        logger.info(
            "Initialized farm %s: %d categories, %d GL accounts",
            farm_id,
            created_categories,
            created_accounts,
        )
        return {"categories": created_categories, "gl_accounts": created_accounts}
