"""Default category tree and GL chart for a new farm."""

from typing import Any, Iterable, Optional

from farmledger.domain.entities import CategoryType

# (code, display_name, parent_code, sort_order, category_type)
DEFAULT_CATEGORIES = [
    # Root categories
    ("revenue", "Revenue", None, 1, CategoryType.REVENUE),
    ("inputs", "Inputs", None, 2, CategoryType.INPUT),
    ("lpm", "Labour, Power & Machinery", None, 3, CategoryType.LPM),
    ("lbf", "Land, Buildings & Finance", None, 4, CategoryType.LBF),
    ("insurance", "Insurance", None, 5, CategoryType.INSURANCE),
    # Revenue subcategories (crop revenue is generated per farm)
    ("rev_other_income", "Other Income", "revenue", 90, CategoryType.REVENUE),
    # Inputs subcategories
    ("input_seed", "Seed", "inputs", 1, CategoryType.INPUT),
    ("input_fert", "Fertilizer", "inputs", 2, CategoryType.INPUT),
    ("input_chem", "Chemical", "inputs", 3, CategoryType.INPUT),
    # LPM subcategories
    ("lpm_personnel", "Personnel", "lpm", 1, CategoryType.LPM),
    ("lpm_fog", "Fuel, Oil & Grease", "lpm", 2, CategoryType.LPM),
    ("lpm_repairs", "Repairs", "lpm", 3, CategoryType.LPM),
    ("lpm_shop", "Shop", "lpm", 4, CategoryType.LPM),
    # LBF subcategories
    ("lbf_rent_interest", "Rent & Interest", "lbf", 1, CategoryType.LBF),
    # Insurance subcategories
    ("ins_crop", "Crop Insurance", "insurance", 1, CategoryType.INSURANCE),
    ("ins_other", "Other Insurance", "insurance", 2, CategoryType.INSURANCE),
]

# (account_number, account_name, category_code)
DEFAULT_GL_ACCOUNTS = [
    ("4100", "Grain Sales", None),
    ("4900", "Other Farm Income", "rev_other_income"),
    ("5100", "Seed", "input_seed"),
    ("5110", "Seed Treatment", "input_seed"),
    ("5200", "Fertilizer", "input_fert"),
    ("5300", "Herbicide", "input_chem"),
    ("5310", "Fungicide & Insecticide", "input_chem"),
    ("6100", "Wages & Benefits", "lpm_personnel"),
    ("6110", "Contract Labour", "lpm_personnel"),
    ("6200", "Fuel", "lpm_fog"),
    ("6210", "Oil & Grease", "lpm_fog"),
    ("6300", "Machinery Repairs", "lpm_repairs"),
    ("6310", "Building Repairs", "lpm_repairs"),
    ("6400", "Shop Supplies", "lpm_shop"),
    ("7100", "Land Rent", "lbf_rent_interest"),
    ("7200", "Interest Expense", "lbf_rent_interest"),
    ("8100", "Crop Insurance Premiums", "ins_crop"),
    ("8200", "General Farm Insurance", "ins_other"),
]

CROP_REVENUE_FIRST_SORT_ORDER = 10


def crop_revenue_code(name: str) -> str:
    """Return the revenue category code for a crop name."""
    return "rev_" + "_".join(name.strip().lower().split())


def generate_crop_revenue_categories(
    crops: Optional[Iterable[dict[str, Any]]],
) -> list[tuple[str, str, Optional[str], int, CategoryType]]:
    """Build one revenue leaf per crop, in the shape of DEFAULT_CATEGORIES.

    Crops without a name are ignored.
    """
    if not crops:
        return []

    categories = []
    for crop in crops:
        name = (crop.get("name") or "").strip()
        if not name:
            continue
        categories.append(
            (
                crop_revenue_code(name),
                f"{name} Revenue",
                "revenue",
                CROP_REVENUE_FIRST_SORT_ORDER + len(categories),
                CategoryType.REVENUE,
            )
        )
    return categories
