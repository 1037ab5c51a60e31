"""Parent-sum recalculation over a farm's category tree.

Monthly values are stored as flat ``code -> value`` maps that hold both leaf
entries and derived parent entries. The helpers here rebuild every parent
entry from its children without touching leaf or unrelated keys.
"""

from collections import defaultdict
from typing import Iterable, Mapping, Optional, Sequence

from farmledger.domain.entities import Category


def build_children_index(categories: Iterable[Category]) -> dict[Optional[int], list[Category]]:
    """Index categories by parent ID (``None`` holds the roots)."""
    children: dict[Optional[int], list[Category]] = defaultdict(list)
    for cat in categories:
        children[cat.parent_id].append(cat)
    return children


def leaf_codes(categories: Iterable[Category]) -> list[str]:
    """Return codes of categories that no other category names as parent."""
    categories = list(categories)
    parent_ids = {cat.parent_id for cat in categories if cat.parent_id is not None}
    return [cat.code for cat in categories if cat.id not in parent_ids]


def recalc_parent_sums(
    flat_data: Mapping[str, float], categories: Sequence[Category]
) -> dict[str, float]:
    """Recompute every parent category value as the sum of its direct children.

    Args:
        flat_data: Mapping of category code to value (leaves, parents and
            arbitrary extra keys)
        categories: Categories of one farm

    Returns:
        New mapping where each category with children holds the sum of its
        children (missing children count as 0). Leaf values and keys that
        are not parent categories are copied unchanged. The input is not
        modified.
    """
    result = dict(flat_data)
    children_index = build_children_index(categories)
    sums: dict[int, float] = {}

    def value_of(cat: Category) -> float:
        children = children_index.get(cat.id)
        if not children:
            return result.get(cat.code, 0) or 0
        if cat.id not in sums:
            sums[cat.id] = sum(value_of(child) for child in children)
        return sums[cat.id]

    for cat in categories:
        if children_index.get(cat.id):
            result[cat.code] = value_of(cat)

    return result


def scale_values(data: Mapping[str, float], factor: float) -> dict[str, float]:
    """Multiply every value by ``factor`` (per-unit to accounting)."""
    return {code: value * factor for code, value in data.items()}


def divide_values(data: Mapping[str, float], divisor: float) -> dict[str, float]:
    """Divide every value by ``divisor`` (accounting to per-unit).

    A zero divisor yields 0 for every key rather than infinity or NaN.
    """
    if not divisor:
        return {code: 0.0 for code in data}
    return {code: value / divisor for code, value in data.items()}
