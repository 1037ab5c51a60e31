"""Utility for resolving farm names to IDs."""

from farmledger.domain.errors import FarmNotFoundError, farm_not_found
from farmledger.domain.farm import FarmService


def resolve_farm(farm_service: FarmService, farm: str | int) -> int:
    """Resolve farm name or ID to farm ID.

    Args:
        farm_service: FarmService instance
        farm: Farm name (str) or ID (int or string representation of int)

    Returns:
        Farm ID

    Raises:
        FarmNotFoundError: If farm is not found
    """
    if isinstance(farm, int):
        farm_id = farm
    else:
        try:
            farm_id = int(farm)
        except (ValueError, TypeError):
            farm_id = None

    if farm_id is not None:
        if farm_service.get_farm(farm_id) is None:
            raise FarmNotFoundError(farm_not_found(farm_id))
        return farm_id

    for candidate in farm_service.list_farms():
        if candidate.name == farm:
            return candidate.id

    raise FarmNotFoundError(farm_not_found(farm))
