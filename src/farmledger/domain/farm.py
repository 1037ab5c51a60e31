"""Farm domain service."""

from typing import Optional

from farmledger.database.base import Database
from farmledger.domain.entities import Farm
from farmledger.domain.errors import ConflictError, ValidationError


class FarmService:
    """Service for managing farms (tenants)."""

    def __init__(self, db: Database):
        """Initialize farm service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_farm(self, name: str) -> int:
        """Create a new farm.

        Args:
            name: Farm name, unique across farms

        Returns:
            Farm ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a farm with the same name exists
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Farm name cannot be empty")

        for farm in self.db.list_farms():
            if farm.name == name:
                raise ConflictError(f"Farm with name '{name}' already exists")

        return self.db.create_farm(name)

    def get_farm(self, farm_id: int) -> Optional[Farm]:
        """Get farm by ID, or None if not found."""
        return self.db.get_farm(farm_id)

    def list_farms(self) -> list[Farm]:
        """List all farms ordered by name."""
        return self.db.list_farms()
