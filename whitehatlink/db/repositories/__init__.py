"""Repository layer for database access patterns."""

from whitehatlink.db.repositories.inventory import InventoryRepository

__all__ = ["InventoryRepository"]
