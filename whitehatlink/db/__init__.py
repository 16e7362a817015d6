"""Database layer: ORM models, async sessions and repositories.

Public exports:
    - Base: SQLAlchemy declarative base
    - InventoryModel: ORM model for the inventory catalog
    - get_session: Async context manager for database sessions
    - get_database_url: Database URL resolver
    - InventoryRepository: Catalog queries and bulk import
    - init_database: Create tables if missing
"""

from whitehatlink.db.models import Base, InventoryModel, item_to_row, model_to_item
from whitehatlink.db.repositories.inventory import InventoryRepository
from whitehatlink.db.session import get_database_url, get_session


async def init_database() -> None:
    """Create tables that do not exist yet.

    Schema changes beyond that are applied out of band.
    """
    from whitehatlink.db.session import engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


__all__ = [
    "Base",
    "InventoryModel",
    "InventoryRepository",
    "get_session",
    "get_database_url",
    "init_database",
    "item_to_row",
    "model_to_item",
]
