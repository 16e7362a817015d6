"""Inventory repository: catalog filtering, sorting and bulk import.

Query construction is split from execution (``build_conditions`` /
``build_order_by``) so list and count share the exact same filters.
"""

from sqlalchemy import ColumnElement, func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from whitehatlink.db.models import InventoryModel, item_to_row, model_to_item
from whitehatlink.inventory.models import AVAILABLE, InventoryItem, InventoryQuery, SortKey
from whitehatlink.monitoring import get_logger

_ORDER_BY = {
    "dr": InventoryModel.dr.desc(),
    "traffic": InventoryModel.traffic.desc(),
    "price": InventoryModel.price.asc(),
    "recent": InventoryModel.created_at.desc(),
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_conditions(query: InventoryQuery) -> list[ColumnElement[bool]]:
    """Translate an InventoryQuery into WHERE conditions (joined with AND).

    Only available listings are ever matched. The niche filter is
    case-insensitive and matches either the whole niche or a substring
    ("tech" matches "Tech" and "FinTech").
    """
    conditions: list[ColumnElement[bool]] = [InventoryModel.status == AVAILABLE]

    if query.niche:
        niche = query.niche.lower()
        conditions.append(
            (func.lower(InventoryModel.niche) == niche)
            | func.lower(InventoryModel.niche).like(f"%{_escape_like(niche)}%", escape="\\")
        )
    if query.min_dr is not None:
        conditions.append(InventoryModel.dr >= query.min_dr)
    if query.max_price is not None:
        conditions.append(InventoryModel.price <= query.max_price)
    if query.max_spam_score is not None:
        conditions.append(InventoryModel.spam_score <= query.max_spam_score)
    if query.min_traffic is not None:
        conditions.append(InventoryModel.traffic >= query.min_traffic)
    if query.google_news_only:
        conditions.append(InventoryModel.google_news.is_(True))
    if query.link_type:
        conditions.append(InventoryModel.link_type == query.link_type)
    if query.region:
        conditions.append(InventoryModel.region == query.region)
    if query.language:
        conditions.append(InventoryModel.language == query.language)

    return conditions


def build_order_by(sort: SortKey | None) -> list:
    """ORDER BY clauses for a sort key; DR descending by default.

    The primary key is a tiebreaker so pagination is stable.
    """
    return [_ORDER_BY.get(sort or "dr", _ORDER_BY["dr"]), InventoryModel.id.asc()]


class InventoryRepository:
    """Data access for the inventory catalog.

    Attributes:
        session: AsyncSession for database operations
        logger: Structured logger instance
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.logger = get_logger()

    async def list_items(self, query: InventoryQuery) -> list[InventoryItem]:
        """Items matching the query, sorted and paginated."""
        stmt = (
            select(InventoryModel)
            .where(*build_conditions(query))
            .order_by(*build_order_by(query.sort))
            .limit(query.limit)
            .offset(query.offset)
        )
        try:
            result = await self.session.execute(stmt)
        except Exception as e:
            self.logger.error(
                "inventory_query_failed",
                error=str(e),
                error_type=type(e).__name__,
                exc_info=True,
            )
            raise
        return [model_to_item(m) for m in result.scalars().all()]

    async def count_items(self, query: InventoryQuery) -> int:
        """Number of items matching the query's filters (pagination ignored)."""
        stmt = select(func.count()).select_from(InventoryModel).where(*build_conditions(query))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def list_niches(self, limit: int = 20) -> list[str]:
        """Niches of available items, most common first."""
        count = func.count(InventoryModel.id)
        stmt = (
            select(InventoryModel.niche)
            .where(InventoryModel.status == AVAILABLE)
            .group_by(InventoryModel.niche)
            .order_by(count.desc(), InventoryModel.niche.asc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_regions(self) -> list[str]:
        """Distinct regions of available items, alphabetical."""
        stmt = (
            select(InventoryModel.region)
            .where(InventoryModel.status == AVAILABLE, InventoryModel.region.is_not(None))
            .distinct()
            .order_by(InventoryModel.region.asc())
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def bulk_upsert(self, items: list[InventoryItem]) -> int:
        """Insert new items and update existing ones by id.

        Uses session.merge so the same code path works on SQLite and
        PostgreSQL. Caller commits.

        Returns:
            Number of items written
        """
        for item in items:
            await self.session.merge(InventoryModel(**item_to_row(item)))
        await self.session.flush()

        self.logger.info("inventory_upserted", count=len(items))
        return len(items)

    async def check_health(self) -> bool:
        """True when the database answers a trivial query."""
        try:
            await self.session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            self.logger.warning("inventory_db_unhealthy", error=str(e))
            return False
