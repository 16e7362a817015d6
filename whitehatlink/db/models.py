"""SQLAlchemy ORM models for the inventory catalog.

Mirrors the InventoryItem pydantic model; converters translate between
the two so route handlers never touch ORM objects.
"""

import json
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from whitehatlink.inventory.models import InventoryItem


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class InventoryModel(Base):
    """One publisher site available for link placement.

    Indexes:
        - (status, dr): Default listing order
        - (status, niche): Niche filter and niche counts
        - (status, price): Price sort and max-price filter
    """

    __tablename__ = "inventory"

    id: Mapped[str] = mapped_column(String(100), primary_key=True)
    domain: Mapped[str] = mapped_column(String(255), nullable=False)
    niche: Mapped[str] = mapped_column(String(50), nullable=False)
    dr: Mapped[int] = mapped_column(Integer, nullable=False)
    traffic: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    region: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Available")
    spam_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    google_news: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    moz_da: Mapped[int | None] = mapped_column(Integer, nullable=True)
    semrush_as: Mapped[int | None] = mapped_column(Integer, nullable=True)
    referring_domains: Mapped[int | None] = mapped_column(Integer, nullable=True)
    completion_rate: Mapped[float | None] = mapped_column(Float, nullable=True)
    avg_lifetime: Mapped[float | None] = mapped_column(Float, nullable=True)
    tat: Mapped[str | None] = mapped_column(String(100), nullable=True)
    link_type: Mapped[str] = mapped_column(String(20), nullable=False, default="Unknown")
    language: Mapped[str] = mapped_column(String(50), nullable=False, default="English")
    content_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    traffic_ahrefs: Mapped[int | None] = mapped_column(Integer, nullable=True)
    traffic_similarweb: Mapped[int | None] = mapped_column(Integer, nullable=True)
    traffic_semrush: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # JSON-encoded list of article URLs
    sample_urls: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        Index("ix_inventory_status_dr", "status", "dr"),
        Index("ix_inventory_status_niche", "status", "niche"),
        Index("ix_inventory_status_price", "status", "price"),
    )


def model_to_item(model: InventoryModel) -> InventoryItem:
    """Convert an InventoryModel row to an InventoryItem."""
    return InventoryItem(
        id=model.id,
        domain=model.domain,
        niche=model.niche,
        dr=model.dr,
        traffic=model.traffic,
        price=model.price,
        region=model.region,
        status=model.status,
        spam_score=model.spam_score,
        google_news=model.google_news,
        moz_da=model.moz_da,
        semrush_as=model.semrush_as,
        referring_domains=model.referring_domains,
        completion_rate=model.completion_rate,
        avg_lifetime=model.avg_lifetime,
        tat=model.tat,
        link_type=model.link_type,
        language=model.language,
        content_size=model.content_size,
        sample_urls=json.loads(model.sample_urls) if model.sample_urls else [],
        traffic_ahrefs=model.traffic_ahrefs,
        traffic_similarweb=model.traffic_similarweb,
        traffic_semrush=model.traffic_semrush,
        created_at=model.created_at,
    )


def item_to_row(item: InventoryItem) -> dict:
    """Column values for inserting/updating an InventoryItem."""
    row = item.model_dump(exclude={"sample_urls", "created_at"})
    row["sample_urls"] = json.dumps(item.sample_urls) if item.sample_urls else None
    created_at = item.created_at
    if created_at is not None:
        # Stored as naive UTC
        if created_at.tzinfo is not None:
            created_at = created_at.astimezone(timezone.utc).replace(tzinfo=None)
        row["created_at"] = created_at
    return row
