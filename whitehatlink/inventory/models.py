"""Pydantic models for link-placement inventory and catalog queries.

An inventory item is one publisher site where a placement can be bought.
Metric fields (DR, traffic, spam score) come from third-party SEO tools;
``price`` is the customer-facing price in USD.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LinkType = Literal["Dofollow", "Nofollow", "Unknown"]
SortKey = Literal["dr", "traffic", "price", "recent"]

AVAILABLE = "Available"


class InventoryItem(BaseModel):
    """Single publisher site in the catalog.

    Attributes:
        id: Stable identifier (scraper site id, falls back to the domain)
        domain: Publisher hostname
        niche: Inferred topical category (e.g. "Tech", "Finance")
        dr: Domain rating (Ahrefs DR, or Moz DA when DR is missing)
        traffic: Monthly organic traffic, max across providers
        price: Customer price in USD
        region: Normalized audience country ("USA", "UK", ..., "Global")
        status: Listing status; only "Available" items are shown
    """

    id: str
    domain: str
    niche: str
    dr: int = Field(..., ge=0, le=100)
    traffic: int = Field(default=0, ge=0)
    price: int = Field(..., ge=0)
    region: str | None = None
    status: str = AVAILABLE
    spam_score: int = Field(default=0, ge=0)
    google_news: bool = False
    moz_da: int | None = None
    semrush_as: int | None = None
    referring_domains: int | None = None
    completion_rate: float | None = None
    avg_lifetime: float | None = None
    tat: str | None = None
    link_type: LinkType = "Unknown"
    language: str = "English"
    content_size: int | None = None
    sample_urls: list[str] = Field(default_factory=list)
    traffic_ahrefs: int | None = None
    traffic_similarweb: int | None = None
    traffic_semrush: int | None = None
    created_at: datetime | None = None


class InventoryQuery(BaseModel):
    """Catalog filters, sort order and pagination.

    All filters are optional and combine with AND. Only available items
    are ever returned.
    """

    niche: str | None = Field(default=None, max_length=100)
    min_dr: int | None = Field(default=None, ge=0, le=100)
    max_price: int | None = Field(default=None, ge=0)
    max_spam_score: int | None = Field(default=None, ge=0)
    min_traffic: int | None = Field(default=None, ge=0)
    google_news_only: bool = False
    link_type: Literal["Dofollow", "Nofollow"] | None = None
    region: str | None = Field(default=None, max_length=100)
    language: str | None = Field(default=None, max_length=50)
    sort: SortKey = "dr"
    limit: int = Field(default=100, ge=1, le=500)
    offset: int = Field(default=0, ge=0)

    @field_validator("niche", "region", "language")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty query-string values ("?niche=") as no filter."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    def cache_key(self) -> str:
        """Stable key for response caching."""
        return self.model_dump_json()
