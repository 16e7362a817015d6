"""Inventory catalog endpoints: filtered listing, niche and region facets."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from whitehatlink.api.deps import CacheDep, SettingsDep, get_db_session
from whitehatlink.api.schemas import InventoryListResponse, NichesResponse, RegionsResponse
from whitehatlink.db.repositories.inventory import InventoryRepository
from whitehatlink.inventory.models import InventoryQuery

router = APIRouter(prefix="/inventory", tags=["inventory"])

INVENTORY_TAG = "inventory"

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


@router.get("", response_model=InventoryListResponse)
async def list_inventory(
    request: Request,
    query: Annotated[InventoryQuery, Query()],
    session: SessionDep,
    settings: SettingsDep,
    cache: CacheDep,
):
    """List available placements matching the filters.

    Example: /api/inventory?niche=tech&min_dr=50&max_price=500&sort=price
    """
    path = request.url.path
    cached = cache.get(path, query.cache_key())
    if cached is not None:
        return cached

    repo = InventoryRepository(session)
    response = InventoryListResponse(
        items=await repo.list_items(query),
        total=await repo.count_items(query),
        limit=query.limit,
        offset=query.offset,
    )
    cache.set(path, query.cache_key(), response, settings.inventory_cache_ttl, tags=(INVENTORY_TAG,))
    return response


@router.get("/niches", response_model=NichesResponse)
async def list_niches(
    request: Request,
    session: SessionDep,
    settings: SettingsDep,
    cache: CacheDep,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
):
    """Niches with available inventory, most common first."""
    key = str(limit)
    cached = cache.get(request.url.path, key)
    if cached is not None:
        return cached

    response = NichesResponse(niches=await InventoryRepository(session).list_niches(limit))
    cache.set(request.url.path, key, response, settings.inventory_cache_ttl, tags=(INVENTORY_TAG,))
    return response


@router.get("/regions", response_model=RegionsResponse)
async def list_regions(request: Request, session: SessionDep, settings: SettingsDep, cache: CacheDep):
    """Regions with available inventory, alphabetical."""
    cached = cache.get(request.url.path)
    if cached is not None:
        return cached

    response = RegionsResponse(regions=await InventoryRepository(session).list_regions())
    cache.set(request.url.path, "", response, settings.inventory_cache_ttl, tags=(INVENTORY_TAG,))
    return response
