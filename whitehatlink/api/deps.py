"""Dependency injection for FastAPI routes."""

from typing import Annotated, AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from whitehatlink.api.config import Settings, get_settings
from whitehatlink.api.state import ResponseCache, response_cache
from whitehatlink.db.session import AsyncSessionFactory


def get_app_settings() -> Settings:
    """Wrap the cached get_settings() for use with Depends()."""
    return get_settings()


SettingsDep = Annotated[Settings, Depends(get_app_settings)]


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Yield an async database session, auto-closing on completion."""
    session = AsyncSessionFactory()
    try:
        yield session
    finally:
        await session.close()


def get_response_cache() -> ResponseCache:
    return response_cache


CacheDep = Annotated[ResponseCache, Depends(get_response_cache)]
