"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from whitehatlink import __version__
from whitehatlink.api.deps import get_db_session
from whitehatlink.api.schemas import HealthResponse
from whitehatlink.db.repositories.inventory import InventoryRepository

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(session: AsyncSession = Depends(get_db_session)):
    """Check API and database health."""
    repo = InventoryRepository(session)
    db_ok = await repo.check_health()

    return HealthResponse(
        status="ok" if db_ok else "degraded",
        version=__version__,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
