"""FastAPI application factory."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from whitehatlink import __version__
from whitehatlink.api.config import Settings, get_settings
from whitehatlink.api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    limiter,
)
from whitehatlink.api.middleware.rate_limit import rate_limit_exceeded_handler
from whitehatlink.api.routers import csp_report, forms, health, inventory, revalidate, seo


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown hooks."""
    settings = get_settings()

    from whitehatlink.db import init_database
    from whitehatlink.monitoring import configure_logging

    configure_logging(settings.environment)
    await init_database()
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="WhiteHatLink",
        description="Link placement marketplace API",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware stack (runs in REVERSE order of registration)
    # Last added = first executed

    # 2. Canonical redirects + security headers (runs inside logging)
    app.add_middleware(SecurityHeadersMiddleware, settings=settings)

    # 1. Request logging (executes first, sees redirects and final responses)
    app.add_middleware(RequestLoggingMiddleware)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    for router in (forms.router, csp_report.router, inventory.router, revalidate.router, health.router):
        app.include_router(router, prefix="/api")
    app.include_router(seo.router)

    # Serve built static assets if present
    static_dir = Path(__file__).parent.parent.parent / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    return app
