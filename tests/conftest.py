"""Shared pytest fixtures for WhiteHatLink tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from whitehatlink.monitoring import configure_logging


@pytest.fixture(autouse=True)
def setup_test_logging():
    """Configure structlog for test output."""
    configure_logging("development")


@pytest.fixture
def test_settings(monkeypatch):
    """Production-like settings with a known revalidation secret."""
    monkeypatch.setenv("ENVIRONMENT", "production")
    monkeypatch.setenv("REVALIDATE_SECRET", "test-revalidate-secret")
    monkeypatch.setenv("RESEND_API_KEY", "")
    monkeypatch.setenv("INVENTORY_CACHE_TTL", "300")

    from whitehatlink.api.config import get_settings
    get_settings.cache_clear()

    yield get_settings()

    get_settings.cache_clear()


@pytest.fixture
def mock_db_session():
    """Create a mock async DB session that answers SELECT 1."""
    session = AsyncMock()
    session.execute = AsyncMock(return_value=MagicMock())
    session.commit = AsyncMock()
    session.close = AsyncMock()
    session.flush = AsyncMock()
    return session


@pytest.fixture
def app(test_settings, mock_db_session):
    """App with mocked DB dependency and fresh limiter/cache state."""
    from whitehatlink.api.app import create_app
    from whitehatlink.api.deps import get_db_session
    from whitehatlink.api.middleware.rate_limit import limiter
    from whitehatlink.api.state import response_cache

    limiter.reset()
    response_cache.clear()

    app = create_app(test_settings)

    async def override_get_db():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_get_db
    yield app

    app.dependency_overrides.clear()
    response_cache.clear()


@pytest.fixture
def client(app):
    """TestClient that reports redirects instead of following them.

    Not used as a context manager, so the lifespan (which creates tables
    in the configured database) never runs.
    """
    from fastapi.testclient import TestClient

    return TestClient(app, base_url="http://example.com", follow_redirects=False)


@pytest.fixture
def sample_raw_record():
    """One scraped publisher record as exported by the scraper."""
    return {
        "siteId": "site-001",
        "domain": "techcrunchy.com",
        "success": True,
        "timestamp": "2025-01-10T12:00:00Z",
        "data": {
            "ahrefsDR": "72",
            "mozDA": "65",
            "ahrefsOrganicTraffic": "120,000",
            "similarwebTraffic": "95K",
            "semrushTotalTraffic": "80000",
            "contentPlacementPrice": "$150",
            "spamScore": "3%",
            "googleNews": "Yes",
            "country": "🇺🇸 United States",
            "linkAttributionType": "dofollow",
            "requiredContentSize": "800+ words",
            "tat": "3 days\nexpress available",
            "sampleUrls": [
                "https://techcrunchy.com/ai-startups",
                "https://techcrunchy.com/software-review",
            ],
        },
    }
