"""Configuration management for the White Hat Link backend.

Settings are loaded from environment variables using pydantic-settings.
They are built once at startup and handed explicitly to the middleware stack
and (through FastAPI dependencies) to route handlers.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENVIRONMENTS = {"development", "production", "test"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional secrets (features degrade gracefully when missing):
    - RESEND_API_KEY: email notifications are skipped without it
    - REVALIDATE_SECRET: the revalidation endpoint rejects every call without it

    Runtime mode:
    - ENVIRONMENT: development (default), production or test. Only
      "development" relaxes the CSP and drops HSTS.
    """

    environment: str = Field(default="development")

    # Site identity
    site_url: str = Field(default="https://whitehatlink.org", description="Public origin of the site")
    site_domain: str = Field(default="whitehatlink.org")
    admin_path_prefix: str = Field(
        default="/admin",
        description="Back-office routes; exempt from lowercase canonicalization",
    )

    # Content-Security-Policy
    csp_report_only: bool = Field(
        default=False,
        description="Also emit a report-only policy that posts violations to /api/csp-report",
    )

    # Email (Resend)
    resend_api_key: str = Field(default="", description="Resend API key for email sending")
    resend_from_email: str = Field(default="notifications@whitehatlink.org")
    team_email: str = Field(default="hello@whitehatlink.org", description="Inbox receiving form notifications")
    reply_to_email: str = Field(default="hello@whitehatlink.org")

    # Cache revalidation
    revalidate_secret: str = Field(default="", description="Bearer token for POST /api/revalidate")
    inventory_cache_ttl: int = Field(default=300, ge=0, le=86400, description="Seconds inventory responses stay cached")

    # Rate limits (slowapi notation)
    inquiry_rate_limit: str = Field(default="5/minute")
    contact_rate_limit: str = Field(default="3/minute")

    # Database pool configuration (PostgreSQL only)
    db_pool_size: int = Field(default=10, ge=1, le=50, description="SQLAlchemy connection pool size")
    db_max_overflow: int = Field(default=20, ge=0, le=100, description="Max overflow connections beyond pool_size")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ENVIRONMENTS:
            raise ValueError(f"ENVIRONMENT must be one of {sorted(ENVIRONMENTS)} (got {v!r})")
        return v

    @field_validator("admin_path_prefix")
    @classmethod
    def validate_admin_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("ADMIN_PATH_PREFIX must start with '/'")
        return v.rstrip("/") or "/admin"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded once at startup and reused throughout the process
    lifetime; the environment mode never changes at runtime.

    Raises:
        ValidationError: If a setting is present but invalid
    """
    return Settings()
