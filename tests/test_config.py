"""Tests for settings loading and validation."""

import pytest
from pydantic import ValidationError

from whitehatlink.api.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    settings = Settings(_env_file=None)

    assert settings.environment == "development"
    assert settings.is_development is True
    assert settings.admin_path_prefix == "/admin"
    assert settings.inquiry_rate_limit == "5/minute"
    assert settings.contact_rate_limit == "3/minute"


def test_environment_normalized(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", " Production ")
    settings = Settings(_env_file=None)

    assert settings.environment == "production"
    assert settings.is_development is False


def test_unknown_environment_rejected(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_test_environment_is_not_development():
    assert Settings(environment="test", _env_file=None).is_development is False


def test_admin_prefix_trailing_slash_stripped():
    assert Settings(admin_path_prefix="/cms/", _env_file=None).admin_path_prefix == "/cms"


def test_admin_prefix_must_be_absolute():
    with pytest.raises(ValidationError):
        Settings(admin_path_prefix="cms", _env_file=None)


def test_get_settings_cached(monkeypatch):
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()
