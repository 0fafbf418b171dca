"""
Tests for configuration validation
"""
import pytest
from pydantic import ValidationError
from leave_compliance.core.config import Settings


def make_settings(**overrides):
    fields = dict(DATABASE_URL="postgresql://test", JWT_SECRET_KEY="test-key")
    fields.update(overrides)
    return Settings(**fields)


def test_prod_settings_rejects_wildcard_origins():
    settings = make_settings(JWT_SECRET_KEY="a" * 32, APP_ENV="prod", ALLOWED_ORIGINS="*")

    with pytest.raises(ValueError, match="ALLOWED_ORIGINS"):
        settings.validate_production()


def test_prod_settings_rejects_short_jwt_secret():
    settings = make_settings(JWT_SECRET_KEY="short", APP_ENV="prod", ALLOWED_ORIGINS="https://example.com")

    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        settings.validate_production()


def test_prod_settings_accepts_explicit_origins_and_long_secret():
    settings = make_settings(JWT_SECRET_KEY="a" * 32, APP_ENV="prod", ALLOWED_ORIGINS="https://example.com")
    settings.validate_production()


def test_prod_settings_rejects_sqlite():
    settings = make_settings(
        DATABASE_URL="sqlite:///./leave.db",
        JWT_SECRET_KEY="a" * 32,
        APP_ENV="prod",
        ALLOWED_ORIGINS="https://example.com",
    )

    with pytest.raises(ValueError, match="DATABASE_URL"):
        settings.validate_production()


def test_local_settings_allows_wildcard_origins():
    settings = make_settings(APP_ENV="local", ALLOWED_ORIGINS="*")

    settings.validate_production()
    assert settings.get_allowed_origins_list() == ["*"]


def test_get_allowed_origins_list():
    settings = make_settings(ALLOWED_ORIGINS="https://example.com, https://app.example.com,")
    assert settings.get_allowed_origins_list() == ["https://example.com", "https://app.example.com"]


def test_unknown_app_env_rejected():
    with pytest.raises(ValidationError):
        make_settings(APP_ENV="production")


def test_log_level_is_normalised():
    assert make_settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        make_settings(LOG_LEVEL="verbose")


def test_default_features():
    assert make_settings().get_default_features() == ["leave_management"]
    assert make_settings(DEFAULT_FEATURES="").get_default_features() == []
