"""
Configuration management for the Leave Compliance Service
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables (and .env)"""

    # Required
    DATABASE_URL: str = Field(..., description="Database URL (PostgreSQL in prod, SQLite locally)")
    JWT_SECRET_KEY: str = Field(..., description="Secret shared with the token issuer")

    # Bearer tokens
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=120, description="Lifetime of tokens minted by this service")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")
    SQL_ECHO: bool = Field(default=False, description="Log every SQL statement (local debugging)")

    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Leave management
    DEFAULT_FEATURES: str = Field(
        default="leave_management",
        description="Comma-separated feature slugs enabled for tenants without an explicit list",
    )
    TEAM_CALENDAR_MAX_DAYS: int = Field(
        default=366, ge=1, description="Longest window the team calendar will return, in days"
    )

    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    def validate_production(self) -> None:
        """
        Refuse to run in prod with development defaults

        Raises:
            ValueError: short JWT secret, wildcard CORS origins or a SQLite database
        """
        if self.APP_ENV != "prod":
            return
        if len(self.JWT_SECRET_KEY) < 32:
            raise ValueError("JWT_SECRET_KEY must be at least 32 characters in production environment")
        if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
            raise ValueError("ALLOWED_ORIGINS must be explicitly set (not '*') in production environment")
        if self.is_sqlite:
            raise ValueError("DATABASE_URL must point at PostgreSQL in production environment")

    def get_allowed_origins_list(self) -> List[str]:
        """CORS origins as a list; ['*'] when unrestricted"""
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    def get_default_features(self) -> List[str]:
        """Feature slugs applied to tenants with no stored feature list"""
        return [slug.strip() for slug in self.DEFAULT_FEATURES.split(",") if slug.strip()]


settings = Settings()

if settings.APP_ENV == "prod":
    settings.validate_production()
