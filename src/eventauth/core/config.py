"""Configuration management for EventAuth.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. Secrets (token signing key, password
salt) and the token validity window are injected from here into the auth
components at construction time.
"""

from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TOKEN_SECRET = "change-me-in-production-use-openssl-rand-hex-32"
DEFAULT_PASSWORD_SALT = "change-me-in-production-password-salt"


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables (``EVENTAUTH_`` prefix)
    and .env files. All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EVENTAUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "EventAuth"
    app_version: str = "0.1.0"
    environment: Literal["development", "production", "testing"] = "development"
    debug: bool = False
    api_prefix: str = ""

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 1

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/eventauth.db"
    db_echo: bool = False

    # Security Settings
    token_secret: str = Field(
        default=DEFAULT_TOKEN_SECRET,
        description="Secret key for bearer token signing",
    )
    token_algorithm: str = "HS256"
    token_validity_days: int = Field(default=7, gt=0)
    password_salt: str = Field(
        default=DEFAULT_PASSWORD_SALT,
        description="System-wide salt appended to every password before hashing",
    )

    # Routes reachable without a bearer token (relative to api_prefix)
    public_paths: list[str] = Field(default=["/auth/login", "/auth/register"])

    # CORS Settings
    cors_origins: list[str] = Field(default=["*"])
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = Field(default=["*"])
    cors_allow_headers: list[str] = Field(
        default=["Origin", "Content-Length", "Content-Type", "Authorization"]
    )

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    @field_validator(
        "cors_origins", "cors_allow_methods", "cors_allow_headers", "public_paths", mode="before"
    )
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Accept comma-separated strings as well as lists."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("api_prefix")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @model_validator(mode="after")
    def check_production_secrets(self) -> "Settings":
        """Refuse to run in production with the shipped secrets."""
        if self.is_production:
            if self.token_secret == DEFAULT_TOKEN_SECRET:
                raise ValueError("token_secret must be set in production")
            if self.password_salt == DEFAULT_PASSWORD_SALT:
                raise ValueError("password_salt must be set in production")
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def token_validity(self) -> timedelta:
        """Lifetime of a freshly issued or refreshed token."""
        return timedelta(days=self.token_validity_days)

    @property
    def resolved_public_paths(self) -> set[str]:
        """Public paths with the API prefix applied, plus health endpoints."""
        paths = {f"{self.api_prefix}{path}" for path in self.public_paths}
        paths.update({"/health", "/ready", "/live"})
        if self.is_development:
            paths.update({"/docs", "/redoc", "/openapi.json"})
        return paths


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
