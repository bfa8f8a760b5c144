"""
Application Configuration Module

Every knob of the book service lives in one pydantic-settings model. Values
come from the process environment first, then from a .env file in the
working directory, then from the defaults below. A bad value (unknown
backend, negative mask, unknown log level) stops the service at startup.

SELECTING BACKENDS
==================
- STORAGE_BACKEND=memory|sql picks where books and stock are kept
- PERMISSION_BACKEND=remote|static picks who answers permission checks

CACHING
=======
get_settings() is cached with @lru_cache, so the process reads its
configuration once. The application factory still accepts an explicit
Settings instance, which is what the tests use to build isolated apps.

Usage:
    from book_service.config import get_settings

    settings = get_settings()
    print(settings.storage_backend)
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
ENVIRONMENTS = frozenset({"development", "staging", "production"})


class Settings(BaseSettings):
    """
    Book service settings.

    Field names map to upper-case environment variables
    (storage_backend ← STORAGE_BACKEND). Complex values (static_permissions) are parsed from JSON, e.g.:
        STATIC_PERMISSIONS='{"librarian-token": 1, "clerk-token": 134}'
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Book Service",
        description="Application name displayed in docs and logs"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (detailed errors, auto-reload); refused in production"
    )
    api_version: str = Field(
        default="v1",
        description="API version for URL routing"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )
    port: int = Field(
        default=8080,
        description="Port to bind the server to"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )

    # -------------------------------------------------------------------------
    # Storage Settings
    # -------------------------------------------------------------------------
    storage_backend: Literal["memory", "sql"] = Field(
        default="memory",
        description="Where books and stock live: process memory or a SQL database"
    )
    database_url: str = Field(
        default="sqlite:///./data/books.db",
        description="SQLAlchemy connection URL (used when storage_backend=sql)"
    )
    db_echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    # -------------------------------------------------------------------------
    # Permission Gate Settings
    # -------------------------------------------------------------------------
    permission_backend: Literal["remote", "static"] = Field(
        default="remote",
        description="Ask the user service for permissions, or use a local token table"
    )
    user_service_url: str = Field(
        default="http://localhost:8081",
        description="Base URL of the user service (internal port)"
    )
    user_service_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout in seconds for permission checks"
    )
    static_permissions: dict[str, int] = Field(
        default_factory=dict,
        description="Token to granted-bitmask table for permission_backend=static"
    )

    # -------------------------------------------------------------------------
    # HTTP Settings
    # -------------------------------------------------------------------------
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:8080",
        description="Comma-separated list of allowed CORS origins"
    )

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Accept any case of a standard logging level name; store it upper-case."""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of {sorted(LOG_LEVELS)}")
        return level

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        environment = v.strip().lower()
        if environment not in ENVIRONMENTS:
            raise ValueError(f"unknown environment {v!r}, expected one of {sorted(ENVIRONMENTS)}")
        return environment

    @field_validator("user_service_url")
    @classmethod
    def validate_user_service_url(cls, v: str) -> str:
        """
        Normalize the user service address.

        A bare "host:port" is accepted and treated as plain HTTP, the
        way the service was historically configured.
        """
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("user_service_url must not be empty")
        if "://" not in v:
            v = f"http://{v}"
        return v

    @field_validator("static_permissions")
    @classmethod
    def validate_static_permissions(cls, v: dict[str, int]) -> dict[str, int]:
        """Granted masks are unsigned."""
        for token, mask in v.items():
            if mask < 0:
                raise ValueError(f"permission mask for token {token!r} must be >= 0")
        return v

    @model_validator(mode="after")
    def refuse_debug_in_production(self) -> "Settings":
        """
        Debug mode exposes internal error messages and enables auto-reload,
        so it is never allowed in production.
        """
        if self.is_production and self.debug:
            raise ValueError("debug must be disabled when environment is production")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    First call creates the Settings instance (reading .env and the
    environment); later calls return the same object.

    Returns:
        Cached Settings instance
    """
    return Settings()
