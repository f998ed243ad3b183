"""
Base configuration module for rolegate applications.

This module provides the base settings class that environment-specific
settings classes inherit from. It covers the application identity, the
database connection, bearer token validation and the authorization engine.
"""

import secrets
from typing import Optional

from pydantic import ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


class BaseAppSettings(BaseSettings):
    """
    Base settings class for application configuration.

    Attributes:
        APP_NAME: The name of the application
        DEBUG: Flag to enable/disable debug mode
        VERSION: Application version string
        DATABASE_URL: Async database connection URL
        DB_ECHO: Enable SQL query logging (echo)
        DB_POOL_SIZE: Connection pool size for the database
        JWT_SECRET_KEY: Secret key used to verify bearer token signatures
        JWT_ALGORITHM: Algorithm used for bearer token signatures
        JWT_AUDIENCE: Expected audience claim, verified only when set
        JWT_ISSUER: Expected issuer claim, verified only when set
        PERMISSION_CACHE_TTL_SECONDS: Lifetime of a resolved role permission set
        SEED_ON_STARTUP: Seed canonical roles and permissions at startup
        SUPER_ADMIN_EMAIL: Email of the reserved user holding the super_admin role
        LOG_LEVEL: Logging level name
        LOG_JSON_FORMAT: Emit logs as JSON lines
    """

    APP_NAME: str = Field(default="rolegate")
    DEBUG: bool = Field(default=False)
    VERSION: str = Field(default="0.1.0")

    # Database configuration
    DATABASE_URL: Optional[str] = Field(
        default=None, description="Database connection URL"
    )
    DB_ECHO: bool = Field(default=False, description="Enable SQL query logging (echo)")
    DB_POOL_SIZE: int = Field(
        default=5, description="Connection pool size for the database"
    )

    # Security configuration
    JWT_SECRET_KEY: str = Field(
        default="",
        validate_default=True,
        description="Secret key for verifying JWT signatures",
    )
    JWT_ALGORITHM: str = Field(
        default="HS256", description="Algorithm used for JWT signatures"
    )
    JWT_AUDIENCE: Optional[str] = Field(
        default=None, description="Audience claim expected in bearer tokens"
    )
    JWT_ISSUER: Optional[str] = Field(
        default=None, description="Issuer claim expected in bearer tokens"
    )

    # Authorization configuration
    PERMISSION_CACHE_TTL_SECONDS: float = Field(
        default=300, gt=0, description="TTL of cached role permission sets in seconds"
    )
    SEED_ON_STARTUP: bool = Field(
        default=True, description="Seed canonical roles and permissions on startup"
    )
    SUPER_ADMIN_EMAIL: str = Field(
        default="admin@example.com",
        description="Email of the reserved user that always holds super_admin",
    )

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level name")
    LOG_JSON_FORMAT: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("JWT_SECRET_KEY", mode="before")
    def generate_jwt_secret_if_empty(cls, value, info):
        """
        Generate a random JWT secret key in debug mode if none is provided.

        Outside debug mode the key must be set explicitly.
        """
        if not value:
            if info.data.get("DEBUG", False):
                return secrets.token_hex(32)
            raise ValueError(
                "JWT_SECRET_KEY must be explicitly set in production. "
                "Generate a secure key with: python -c 'import secrets; print(secrets.token_hex(32))'"
            )
        return value

    @field_validator("DATABASE_URL", mode="before")
    def validate_database_url(cls, value):
        """
        Ensure DATABASE_URL uses an async driver.
        """
        if (
            value
            and value.startswith("postgresql://")
            and not value.startswith("postgresql+asyncpg://")
        ):
            raise ValueError(
                "DATABASE_URL must start with 'postgresql+asyncpg://' for asyncpg driver. "
                "You provided a URL starting with 'postgresql://', which will cause psycopg2 errors. "
                "Please update your DATABASE_URL to use the correct format."
            )
        if value and value.startswith("sqlite://"):
            raise ValueError(
                "DATABASE_URL must start with 'sqlite+aiosqlite://' for SQLite databases."
            )
        return value

    @field_validator("LOG_LEVEL", mode="before")
    def normalize_log_level(cls, value):
        """Upper-case the log level name."""
        return value.upper() if isinstance(value, str) else value

    model_config = ConfigDict(env_file=".env", case_sensitive=True)
