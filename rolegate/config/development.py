"""
Development environment specific settings.
"""

from .base import BaseAppSettings


class DevelopmentSettings(BaseAppSettings):
    """
    Settings class for development environment.

    Enables debug mode and uses a local SQLite database by default.

    Attributes:
        DEBUG: Always True in development
        DATABASE_URL: Path to development database
    """

    DEBUG: bool = True
    DATABASE_URL: str = "sqlite+aiosqlite:///./dev.db"
