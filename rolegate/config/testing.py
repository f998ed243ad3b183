"""
Testing environment specific settings.
"""

from .base import BaseAppSettings


class TestingSettings(BaseAppSettings):
    """
    Settings class for testing environment.

    Uses an in-memory SQLite database and enables debug mode for testing.

    Attributes:
        DEBUG: Set to True for detailed test output
        DATABASE_URL: In-memory SQLite connection string for testing
        PERMISSION_CACHE_TTL_SECONDS: Short TTL so expiry is easy to exercise
    """

    DEBUG: bool = True
    DATABASE_URL: str = "sqlite+aiosqlite:///:memory:"
    PERMISSION_CACHE_TTL_SECONDS: float = 60
