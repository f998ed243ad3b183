"""
Configuration module for rolegate.

This module provides:
- BaseAppSettings: The base class for application settings, loaded from the environment.
- Environment-specific settings (development, testing, production).
- get_settings: Factory for loading the correct settings class based on APP_ENV.

Example environment variables:

# Application
APP_NAME="rolegate"
APP_ENV="development"  # Options: development, testing, production
DEBUG=true

# Database configuration
DATABASE_URL="postgresql+asyncpg://<username>:<password>@<host>:<port>/<database_name>"
DB_ECHO=false
DB_POOL_SIZE=5

# Bearer token validation
JWT_SECRET_KEY="your-secret-key-at-least-32-characters-long"
JWT_ALGORITHM="HS256"

# Authorization
PERMISSION_CACHE_TTL_SECONDS=300
SEED_ON_STARTUP=true
SUPER_ADMIN_EMAIL="admin@example.com"
"""

from .base import BaseAppSettings
from .development import DevelopmentSettings
from .production import ProductionSettings
from .settings import get_settings
from .testing import TestingSettings

__all__ = [
    "BaseAppSettings",
    "get_settings",
    "DevelopmentSettings",
    "ProductionSettings",
    "TestingSettings",
]
