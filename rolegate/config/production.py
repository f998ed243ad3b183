"""
Production environment specific settings.
"""

from .base import BaseAppSettings


class ProductionSettings(BaseAppSettings):
    """
    Settings class for production environment.

    Disables debug mode. DATABASE_URL and JWT_SECRET_KEY are expected to
    come from the environment.

    Attributes:
        DEBUG: Always False in production for security
    """

    DEBUG: bool = False
