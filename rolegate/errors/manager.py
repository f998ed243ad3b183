"""
Error management functionality for rolegate applications.
"""

from typing import Optional

from fastapi import FastAPI

from rolegate.config.base import BaseAppSettings
from rolegate.errors.handlers import register_exception_handlers
from rolegate.logging import Logger, ensure_logger


def setup_errors(
    app: FastAPI,
    settings: Optional[BaseAppSettings] = None,
    logger: Optional[Logger] = None,
) -> None:
    """
    Configure error handling for a FastAPI application.

    Args:
        app: FastAPI application instance
        settings: Optional application settings
        logger: Optional logger for logging exceptions
    """
    log = ensure_logger(logger, __name__, settings)
    register_exception_handlers(app, logger=log)
