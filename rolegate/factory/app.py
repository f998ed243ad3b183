"""
FastAPI application factory module.

This module wires error handling, the database lifecycle, the
authorization engine, user management and the HTTP routers onto a
FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from rolegate.api import api_router
from rolegate.authz import seed_authz, setup_authz
from rolegate.config import BaseAppSettings, get_settings
from rolegate.db import db_lifespan
from rolegate.errors import setup_errors
from rolegate.logging import Logger
from rolegate.logging.manager import ensure_logger
from rolegate.users import seed_users, setup_users


def build_lifespan(settings: BaseAppSettings, logger: Logger, wrapped=None):
    """
    Create the lifespan context for a rolegate application.

    Startup opens the database, then seeds roles and permissions, then the
    reserved user. ``wrapped`` is an existing lifespan of the application;
    it runs inside ours, with the database open.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with db_lifespan(settings, logger):
            await seed_authz(app.state.authz, settings, logger)
            await seed_users(app.state.users, settings, logger)
            if wrapped is None:
                yield
            else:
                async with wrapped(app) as state:
                    yield state
            logger.info("Application shutting down")

    return lifespan


def configure_app(app: FastAPI, settings: Optional[BaseAppSettings] = None) -> None:
    """
    Configure a FastAPI application with rolegate's components.

    The application instance should be created by the main application and passed
    to this function for configuration.

    Args:
        app: The FastAPI application to configure
        settings: Optional application settings, if not provided will be loaded
                 from environment
    """
    app_settings = settings or get_settings()
    logger = ensure_logger(None, __name__, app_settings)

    app.title = app_settings.APP_NAME
    app.version = app_settings.VERSION
    app.debug = app_settings.DEBUG
    app.state.settings = app_settings

    # Error handling (required)
    setup_errors(app, app_settings, logger)
    # Authorization engine and user management; seeded by the lifespan
    setup_authz(app, app_settings, logger)
    setup_users(app, app_settings, logger)

    # The app already exists, so its lifespan is replaced on the router
    app.router.lifespan_context = build_lifespan(
        app_settings, logger, app.router.lifespan_context
    )

    app.include_router(api_router)
    logger.info(f"Configured {app_settings.APP_NAME} {app_settings.VERSION}")


def create_app(settings: Optional[BaseAppSettings] = None) -> FastAPI:
    """Create and configure a new FastAPI application."""
    app = FastAPI()
    configure_app(app, settings)
    return app
