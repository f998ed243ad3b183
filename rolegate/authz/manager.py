from typing import Optional

from fastapi import FastAPI, Request

import rolegate.db.engine as db_engine
from rolegate.authz.engine import AuthorizationEngine
from rolegate.config.base import BaseAppSettings
from rolegate.errors.exceptions import AppError
from rolegate.logging import Logger, ensure_logger


def setup_authz(
    app: FastAPI,
    settings: BaseAppSettings,
    logger: Optional[Logger] = None,
) -> AuthorizationEngine:
    """
    Create the application's ``AuthorizationEngine`` on ``app.state.authz``.

    Seeding is not done here; the application lifespan calls
    ``seed_authz`` once the database is open.
    """
    log = ensure_logger(logger, __name__, settings)
    engine = AuthorizationEngine(
        cache_ttl_seconds=settings.PERMISSION_CACHE_TTL_SECONDS, logger=log
    )
    app.state.authz = engine
    log.debug(
        f"Authorization engine configured (cache TTL "
        f"{settings.PERMISSION_CACHE_TTL_SECONDS}s)"
    )
    return engine


async def seed_authz(
    engine: AuthorizationEngine,
    settings: BaseAppSettings,
    logger: Optional[Logger] = None,
) -> bool:
    """
    Seed canonical roles and permissions when ``SEED_ON_STARTUP`` is set.

    Returns:
        True if seeding ran
    """
    log = ensure_logger(logger, __name__, settings)
    if not settings.SEED_ON_STARTUP:
        log.info("Seeding disabled")
        return False
    if db_engine.SessionLocal is None:
        raise AppError(message="Database not initialized before seeding")
    async with db_engine.SessionLocal() as session:
        await engine.seed(session)
    return True


def get_authz(request: Request) -> AuthorizationEngine:
    """FastAPI dependency returning the application's authorization engine."""
    engine = getattr(request.app.state, "authz", None)
    if engine is None:
        raise AppError(message="Authorization engine not initialized")
    return engine
