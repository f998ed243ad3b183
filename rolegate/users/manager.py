from typing import Optional

from fastapi import FastAPI

import rolegate.db.engine as db_engine
from rolegate.config.base import BaseAppSettings
from rolegate.errors.exceptions import AppError
from rolegate.logging import Logger, ensure_logger
from rolegate.users.service import UserService


def setup_users(
    app: FastAPI,
    settings: BaseAppSettings,
    logger: Optional[Logger] = None,
) -> UserService:
    """Create the application's ``UserService`` on ``app.state.users``."""
    service = UserService(ensure_logger(logger, __name__, settings))
    app.state.users = service
    return service


async def seed_users(
    service: UserService,
    settings: BaseAppSettings,
    logger: Optional[Logger] = None,
) -> bool:
    """
    Insert the reserved user ``SUPER_ADMIN_EMAIL`` if it is missing.

    Does nothing unless ``SEED_ON_STARTUP`` is set. Returns True if the
    user was created.
    """
    if not settings.SEED_ON_STARTUP:
        return False
    if db_engine.SessionLocal is None:
        raise AppError(message="Database not initialized before seeding")
    async with db_engine.SessionLocal() as session:
        return await service.seed_default_user(session, settings.SUPER_ADMIN_EMAIL)
