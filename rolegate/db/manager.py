from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

import rolegate.db.engine as db_engine
from rolegate.config.base import BaseAppSettings
from rolegate.db.engine import init_db, shutdown_db
from rolegate.errors.exceptions import AppError, DBError
from rolegate.logging import Logger, ensure_logger


@asynccontextmanager
async def db_lifespan(
    settings: BaseAppSettings,
    logger: Optional[Logger] = None,
) -> AsyncIterator[None]:
    """
    Open the database for the lifetime of the block.

    The engine, session factory and tables exist inside the block; the
    engine is disposed on exit, including when startup code raised.
    """
    log = ensure_logger(logger, __name__, settings)
    await init_db(settings, log)
    log.info("Database engine initialized")
    try:
        yield
    finally:
        await shutdown_db(log)
        log.info("Database engine disposed")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Application errors raised by the endpoint roll the session back and
    propagate unchanged; anything else is reported as a DBError.
    """
    if db_engine.SessionLocal is None:
        raise DBError(message="Database not initialized")

    async with db_engine.SessionLocal() as session:
        try:
            yield session
            await session.commit()
        except AppError:
            await session.rollback()
            raise
        except Exception as e:
            await session.rollback()
            ensure_logger(None, __name__).error(f"Database session error: {e}")
            raise DBError(message=str(e), details={"error": str(e)})
