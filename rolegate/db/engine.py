"""
Database engine and session management for rolegate applications.
"""

from typing import Optional

from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from rolegate.config.base import BaseAppSettings
from rolegate.db.base import Base
from rolegate.errors.exceptions import DBError
from rolegate.logging import Logger, ensure_logger

# Module-level engine and session factory
engine: Optional[AsyncEngine] = None
SessionLocal: Optional[async_sessionmaker[AsyncSession]] = None


def build_engine(settings: BaseAppSettings) -> AsyncEngine:
    """
    Create an async engine for the configured DATABASE_URL.

    In-memory SQLite databases share one connection so every session sees
    the same tables.
    """
    url = make_url(settings.DATABASE_URL)
    engine_kwargs = {"echo": settings.DB_ECHO}
    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            engine_kwargs["poolclass"] = StaticPool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = settings.DB_POOL_SIZE
    return create_async_engine(settings.DATABASE_URL, **engine_kwargs)


async def create_tables(target: AsyncEngine) -> None:
    """Create every table registered on the shared metadata (idempotent)."""
    # Import for the side effect of registering the models
    import rolegate.models  # noqa: F401

    async with target.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_db(settings: BaseAppSettings, logger: Optional[Logger] = None) -> None:
    """
    Initialize the database engine and session factory.

    Args:
        settings: Application settings
        logger: Optional logger for database operations
    """
    global engine, SessionLocal

    log = ensure_logger(logger, __name__, settings)

    if not settings.DATABASE_URL:
        raise DBError(message="DATABASE_URL is not configured")

    log.debug(f"Creating database engine with URL: {settings.DATABASE_URL}")
    engine = build_engine(settings)
    SessionLocal = async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
    )
    await create_tables(engine)
    log.debug("Database engine and session factory initialized")


async def shutdown_db(logger: Optional[Logger] = None) -> None:
    """
    Dispose of the database engine.

    Args:
        logger: Optional logger for database operations
    """
    global engine, SessionLocal

    log = ensure_logger(logger, __name__)

    if engine:
        log.debug("Disposing database engine")
        await engine.dispose()
        engine = None
        SessionLocal = None
        log.debug("Database engine disposed")
