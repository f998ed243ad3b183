from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker

from rolegate.authz import AuthorizationEngine, PermissionCache
from rolegate.config import TestingSettings
from rolegate.db import build_engine, create_tables
from rolegate.users import UserService


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    # Automatically clear settings that would leak in from the environment
    for name in (
        "APP_ENV",
        "APP_NAME",
        "DEBUG",
        "DATABASE_URL",
        "JWT_SECRET_KEY",
        "JWT_AUDIENCE",
        "JWT_ISSUER",
        "LOG_LEVEL",
        "PERMISSION_CACHE_TTL_SECONDS",
        "SEED_ON_STARTUP",
        "SUPER_ADMIN_EMAIL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def dummy_session():
    """Reusable async session mock for DB operations."""
    return AsyncMock()


@pytest.fixture
def test_settings():
    return TestingSettings(JWT_SECRET_KEY="test-secret-min-32-characters-long")


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def db_engine(test_settings):
    engine = build_engine(test_settings)
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine):
    factory = async_sessionmaker(bind=db_engine, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest.fixture
def authz(clock):
    return AuthorizationEngine(cache=PermissionCache(ttl_seconds=300, clock=clock))


@pytest_asyncio.fixture
async def seeded(session, authz):
    """Session with canonical roles, permissions and baseline links."""
    await authz.seed(session)
    return session


@pytest.fixture
def users():
    return UserService()
