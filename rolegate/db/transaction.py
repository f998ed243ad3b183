from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.errors.exceptions import AppError, DBError
from rolegate.logging import Logger, ensure_logger


@asynccontextmanager
async def transaction(
    session: AsyncSession, operation: str, logger: Optional[Logger] = None
) -> AsyncIterator[AsyncSession]:
    """
    Commit the session when the block succeeds, roll it back otherwise.

    Application errors propagate unchanged; anything else (including a
    failed commit) is logged and re-raised as DBError.

    Example:
        ```python
        async with transaction(session, "create_role"):
            role = await RoleRepository(session).create(data)
        ```
    """
    log = ensure_logger(logger, __name__)
    try:
        yield session
        await session.commit()
    except AppError:
        await session.rollback()
        raise
    except Exception as e:
        await session.rollback()
        log.error(f"Error in {operation}: {e}")
        raise DBError(message=str(e), details={"error": str(e)}) from e
