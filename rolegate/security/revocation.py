"""
Token revocation list.

Logging out writes the raw bearer token to ``revoked_tokens``; every
authenticated request checks the list before it is trusted. Rows whose
``expires_at`` has passed protect nothing (the token's own expiry already
rejects it) and can be removed with ``purge_expired``.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.db.repository import BaseRepository
from rolegate.db.transaction import transaction
from rolegate.errors.exceptions import ConflictError, RevokedTokenError
from rolegate.logging import ensure_logger
from rolegate.models.security import RevokedToken

logger = ensure_logger(None, __name__)


class RevokedTokenRepository(BaseRepository[RevokedToken]):
    """Repository for the revocation list."""

    def __init__(self, session) -> None:
        super().__init__(RevokedToken, session)

    async def exists(self, token: str) -> bool:
        try:
            stmt = select(self.model.id).where(self.model.token == token)
            result = await self.session.execute(stmt)
            return result.first() is not None
        except Exception as e:
            raise self._db_error("exists", e)

    async def delete_expired(self, now: datetime) -> int:
        return await self.delete_where(
            self.model.expires_at.is_not(None), self.model.expires_at < now
        )


async def is_revoked(session: AsyncSession, token: str) -> bool:
    """Check whether ``token`` is on the revocation list."""
    return await RevokedTokenRepository(session).exists(token)


async def check_token(session: AsyncSession, token: Optional[str]) -> None:
    """
    Reject a revoked bearer token.

    A missing token is not checked; requests without a token are handled
    by the authentication step.

    Raises:
        RevokedTokenError: If the token has been revoked
    """
    if not token:
        return
    if await is_revoked(session, token):
        logger.warning("Rejected a revoked bearer token")
        raise RevokedTokenError()


async def revoke_token(
    session: AsyncSession, token: str, expires_at: Optional[datetime] = None
) -> bool:
    """
    Add ``token`` to the revocation list.

    Revoking an already revoked token is a no-op.

    Args:
        session: Database session
        token: The raw bearer token
        expires_at: The token's own expiry, used by ``purge_expired``

    Returns:
        True if the token was newly revoked
    """
    repo = RevokedTokenRepository(session)
    if await repo.exists(token):
        logger.info("Token already revoked")
        return False
    try:
        async with transaction(session, "revoke_token", logger):
            await repo.create({"token": token, "expires_at": expires_at})
    except ConflictError:
        # Revoked concurrently by another request
        logger.info("Token already revoked")
        return False
    logger.info("Revoked bearer token")
    return True


async def purge_expired(session: AsyncSession, now: Optional[datetime] = None) -> int:
    """Delete revocation rows for tokens past their own expiry; returns the count."""
    now = now or datetime.now(timezone.utc)
    async with transaction(session, "purge_expired", logger):
        removed = await RevokedTokenRepository(session).delete_expired(now)
    logger.info(f"Purged {removed} expired revoked tokens")
    return removed
