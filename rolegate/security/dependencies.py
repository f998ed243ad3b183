"""
Security dependencies for FastAPI.

``get_current_identity`` is the authentication step in front of the
access guard: it extracts the bearer token, validates it, rejects revoked
tokens and returns the caller's ``Identity``.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.config import BaseAppSettings, get_settings
from rolegate.db import get_db
from rolegate.errors.exceptions import InvalidTokenError, UnauthorizedError
from rolegate.security.identity import Identity
from rolegate.security.revocation import check_token
from rolegate.security.tokens import decode_bearer_token, token_expiry

# Missing credentials are reported by the guard, not by the scheme
bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> BaseAppSettings:
    """Settings the application was configured with, or the environment's."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


async def get_current_identity(
    token: Optional[str] = Depends(get_bearer_token),
    session: AsyncSession = Depends(get_db),
    settings: BaseAppSettings = Depends(get_app_settings),
) -> Optional[Identity]:
    """
    Resolve the caller's identity from the bearer token.

    Returns None when the request carries no token.

    Raises:
        InvalidTokenError: Token fails validation or lacks a subject
        ExpiredTokenError: Token has expired
        RevokedTokenError: Token is on the revocation list
    """
    if token is None:
        return None

    payload = decode_bearer_token(token, settings)
    await check_token(session, token)

    email = payload.get("email") or payload.get("sub")
    if not email:
        raise InvalidTokenError(message="Invalid token payload")
    return Identity(
        email=str(email),
        role=payload.get("role"),
        token=token,
        expires_at=token_expiry(payload),
    )


async def require_identity(
    identity: Optional[Identity] = Depends(get_current_identity),
) -> Identity:
    """Like ``get_current_identity`` but rejects anonymous requests with 401."""
    if identity is None:
        raise UnauthorizedError(message="Not authenticated")
    return identity
