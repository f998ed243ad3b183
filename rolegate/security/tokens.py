"""
Bearer token validation.

Tokens are issued elsewhere; this module only verifies the signature and
the registered claims with PyJWT. Audience and issuer are verified only
when configured.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt

from rolegate.config.base import BaseAppSettings
from rolegate.errors.exceptions import ExpiredTokenError, InvalidTokenError
from rolegate.logging import ensure_logger

logger = ensure_logger(None, __name__)


def decode_bearer_token(token: str, settings: BaseAppSettings) -> Dict[str, Any]:
    """
    Validate a bearer token and return its payload.

    Raises:
        ExpiredTokenError: The ``exp`` claim has passed
        InvalidTokenError: Bad signature, malformed token or claim mismatch
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={
                "verify_aud": bool(settings.JWT_AUDIENCE),
                "verify_iss": bool(settings.JWT_ISSUER),
            },
            audience=settings.JWT_AUDIENCE,
            issuer=settings.JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token used")
        raise ExpiredTokenError()
    except jwt.PyJWTError as e:
        logger.warning(f"Token validation error: {e}")
        raise InvalidTokenError(
            message="Invalid token signature or format", details={"error": str(e)}
        )


def token_expiry(payload: Dict[str, Any]) -> Optional[datetime]:
    """The ``exp`` claim as an aware UTC datetime, if present."""
    exp = payload.get("exp")
    if exp is None:
        return None
    return datetime.fromtimestamp(int(exp), tz=timezone.utc)
