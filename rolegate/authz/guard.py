"""
Access guard.

Decides whether an identity may perform an operation annotated with one
or more required permissions. Holding any one of them is enough.
Denials never name the missing permission.
"""

from typing import Iterable, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.authz.engine import AuthorizationEngine
from rolegate.authz.manager import get_authz
from rolegate.db import get_db
from rolegate.errors.exceptions import ForbiddenError
from rolegate.logging import ensure_logger
from rolegate.security.dependencies import get_current_identity
from rolegate.security.identity import Identity
from rolegate.users.repository import UserRepository

logger = ensure_logger(None, __name__)


async def authorize(
    engine: AuthorizationEngine,
    session: AsyncSession,
    identity: Optional[Identity],
    required: Optional[Iterable[str]],
) -> bool:
    """
    Allow or deny access for ``identity``.

    Args:
        engine: Authorization engine resolving role permissions
        session: Database session
        identity: The authenticated caller, or None
        required: Permission names; holding any one grants access

    Returns:
        True when access is granted

    Raises:
        ForbiddenError: "Not authenticated", "User not found" or
            "Insufficient permissions"
    """
    required = list(required or ())
    if not required:
        return True

    if identity is None or not identity.email:
        logger.warning("Access denied: no authenticated identity")
        raise ForbiddenError(message="Not authenticated")

    user = await UserRepository(session).find_by_email(identity.email)
    if user is None:
        logger.warning(f"Access denied: unknown user {identity.email!r}")
        raise ForbiddenError(message="User not found")

    permissions = await engine.get_permissions_for_role(session, user.role)
    if any(engine.has_permission(permissions, name) for name in required):
        return True

    logger.warning(
        f"Access denied: user {identity.email!r} with role {user.role!r} "
        f"lacks any of {required}"
    )
    raise ForbiddenError(message="Insufficient permissions")


def require_permissions(*permissions: str):
    """
    Create a dependency that allows the request if the caller holds any
    of ``permissions``.

    Example:
        ```python
        @router.get(
            "/words",
            dependencies=[Depends(require_permissions(Permissions.WORDS_READ))],
        )
        async def list_words(): ...
        ```
    """

    async def check_permissions(
        identity: Optional[Identity] = Depends(get_current_identity),
        session: AsyncSession = Depends(get_db),
        engine: AuthorizationEngine = Depends(get_authz),
    ) -> Optional[Identity]:
        await authorize(engine, session, identity, permissions)
        return identity

    return check_permissions
