"""
User management.

The user record is the source of the role claim the access guard
resolves. The user holding the reserved role is invisible to the admin
API and cannot be created, edited or deleted through it; it is only ever
inserted by ``seed_default_user``.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.authz.constants import RESERVED_ROLE
from rolegate.authz.repositories import RoleRepository
from rolegate.db.transaction import transaction
from rolegate.errors.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from rolegate.logging import Logger, ensure_logger
from rolegate.models.users import User
from rolegate.users.repository import UserRepository


class UserService:
    def __init__(self, logger: Optional[Logger] = None):
        self.logger = ensure_logger(logger, __name__)

    async def create(self, session: AsyncSession, data: Dict[str, Any]) -> User:
        if data.get("role") == RESERVED_ROLE:
            raise ForbiddenError(message=f"Cannot create {RESERVED_ROLE} user")
        await self._check_role(session, data["role"])
        repo = UserRepository(session)
        email = data["email"]
        if await repo.email_taken(email):
            raise ConflictError(message=f"User with email {email} already exists")
        async with transaction(session, "create_user", self.logger):
            user = await repo.create(data)
        self.logger.info(f"Created user {email!r} with role {user.role!r}")
        return user

    async def _check_role(self, session: AsyncSession, role_name: str) -> None:
        """Users may only hold an existing, non-reserved role."""
        role = await RoleRepository(session).find_by_name(role_name)
        if role is None or role.is_universal:
            raise ValidationError(
                message=f"Unknown role {role_name}",
                fields=[{"field": "role", "message": "Unknown role"}],
            )

    async def find_all(self, session: AsyncSession) -> List[User]:
        return await UserRepository(session).list_excluding_role(RESERVED_ROLE)

    async def find_one(self, session: AsyncSession, user_id: int) -> User:
        user = await UserRepository(session).find_by_id(user_id)
        if user is None or user.role == RESERVED_ROLE:
            raise NotFoundError(resource_type="User", resource_id=user_id)
        return user

    async def find_by_email(self, session: AsyncSession, email: str) -> Optional[User]:
        return await UserRepository(session).find_by_email(email)

    async def update(
        self, session: AsyncSession, user_id: int, data: Dict[str, Any]
    ) -> User:
        repo = UserRepository(session)
        user = await repo.get_by_id(user_id)
        if user.role == RESERVED_ROLE:
            raise ForbiddenError(message=f"Cannot edit {RESERVED_ROLE} user")
        if data.get("role") == RESERVED_ROLE:
            raise ForbiddenError(message=f"Cannot assign {RESERVED_ROLE} role")
        if data.get("role") is not None:
            await self._check_role(session, data["role"])
        email = data.get("email")
        if email and await repo.email_taken(email, exclude_id=user_id):
            raise ConflictError(message=f"User with email {email} already exists")
        async with transaction(session, "update_user", self.logger):
            user = await repo.update(user_id, data)
        self.logger.info(f"Updated user id={user_id}")
        return user

    async def remove(self, session: AsyncSession, user_id: int) -> None:
        repo = UserRepository(session)
        user = await repo.get_by_id(user_id)
        if user.role == RESERVED_ROLE:
            raise ForbiddenError(message=f"Cannot delete {RESERVED_ROLE} user")
        async with transaction(session, "remove_user", self.logger):
            await repo.delete(user_id)
        self.logger.info(f"Deleted user id={user_id}")

    async def seed_default_user(self, session: AsyncSession, email: str) -> bool:
        """
        Insert the reserved user unless a user with ``email`` exists.

        Returns:
            True if the user was created
        """
        repo = UserRepository(session)
        email = email.lower()
        if await repo.find_by_email(email):
            return False
        async with transaction(session, "seed_default_user", self.logger):
            await repo.create(
                {
                    "first_name": "Default",
                    "last_name": "Admin",
                    "email": email,
                    "role": RESERVED_ROLE,
                }
            )
        self.logger.info(f"Seeded default user: {email}")
        return True
