from typing import List, Optional

from sqlalchemy import select

from rolegate.db.repository import BaseRepository
from rolegate.models.users import User


class UserRepository(BaseRepository[User]):
    """Repository for database user operations."""

    def __init__(self, session) -> None:
        super().__init__(User, session)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Look a user up by email; stored emails are lower-case."""
        return await self.find_one_by(email=email.lower())

    async def email_taken(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a user other than ``exclude_id`` holds ``email``."""
        try:
            stmt = select(self.model.id).where(self.model.email == email.lower())
            if exclude_id is not None:
                stmt = stmt.where(self.model.id != exclude_id)
            result = await self.session.execute(stmt)
            return result.first() is not None
        except Exception as e:
            raise self._db_error("email_taken", e)

    async def list_excluding_role(self, role: str) -> List[User]:
        """Users whose role is not ``role``, newest first."""
        try:
            stmt = (
                select(self.model)
                .where(self.model.role != role)
                .order_by(self.model.created_at.desc(), self.model.id.desc())
            )
            result = await self.session.execute(stmt)
            return list(result.scalars().all())
        except Exception as e:
            raise self._db_error("list_excluding_role", e)
