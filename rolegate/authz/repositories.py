"""
Database repositories for permissions, roles and role-permission links.

Uniqueness of names and of (role, permission) pairs is enforced by the
database; these repositories add the lookups the authorization engine
needs on top of the generic CRUD in BaseRepository.
"""

from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from sqlalchemy import select

from rolegate.db.repository import BaseRepository
from rolegate.models.security import Permission, Role, RolePermission


class PermissionRepository(BaseRepository[Permission]):
    """Repository for database permission operations."""

    def __init__(self, session) -> None:
        super().__init__(Permission, session)

    async def find_by_name(self, name: str) -> Optional[Permission]:
        """
        Find a permission by its name, or return None if not found.

        Args:
            name: Permission name, usually in format "resource:action"
        """
        return await self.find_one_by(name=name)

    async def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a permission other than ``exclude_id`` holds ``name``."""
        try:
            stmt = select(self.model.id).where(self.model.name == name)
            if exclude_id is not None:
                stmt = stmt.where(self.model.id != exclude_id)
            result = await self.session.execute(stmt)
            return result.first() is not None
        except Exception as e:
            raise self._db_error("name_taken", e)

    async def list_sorted(self) -> List[Permission]:
        """All permissions sorted by name ascending."""
        return await self.list(order_by=self.model.name)

    async def all_names(self) -> FrozenSet[str]:
        """The name of every permission currently stored."""
        try:
            result = await self.session.execute(select(self.model.name))
            return frozenset(result.scalars().all())
        except Exception as e:
            raise self._db_error("all_names", e)

    async def existing_ids(self, ids: Iterable[int]) -> Set[int]:
        """Subset of ``ids`` that resolve to a stored permission."""
        wanted = set(ids)
        if not wanted:
            return set()
        try:
            stmt = select(self.model.id).where(self.model.id.in_(wanted))
            result = await self.session.execute(stmt)
            return set(result.scalars().all())
        except Exception as e:
            raise self._db_error("existing_ids", e)

    async def create_if_not_exists(
        self,
        name: str,
        resource: Optional[str] = None,
        action: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Tuple[Permission, bool]:
        """
        Create a permission unless one with the same name already exists.

        Returns:
            The new or existing permission and whether it was created
        """
        existing = await self.find_by_name(name)
        if existing:
            return existing, False

        permission = await self.create(
            {
                "name": name,
                "resource": resource,
                "action": action,
                "description": description,
            }
        )
        return permission, True


class RoleRepository(BaseRepository[Role]):
    """Repository for database role operations."""

    def __init__(self, session) -> None:
        super().__init__(Role, session)

    async def find_by_name(self, name: str) -> Optional[Role]:
        """Find a role by its name, or return None if not found."""
        return await self.find_one_by(name=name)

    async def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a role other than ``exclude_id`` holds ``name``."""
        try:
            stmt = select(self.model.id).where(self.model.name == name)
            if exclude_id is not None:
                stmt = stmt.where(self.model.id != exclude_id)
            result = await self.session.execute(stmt)
            return result.first() is not None
        except Exception as e:
            raise self._db_error("name_taken", e)

    async def list_sorted(self) -> List[Role]:
        """All roles sorted by name ascending."""
        return await self.list(order_by=self.model.name)

    async def create_if_not_exists(
        self, name: str, is_universal: bool = False
    ) -> Tuple[Role, bool]:
        """
        Create a role unless one with the same name already exists.

        An existing record is flagged universal when ``is_universal`` is
        requested and the flag is missing; nothing else is touched.

        Returns:
            The new or existing role and whether it was created
        """
        existing = await self.find_by_name(name)
        if existing:
            if is_universal and not existing.is_universal:
                existing = await self.update(existing.id, {"is_universal": True})
            return existing, False

        role = await self.create({"name": name, "is_universal": is_universal})
        return role, True


class RolePermissionRepository(BaseRepository[RolePermission]):
    """Repository for the many-to-many links between roles and permissions."""

    def __init__(self, session) -> None:
        super().__init__(RolePermission, session)

    async def get_links(self, role_id: int) -> List[Tuple[int, str]]:
        """
        Permissions linked to a role as ``(permission_id, name)`` pairs.

        The inner join drops links whose permission no longer exists.
        """
        try:
            stmt = (
                select(RolePermission.permission_id, Permission.name)
                .join(Permission, Permission.id == RolePermission.permission_id)
                .where(RolePermission.role_id == role_id)
                .order_by(Permission.name)
            )
            result = await self.session.execute(stmt)
            return [(row.permission_id, row.name) for row in result.all()]
        except Exception as e:
            raise self._db_error("get_links", e)

    async def replace_links(self, role_id: int, permission_ids: Iterable[int]) -> None:
        """
        Delete every link of the role, then insert one link per distinct id.

        Both steps run in the caller's transaction; the caller commits or
        rolls back once, so a failure never leaves a half-replaced set.
        """
        distinct_ids = list(dict.fromkeys(permission_ids))
        await self.delete_by_role(role_id)
        try:
            self.session.add_all(
                [
                    RolePermission(role_id=role_id, permission_id=pid)
                    for pid in distinct_ids
                ]
            )
            await self.session.flush()
            self.logger.debug(f"Linked {len(distinct_ids)} permissions to role {role_id}")
        except Exception as e:
            raise self._db_error("replace_links", e)

    async def add_if_absent(self, role_id: int, permission_id: int) -> bool:
        """Insert the (role, permission) link unless it exists; True if inserted."""
        existing = await self.find_one_by(role_id=role_id, permission_id=permission_id)
        if existing:
            return False
        await self.create({"role_id": role_id, "permission_id": permission_id})
        return True

    async def delete_by_role(self, role_id: int) -> int:
        return await self.delete_where(RolePermission.role_id == role_id)

    async def delete_by_permission(self, permission_id: int) -> int:
        return await self.delete_where(RolePermission.permission_id == permission_id)
