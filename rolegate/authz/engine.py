"""
Authorization engine.

The engine composes the permission, role and link repositories with the
permission cache. It answers "what may this role do", enforces the
mutation rules that keep the role/permission graph consistent, and seeds
the canonical roles and permissions at startup.

Every mutation commits its own transaction and then invalidates the
affected cache entries as its last step, so a reader that starts after
the mutation returns always recomputes from committed state.
"""

from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.authz.cache import PermissionCache
from rolegate.authz.constants import (
    BASELINE_ASSIGNMENTS,
    RESERVED_ROLE,
    Permissions,
    Roles,
    split_permission_name,
)
from rolegate.authz.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
)
from rolegate.db.transaction import transaction
from rolegate.errors.exceptions import ConflictError, ForbiddenError, NotFoundError
from rolegate.logging import Logger, ensure_logger
from rolegate.models.security import Permission, Role


class AuthorizationEngine:
    """
    Role/permission resolution, administrative mutations and seeding.

    One instance lives for the lifetime of the application and owns its
    ``PermissionCache``; database sessions are passed per call.

    Args:
        cache_ttl_seconds: TTL for resolved role permission sets
        cache: Optional pre-built cache (overrides ``cache_ttl_seconds``)
        logger: Optional logger
    """

    def __init__(
        self,
        cache_ttl_seconds: float = 300,
        cache: Optional[PermissionCache] = None,
        logger: Optional[Logger] = None,
    ):
        self.logger = ensure_logger(logger, __name__)
        if cache is None:
            cache = PermissionCache(cache_ttl_seconds, logger=self.logger)
        self.cache = cache

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def get_permissions_for_role(
        self, session: AsyncSession, role_name: str
    ) -> FrozenSet[str]:
        """
        Resolve the permission names held by ``role_name``.

        The reserved role always gets the full, uncached permission universe.
        Unknown roles resolve to an empty set and are never cached.
        """
        if role_name == RESERVED_ROLE:
            return await PermissionRepository(session).all_names()

        cached = self.cache.get(role_name)
        if cached is not None:
            return cached

        role = await RoleRepository(session).find_by_name(role_name)
        if role is None:
            return frozenset()
        if self._is_reserved(role):
            # The universe grows with every new permission, so it is never cached
            return await PermissionRepository(session).all_names()

        async def compute() -> Optional[FrozenSet[str]]:
            # Read again under the cache generation; the lookup above may be stale
            current = await RoleRepository(session).find_by_name(role_name)
            if current is None or self._is_reserved(current):
                return None
            links = await RolePermissionRepository(session).get_links(current.id)
            return frozenset(name for _, name in links if name)

        resolved = await self.cache.resolve(role_name, compute)
        return resolved if resolved is not None else frozenset()

    @staticmethod
    def _is_reserved(role: Role) -> bool:
        return bool(role.is_universal) or role.name == RESERVED_ROLE

    @staticmethod
    def has_permission(permissions: Iterable[str], required: str) -> bool:
        """Exact membership test."""
        return required in permissions

    def invalidate_role_cache(self, role_name: str) -> None:
        self.cache.invalidate(role_name)

    def invalidate_cache(self) -> None:
        self.cache.invalidate_all()

    # ------------------------------------------------------------------
    # Permissions CRUD
    # ------------------------------------------------------------------

    async def create_permission(
        self, session: AsyncSession, data: Dict[str, Any]
    ) -> Permission:
        repo = PermissionRepository(session)
        name = data["name"]
        if await repo.name_taken(name):
            raise ConflictError(message=f"Permission with name {name} exists")
        async with transaction(session, "create_permission", self.logger):
            permission = await repo.create(data)
        self.logger.info(f"Created permission {name!r}")
        return permission

    async def find_all_permissions(self, session: AsyncSession) -> List[Permission]:
        return await PermissionRepository(session).list_sorted()

    async def find_one_permission(
        self, session: AsyncSession, permission_id: int
    ) -> Permission:
        return await PermissionRepository(session).get_by_id(permission_id)

    async def update_permission(
        self, session: AsyncSession, permission_id: int, data: Dict[str, Any]
    ) -> Permission:
        repo = PermissionRepository(session)
        name = data.get("name")
        if name and await repo.name_taken(name, exclude_id=permission_id):
            raise ConflictError(message=f"Permission with name {name} exists")
        async with transaction(session, "update_permission", self.logger):
            permission = await repo.update(permission_id, data)
        # Cached sets hold names, so a rename affects every role
        self.invalidate_cache()
        self.logger.info(f"Updated permission id={permission_id}")
        return permission

    async def remove_permission(self, session: AsyncSession, permission_id: int) -> None:
        repo = PermissionRepository(session)
        async with transaction(session, "remove_permission", self.logger):
            permission = await repo.delete(permission_id)
            removed = await RolePermissionRepository(session).delete_by_permission(
                permission_id
            )
        self.invalidate_cache()
        self.logger.info(
            f"Deleted permission {permission.name!r} and {removed} role links"
        )

    # ------------------------------------------------------------------
    # Roles CRUD
    # ------------------------------------------------------------------

    async def create_role(self, session: AsyncSession, data: Dict[str, Any]) -> Role:
        name = data["name"]
        if name == RESERVED_ROLE:
            raise ForbiddenError(message=f"Cannot create {RESERVED_ROLE} role")
        repo = RoleRepository(session)
        if await repo.name_taken(name):
            raise ConflictError(message=f"Role with name {name} exists")
        async with transaction(session, "create_role", self.logger):
            role = await repo.create({**data, "is_universal": False})
        # A cached entry cannot exist for an unknown role, but a deleted
        # role of the same name may have left one behind
        self.invalidate_role_cache(name)
        self.logger.info(f"Created role {name!r}")
        return role

    async def find_all_roles(self, session: AsyncSession) -> List[Role]:
        return await RoleRepository(session).list_sorted()

    async def find_one_role(self, session: AsyncSession, role_id: int) -> Role:
        return await RoleRepository(session).get_by_id(role_id)

    async def find_role_by_name(
        self, session: AsyncSession, name: str
    ) -> Optional[Role]:
        return await RoleRepository(session).find_by_name(name)

    async def update_role(
        self, session: AsyncSession, role_id: int, data: Dict[str, Any]
    ) -> Role:
        repo = RoleRepository(session)
        role = await repo.get_by_id(role_id)
        if self._is_reserved(role):
            raise ForbiddenError(message=f"Cannot update {RESERVED_ROLE} role")
        new_name = data.get("name")
        if new_name == RESERVED_ROLE:
            raise ForbiddenError(message=f"Cannot rename a role to {RESERVED_ROLE}")
        if new_name and await repo.name_taken(new_name, exclude_id=role_id):
            raise ConflictError(message=f"Role with name {new_name} exists")

        old_name = role.name
        data = {key: value for key, value in data.items() if key != "is_universal"}
        async with transaction(session, "update_role", self.logger):
            role = await repo.update(role_id, data)
        self.invalidate_role_cache(old_name)
        if role.name != old_name:
            self.invalidate_role_cache(role.name)
        self.logger.info(f"Updated role id={role_id} ({old_name!r} -> {role.name!r})")
        return role

    async def remove_role(self, session: AsyncSession, role_id: int) -> None:
        repo = RoleRepository(session)
        role = await repo.get_by_id(role_id)
        if self._is_reserved(role):
            raise ForbiddenError(message=f"Cannot delete {RESERVED_ROLE} role")
        name = role.name
        async with transaction(session, "remove_role", self.logger):
            await repo.delete(role_id)
            removed = await RolePermissionRepository(session).delete_by_role(role_id)
        self.invalidate_role_cache(name)
        self.logger.info(f"Deleted role {name!r} and {removed} permission links")

    # ------------------------------------------------------------------
    # Role-permission links
    # ------------------------------------------------------------------

    async def get_role_permissions(
        self, session: AsyncSession, role_id: int
    ) -> List[Dict[str, Any]]:
        """
        Permissions of a role as ``{"permission_id", "name"}`` dicts.

        Always read from the database, never from the cache.
        """
        role = await RoleRepository(session).get_by_id(role_id)
        if self._is_reserved(role):
            permissions = await PermissionRepository(session).list_sorted()
            return [{"permission_id": p.id, "name": p.name} for p in permissions]
        links = await RolePermissionRepository(session).get_links(role_id)
        return [{"permission_id": pid, "name": name} for pid, name in links]

    async def set_role_permissions(
        self, session: AsyncSession, role_id: int, permission_ids: Iterable[int]
    ) -> List[Dict[str, Any]]:
        """
        Replace a role's permission set and return the post-write link list.

        Raises:
            NotFoundError: Role or one of the permission ids does not exist
            ForbiddenError: Role is the reserved role
        """
        role = await RoleRepository(session).get_by_id(role_id)
        if self._is_reserved(role):
            raise ForbiddenError(message=f"Cannot change {RESERVED_ROLE} permissions")

        permission_ids = list(dict.fromkeys(permission_ids))
        known = await PermissionRepository(session).existing_ids(permission_ids)
        missing = [pid for pid in permission_ids if pid not in known]
        if missing:
            raise NotFoundError(
                message=f"Permissions with ids {missing} not found",
                details={"resource_type": "Permission", "resource_ids": missing},
            )

        name = role.name
        async with transaction(session, "set_role_permissions", self.logger):
            await RolePermissionRepository(session).replace_links(role_id, permission_ids)
        self.invalidate_role_cache(name)
        self.logger.info(
            f"Replaced permissions of role {name!r} ({len(permission_ids)} links)"
        )
        return await self.get_role_permissions(session, role_id)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    async def seed(self, session: AsyncSession) -> None:
        """
        Establish the canonical permissions, roles and baseline links.

        Idempotent and additive: existing records and links are never
        removed, so customizations made by administrators survive.
        """
        permission_repo = PermissionRepository(session)
        role_repo = RoleRepository(session)
        link_repo = RolePermissionRepository(session)
        created = {"permissions": 0, "roles": 0, "links": 0}

        async with transaction(session, "seed", self.logger):
            for name in Permissions.all():
                resource, action = split_permission_name(name)
                _, was_created = await permission_repo.create_if_not_exists(
                    name, resource=resource, action=action
                )
                created["permissions"] += was_created

            for name in Roles.all():
                _, was_created = await role_repo.create_if_not_exists(
                    name, is_universal=(name == RESERVED_ROLE)
                )
                created["roles"] += was_created

            roles_by_name = {r.name: r for r in await role_repo.list_sorted()}
            reserved = roles_by_name.get(RESERVED_ROLE)
            if reserved is not None and not reserved.is_universal:
                reserved.is_universal = True
            permissions_by_name = {
                p.name: p for p in await permission_repo.list_sorted()
            }

            for role_name, permission_names in BASELINE_ASSIGNMENTS.items():
                role = roles_by_name.get(role_name)
                if role is None or self._is_reserved(role):
                    continue
                for permission_name in permission_names:
                    permission = permissions_by_name.get(permission_name)
                    if permission is None:
                        continue
                    created["links"] += await link_repo.add_if_absent(
                        role.id, permission.id
                    )

        self.invalidate_cache()
        self.logger.info(
            "Seeded roles and permissions "
            f"(new permissions={created['permissions']}, "
            f"new roles={created['roles']}, new links={created['links']})"
        )

