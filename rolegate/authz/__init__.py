"""
Role-based authorization for rolegate.

Features:
- Permission, role and role-permission link stores
- Per-role permission cache with TTL and explicit invalidation
- Authorization engine with mutation rules and idempotent seeding
- Access guard with any-of semantics as a FastAPI dependency

Limitations:
- The cache is process-local; multiple processes each keep their own
- No permission wildcards or role hierarchies
"""

from rolegate.authz.cache import CacheEntry, PermissionCache
from rolegate.authz.constants import (
    BASELINE_ASSIGNMENTS,
    RESERVED_ROLE,
    Permissions,
    Roles,
)
from rolegate.authz.engine import AuthorizationEngine
from rolegate.authz.guard import authorize, require_permissions
from rolegate.authz.manager import get_authz, seed_authz, setup_authz
from rolegate.authz.repositories import (
    PermissionRepository,
    RolePermissionRepository,
    RoleRepository,
)

__all__ = [
    "Permissions",
    "Roles",
    "RESERVED_ROLE",
    "BASELINE_ASSIGNMENTS",
    "PermissionRepository",
    "RoleRepository",
    "RolePermissionRepository",
    "CacheEntry",
    "PermissionCache",
    "AuthorizationEngine",
    "authorize",
    "require_permissions",
    "setup_authz",
    "seed_authz",
    "get_authz",
]
