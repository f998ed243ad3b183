"""
Models package for rolegate.

Importing this package registers every table on the shared metadata.
"""

from rolegate.db.base import Base, metadata
from rolegate.models.security import Permission, RevokedToken, Role, RolePermission
from rolegate.models.users import User

__all__ = [
    "Base",
    "metadata",
    "Permission",
    "Role",
    "RolePermission",
    "RevokedToken",
    "User",
]
