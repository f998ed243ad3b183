"""
Common schemas for rolegate.

This module provides the response envelopes shared by every endpoint and
the request/response models of the permission, role and user APIs.
"""

from rolegate.schemas.authz import (
    PermissionCreate,
    PermissionRead,
    PermissionUpdate,
    RoleCreate,
    RolePermissionRead,
    RoleRead,
    RoleUpdate,
    SetRolePermissions,
)
from rolegate.schemas.metadata import BaseMetadata, ResponseMetadata
from rolegate.schemas.response import (
    BaseResponse,
    DataResponse,
    ErrorInfo,
    ErrorResponse,
    ListMetadata,
    ListResponse,
)
from rolegate.schemas.users import UserCreate, UserRead, UserUpdate

__all__ = [
    # Metadata schemas
    "BaseMetadata",
    "ResponseMetadata",
    # Response schemas
    "BaseResponse",
    "DataResponse",
    "ErrorResponse",
    "ErrorInfo",
    "ListResponse",
    "ListMetadata",
    # Permission and role schemas
    "PermissionCreate",
    "PermissionUpdate",
    "PermissionRead",
    "RoleCreate",
    "RoleUpdate",
    "RoleRead",
    "RolePermissionRead",
    "SetRolePermissions",
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserRead",
]
