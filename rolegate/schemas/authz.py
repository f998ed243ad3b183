"""
Request and response schemas for permissions, roles and role-permission links.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def reject_null(value):
    """Update fields may be omitted, but a required column cannot be set to null."""
    if value is None:
        raise ValueError("Field may be omitted but not set to null")
    return value


class PermissionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    resource: Optional[str] = None
    action: Optional[str] = None
    description: Optional[str] = None


class PermissionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    resource: Optional[str] = None
    action: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    def name_not_null(cls, value: Optional[str]) -> str:
        return reject_null(value)


class PermissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    resource: Optional[str] = None
    action: Optional[str] = None
    description: Optional[str] = None


class RoleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None

    @field_validator("name")
    def name_not_null(cls, value: Optional[str]) -> str:
        return reject_null(value)


class RoleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    is_universal: bool = False


class RolePermissionRead(BaseModel):
    """One permission linked to a role, as returned by the link store."""

    model_config = ConfigDict(from_attributes=True)

    permission_id: int
    name: str


class SetRolePermissions(BaseModel):
    """Full replacement of a role's permission set."""

    permission_ids: List[int] = Field(default_factory=list)
