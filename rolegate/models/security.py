"""
Database models for authorization entities.

Permissions and roles are linked through the ``role_permissions``
association table, whose composite primary key makes every
(role, permission) pair unique. Revoked bearer tokens are kept in
``revoked_tokens``.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)

from rolegate.db.base import Base, BaseModel


class Permission(BaseModel):
    """
    An atomic named capability such as ``users:write``.

    The name is the identity key used everywhere outside the database.
    """

    __tablename__ = "permissions"

    name = Column(String(100), nullable=False, unique=True)
    resource = Column(String(100), nullable=True)
    action = Column(String(100), nullable=True)
    description = Column(String(255), nullable=True)

    def __repr__(self):
        return f"Permission(name={self.name!r})"


class Role(BaseModel):
    """
    A named bundle of permissions.

    ``is_universal`` marks the reserved role that implicitly holds every
    permission; it never has explicit links.
    """

    __tablename__ = "roles"

    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(255), nullable=True)
    is_universal = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"Role(name={self.name!r}, is_universal={self.is_universal})"


class RolePermission(Base):
    """Association between one role and one permission."""

    __tablename__ = "role_permissions"

    role_id = Column(
        Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True
    )
    permission_id = Column(
        Integer, ForeignKey("permissions.id", ondelete="CASCADE"), primary_key=True
    )

    def __repr__(self):
        return f"RolePermission(role_id={self.role_id}, permission_id={self.permission_id})"


class RevokedToken(Base):
    """
    A bearer token that must be rejected although its signature is valid.

    ``expires_at`` mirrors the token's own ``exp`` claim when known, so rows
    for tokens that expired anyway can be purged.
    """

    __tablename__ = "revoked_tokens"
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, index=True)
    token = Column(Text, nullable=False, unique=True)
    revoked_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self):
        return f"<RevokedToken(id={self.id}, expires_at={self.expires_at})>"

    @property
    def is_expired(self) -> bool:
        """Check if the revoked token would have expired on its own."""
        if self.expires_at is None:
            return False
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return expires_at < datetime.now(timezone.utc)
