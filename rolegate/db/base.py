"""
Declarative base shared by rolegate's tables.

Constraint names follow one convention so that the unique constraints on
permission, role and user names are named predictably in every backend.
"""

from sqlalchemy import Column, DateTime, Integer, MetaData, func
from sqlalchemy.orm import declarative_base

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

Base = declarative_base(metadata=metadata)


class BaseModel(Base):
    """
    Integer-keyed record with creation and update timestamps.

    Permissions, roles and users derive from it; the link table and the
    revocation list derive from ``Base`` directly.
    """

    __abstract__ = True
    # created_at is loaded on insert; user listings sort by it
    __mapper_args__ = {"eager_defaults": True}

    id = Column(Integer, primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now(), nullable=False
    )


__all__ = ["Base", "BaseModel", "metadata"]
