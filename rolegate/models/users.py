"""
Database model for users.

Only the role claim matters to authorization; the rest is profile data.
"""

from sqlalchemy import Column, String

from rolegate.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(100), nullable=False)

    def __repr__(self):
        return f"User(email={self.email!r}, role={self.role!r})"
