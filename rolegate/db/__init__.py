"""
Database integration module for rolegate: public API

Features:
- Async SQLAlchemy integration (PostgreSQL+asyncpg or SQLite+aiosqlite)
- Repository pattern for CRUD and custom queries
- FastAPI dependency for session access
- Lifespan context that opens and disposes the engine

Limitations:
- Only async SQLAlchemy is supported (no sync engine/session)
- Tables are created with metadata.create_all; no migration helpers
"""
from rolegate.db.base import Base, BaseModel, metadata
from rolegate.db.engine import build_engine, create_tables, init_db, shutdown_db
from rolegate.db.manager import db_lifespan, get_db
from rolegate.db.repository import BaseRepository
from rolegate.db.transaction import transaction

__all__ = [
    "init_db",
    "shutdown_db",
    "build_engine",
    "create_tables",
    "db_lifespan",
    "get_db",
    "BaseRepository",
    "transaction",
    "Base",
    "BaseModel",
    "metadata",
]
