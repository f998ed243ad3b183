import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.errors.exceptions import AppError, ConflictError, DBError, NotFoundError

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    """
    Generic repository providing basic CRUD operations for SQLAlchemy models.

    Driver errors are logged and re-raised as DBError; application errors
    (NotFoundError, ConflictError, ...) pass through unchanged.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession) -> None:
        self.model = model
        self.session = session
        self.logger = logging.getLogger(self.__class__.__name__)

    def _db_error(self, operation: str, e: Exception) -> DBError:
        self.logger.error(f"Error in {operation}: {e}")
        return DBError(message=str(e), details={"error": str(e)})

    def _conflict(self, operation: str, e: IntegrityError) -> ConflictError:
        self.logger.warning(f"Unique constraint violated in {operation}: {e.orig}")
        return ConflictError(
            message=f"{self.model.__name__} violates a uniqueness constraint"
        )

    async def find_by_id(self, id: Any) -> Optional[ModelType]:
        """Retrieve a single record by primary key, or None."""
        try:
            return await self.session.get(self.model, id)
        except Exception as e:
            raise self._db_error("find_by_id", e)

    async def get_by_id(self, id: Any) -> ModelType:
        """Retrieve a single record by primary key."""
        instance = await self.find_by_id(id)
        if instance is None:
            raise NotFoundError(resource_type=self.model.__name__, resource_id=id)
        self.logger.debug(f"Fetched {self.model.__name__} id={id}")
        return instance

    async def find_one_by(self, **filters: Any) -> Optional[ModelType]:
        """Return the first record matching the equality filters, or None."""
        try:
            stmt = select(self.model).filter_by(**filters)
            result = await self.session.execute(stmt)
            return result.scalars().first()
        except Exception as e:
            raise self._db_error("find_one_by", e)

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Any = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> List[ModelType]:
        """List records with optional filters, ordering and pagination."""
        try:
            stmt = select(self.model)
            if filters:
                stmt = stmt.filter_by(**filters)
            if order_by is not None:
                stmt = stmt.order_by(order_by)
            if offset:
                stmt = stmt.offset(offset)
            if limit is not None:
                stmt = stmt.limit(limit)
            result = await self.session.execute(stmt)
            items = list(result.scalars().all())
            self.logger.debug(f"Listed {len(items)} items of {self.model.__name__}")
            return items
        except Exception as e:
            raise self._db_error("list", e)

    async def create(self, data: Dict[str, Any]) -> ModelType:
        """Create a new record from provided data dict."""
        try:
            obj = self.model(**data)  # type: ignore
            self.session.add(obj)
            await self.session.flush()
            self.logger.debug(
                f"Created {self.model.__name__} id={getattr(obj, 'id', None)}"
            )
            return obj
        except IntegrityError as e:
            raise self._conflict("create", e)
        except Exception as e:
            raise self._db_error("create", e)

    async def update(self, id: Any, data: Dict[str, Any]) -> ModelType:
        """Update an existing record by id with provided data dict."""
        try:
            instance = await self.get_by_id(id)
            for key, value in data.items():
                setattr(instance, key, value)
            await self.session.flush()
            await self.session.refresh(instance)
            self.logger.debug(f"Updated {self.model.__name__} id={id}")
            return instance
        except AppError:
            raise
        except IntegrityError as e:
            raise self._conflict("update", e)
        except Exception as e:
            raise self._db_error("update", e)

    async def delete(self, id: Any) -> ModelType:
        """Delete a record by primary key id and return the deleted record."""
        try:
            instance = await self.get_by_id(id)
            await self.session.delete(instance)
            await self.session.flush()
            self.logger.debug(f"Deleted {self.model.__name__} id={id}")
            return instance
        except AppError:
            raise
        except Exception as e:
            raise self._db_error("delete", e)

    async def delete_where(self, *conditions: Any) -> int:
        """Delete every record matching the conditions; returns the row count."""
        try:
            stmt = delete(self.model).where(*conditions)
            result = await self.session.execute(stmt)
            await self.session.flush()
            rows = result.rowcount if hasattr(result, "rowcount") else -1
            self.logger.debug(f"Deleted {rows} rows of {self.model.__name__}")
            return rows
        except Exception as e:
            raise self._db_error("delete_where", e)
