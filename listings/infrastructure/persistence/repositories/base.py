from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings.domain.exceptions import PersistenceError
from listings.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """
    Base repository implementing common CRUD operations.

    Writes are conditional on the row version: ``update_versioned`` and
    ``delete_versioned`` only touch a row whose version still matches the
    caller's snapshot. Driver errors surface as PersistenceError.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: str) -> ModelType | None:
        """Get a single record by ID"""
        # Cast to Any for SQLAlchemy dynamic attribute access (id comes from CuidMixin)
        model: Any = self.model
        try:
            result = await self.db.execute(
                select(self.model)
                .where(model.id == id)
                .execution_options(populate_existing=True)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load {self.model.__name__}: {e}") from e
        return result.scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Insert a new record"""
        try:
            self.db.add(obj)
            await self.db.flush()
            await self.db.refresh(obj)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create {self.model.__name__}: {e}") from e
        return obj

    async def count_where(self, *conditions: Any) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        return int(result.scalar_one())

    async def update_versioned(
        self, id: str, values: dict[str, Any], expected_version: int
    ) -> ModelType | None:
        """
        Apply ``values`` if the stored version equals ``expected_version``.

        Returns the refreshed row, or None when the row changed or vanished.
        """
        model: Any = self.model
        try:
            result = await self.db.execute(
                update(self.model)
                .where(model.id == id, model.version == expected_version)
                .values(**values, version=expected_version + 1)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update {self.model.__name__}: {e}") from e
        if result.rowcount != 1:
            return None
        return await self.get_by_id(id)

    async def delete_versioned(self, id: str, expected_version: int) -> bool:
        model: Any = self.model
        try:
            result = await self.db.execute(
                delete(self.model)
                .where(model.id == id, model.version == expected_version)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete {self.model.__name__}: {e}") from e
        return result.rowcount == 1

    async def commit(self) -> None:
        """Commit the session's current transaction"""
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to commit {self.model.__name__}: {e}") from e
