"""SQLAlchemy stores backing the property, mess and gaming-zone gateways."""

from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings.domain.exceptions import PersistenceError
from listings.infrastructure.persistence.models.listing import GamingZone, Mess, Property
from listings.infrastructure.persistence.models.mixins import ListingModel
from listings.infrastructure.persistence.repositories.base import BaseRepository

ListingT = TypeVar("ListingT", bound=ListingModel)


class ListingRepository(BaseRepository[ListingT]):
    """Resource store for one listing table"""

    # Column searched by the ``search`` filter
    search_column = "name"

    async def get(self, resource_id: str) -> ListingT | None:
        return await self.get_by_id(resource_id)

    async def list(
        self, skip: int = 0, limit: int = 100, filters: dict[str, Any] | None = None
    ) -> tuple[list[ListingT], int]:
        model: Any = self.model
        conditions = []
        filters = filters or {}
        if "created_by" in filters:
            conditions.append(model.created_by == filters["created_by"])
        if "is_active" in filters:
            conditions.append(model.is_active.is_(bool(filters["is_active"])))
        if filters.get("search"):
            column = getattr(model, self.search_column)
            conditions.append(column.ilike(f"%{filters['search']}%"))

        try:
            total = await self.count_where(*conditions)
            result = await self.db.execute(
                select(self.model)
                .where(*conditions)
                .order_by(model.created_at.desc(), model.id.desc())
                .offset(skip)
                .limit(limit)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list {self.model.__name__}: {e}") from e
        return list(result.scalars().all()), total

    async def create(self, payload: dict[str, Any], created_by: str) -> ListingT:
        obj = self.model(**payload, created_by=created_by)
        return await self.add(obj)

    async def update(
        self, resource_id: str, changes: dict[str, Any], expected_version: int
    ) -> ListingT | None:
        return await self.update_versioned(resource_id, changes, expected_version)

    async def delete(self, resource_id: str, expected_version: int) -> bool:
        return await self.delete_versioned(resource_id, expected_version)


class PropertyRepository(ListingRepository[Property]):
    search_column = "title"

    def __init__(self, db: AsyncSession):
        super().__init__(db, Property)


class MessRepository(ListingRepository[Mess]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Mess)


class GamingZoneRepository(ListingRepository[GamingZone]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, GamingZone)
