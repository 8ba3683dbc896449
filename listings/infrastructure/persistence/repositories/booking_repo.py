from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from listings.domain.exceptions import PersistenceError
from listings.infrastructure.persistence.models.booking import Booking
from listings.infrastructure.persistence.repositories.base import BaseRepository


class BookingRepository(BaseRepository[Booking]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Booking)

    async def create(self, payload: dict[str, Any], user_id: str) -> Booking:
        return await self.add(Booking(**payload, user_id=user_id))

    async def list(
        self, skip: int = 0, limit: int = 100, filters: dict[str, Any] | None = None
    ) -> tuple[list[Booking], int]:
        """Most recent first, optionally for one user"""
        conditions = []
        if filters and filters.get("user_id"):
            conditions.append(Booking.user_id == filters["user_id"])

        try:
            total = await self.count_where(*conditions)
            result = await self.db.execute(
                select(Booking)
                .where(*conditions)
                .order_by(Booking.created_at.desc(), Booking.id.desc())
                .offset(skip)
                .limit(limit)
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list bookings: {e}") from e
        return list(result.scalars().all()), total
