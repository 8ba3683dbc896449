"""
Activity log storage.

Every append runs in its own short session and commits immediately, so an
activity record survives the rollback of the request transaction that
produced it (denials roll the request back but their FAILED record stays).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from listings.domain.entities.activity import ActivityFilter, ActivityRecord
from listings.domain.exceptions import PersistenceError
from listings.infrastructure.persistence.models.activity import Activity


class ActivityRepository:
    """Append-only activity store. Each append commits in its own session."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def append(self, record: ActivityRecord) -> ActivityRecord:
        async with self.session_factory() as session:
            try:
                async with session.begin():
                    session.add(Activity.from_record(record))
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to append activity: {e}") from e
        return record

    async def find(
        self, filters: ActivityFilter, offset: int, limit: int
    ) -> list[ActivityRecord]:
        query = (
            select(Activity)
            .where(*self._conditions(filters))
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .offset(offset)
            .limit(limit)
        )
        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to query activities: {e}") from e
            return [row.to_record() for row in result.scalars().all()]

    async def count(self, filters: ActivityFilter) -> int:
        query = select(func.count()).select_from(Activity).where(*self._conditions(filters))
        async with self.session_factory() as session:
            try:
                result = await session.execute(query)
            except SQLAlchemyError as e:
                raise PersistenceError(f"Failed to count activities: {e}") from e
            return int(result.scalar_one())

    @staticmethod
    def _conditions(filters: ActivityFilter) -> list[Any]:
        conditions: list[Any] = []
        if filters.action is not None:
            conditions.append(Activity.action == filters.action.value)
        if filters.resource_kind:
            conditions.append(Activity.resource_kind == filters.resource_kind)
        if filters.actor_id:
            conditions.append(Activity.actor_id == filters.actor_id)
        if filters.start_time is not None:
            conditions.append(Activity.created_at >= filters.start_time)
        if filters.end_time is not None:
            conditions.append(Activity.created_at <= filters.end_time)
        return conditions
