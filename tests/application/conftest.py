"""In-memory stores for exercising services and gateways without a database"""
from dataclasses import dataclass, replace
from typing import Any

import pytest

from listings.application.services import ActivityService, AuthorizationService
from listings.domain.entities.activity import ActivityFilter, ActivityRecord
from listings.domain.entities.principal import PermissionVector, Principal
from listings.domain.exceptions import PersistenceError
from listings.shared.enums import Role
from listings.shared.utils import MonotonicClock, generate_cuid


class InMemoryActivityStore:
    def __init__(self):
        self.records: list[ActivityRecord] = []

    async def append(self, record: ActivityRecord) -> ActivityRecord:
        self.records.append(record)
        return record

    def _matching(self, filters: ActivityFilter) -> list[ActivityRecord]:
        rows = self.records
        if filters.action is not None:
            rows = [r for r in rows if r.action == filters.action]
        if filters.resource_kind:
            rows = [r for r in rows if r.resource_kind == filters.resource_kind]
        if filters.actor_id:
            rows = [r for r in rows if r.actor_id == filters.actor_id]
        if filters.start_time is not None:
            rows = [r for r in rows if r.created_at >= filters.start_time]
        if filters.end_time is not None:
            rows = [r for r in rows if r.created_at <= filters.end_time]
        return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)

    async def find(self, filters: ActivityFilter, offset: int, limit: int) -> list[ActivityRecord]:
        return self._matching(filters)[offset : offset + limit]

    async def count(self, filters: ActivityFilter) -> int:
        return len(self._matching(filters))


@dataclass(frozen=True)
class Listing:
    id: str
    name: str
    created_by: Any
    version: int = 1
    is_active: bool = True

    @property
    def title(self) -> str:
        return self.name


class InMemoryResourceStore:
    """
    Versioned store; ``fail_with`` makes the next write raise and
    ``fail_commit_with`` makes the next commit raise
    """

    def __init__(self):
        self.rows: dict[str, Listing] = {}
        self.fail_with: Exception | None = None
        self.fail_commit_with: Exception | None = None
        self.commits = 0

    def seed(self, name: str, created_by: Any, **kwargs) -> Listing:
        row = Listing(id=generate_cuid(), name=name, created_by=created_by, **kwargs)
        self.rows[row.id] = row
        return row

    def _maybe_fail(self):
        if self.fail_with is not None:
            error, self.fail_with = self.fail_with, None
            raise error

    async def get(self, resource_id: str) -> Listing | None:
        return self.rows.get(resource_id)

    async def list(self, skip=0, limit=100, filters=None):
        rows = list(self.rows.values())
        if filters and "created_by" in filters:
            rows = [r for r in rows if r.created_by == filters["created_by"]]
        if filters and "is_active" in filters:
            rows = [r for r in rows if r.is_active is filters["is_active"]]
        if filters and filters.get("search"):
            rows = [r for r in rows if filters["search"].lower() in r.name.lower()]
        return rows[skip : skip + limit], len(rows)

    async def create(self, payload: dict[str, Any], created_by: str) -> Listing:
        self._maybe_fail()
        return self.seed(payload["name"], created_by)

    async def update(self, resource_id, changes, expected_version):
        self._maybe_fail()
        row = self.rows.get(resource_id)
        if row is None or row.version != expected_version:
            return None
        updated = replace(row, version=row.version + 1, **changes)
        self.rows[resource_id] = updated
        return updated

    async def delete(self, resource_id, expected_version):
        self._maybe_fail()
        row = self.rows.get(resource_id)
        if row is None or row.version != expected_version:
            return False
        del self.rows[resource_id]
        return True

    async def commit(self) -> None:
        if self.fail_commit_with is not None:
            error, self.fail_commit_with = self.fail_commit_with, None
            raise error
        self.commits += 1


class FailingActivityStore(InMemoryActivityStore):
    async def append(self, record):
        raise PersistenceError("activity table unavailable")


@pytest.fixture
def activity_store():
    return InMemoryActivityStore()


@pytest.fixture
def resource_store():
    return InMemoryResourceStore()


@pytest.fixture
def failing_activity_store():
    return FailingActivityStore()


@pytest.fixture
def activity_service(activity_store):
    return ActivityService(activity_store, clock=MonotonicClock())


@pytest.fixture
def authz(activity_service):
    return AuthorizationService(activity_service)



def _principal(principal_id, role, permissions=None, is_active=True):
    return Principal(
        id=principal_id,
        role=role,
        permissions=permissions or PermissionVector.full(),
        is_active=is_active,
    )


@pytest.fixture
def admin():
    return _principal("admin-1", Role.ADMIN)


@pytest.fixture
def subadmin_a():
    return _principal("sub-a", Role.SUBADMIN)


@pytest.fixture
def subadmin_b():
    return _principal("sub-b", Role.SUBADMIN)


@pytest.fixture
def inactive_subadmin():
    return _principal("sub-x", Role.SUBADMIN, is_active=False)


@pytest.fixture
def plain_user():
    return _principal("user-1", Role.USER)
