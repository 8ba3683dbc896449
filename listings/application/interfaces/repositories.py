"""
Repository interfaces (ports) for the application layer.

Gateways and services depend on these protocols; the SQLAlchemy
repositories in the infrastructure layer implement them.
"""

from __future__ import annotations

from typing import Any, Protocol

from listings.domain.entities.activity import ActivityFilter, ActivityRecord
from listings.domain.entities.principal import Principal


class IPrincipalLookup(Protocol):
    """Resolves principal ids to principals"""

    async def get_principal(self, principal_id: str) -> Principal | None:
        """Return the principal or None when the id does not resolve"""
        ...


class IResourceStore(Protocol):
    """
    Persistence contract one gateway drives.

    ``update`` is conditional: it only applies when the stored version still
    equals ``expected_version`` and returns None otherwise. Writes are not
    durable until ``commit`` returns.
    """

    async def get(self, resource_id: str) -> Any | None: ...

    async def list(
        self, skip: int = 0, limit: int = 100, filters: dict[str, Any] | None = None
    ) -> tuple[list[Any], int]: ...

    async def create(self, payload: dict[str, Any], created_by: str) -> Any: ...

    async def update(
        self, resource_id: str, changes: dict[str, Any], expected_version: int
    ) -> Any | None: ...

    async def delete(self, resource_id: str, expected_version: int) -> bool: ...

    async def commit(self) -> None:
        """Make the writes issued so far durable"""
        ...


class IActivityStore(Protocol):
    """Append-only activity storage"""

    async def append(self, record: ActivityRecord) -> ActivityRecord: ...

    async def find(
        self, filters: ActivityFilter, offset: int, limit: int
    ) -> list[ActivityRecord]: ...

    async def count(self, filters: ActivityFilter) -> int: ...
