"""
Public listing catalog.

Anonymous browsing of properties, messes and gaming zones. Only active rows
are visible. There is no principal on this path, so the permission
evaluator is not consulted and nothing is written to the activity log.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from listings.domain.entities.activity import Pagination
from listings.domain.exceptions import (PersistenceError, ResourceNotFoundException,
                                        ValidationException)
from listings.shared.enums import ResourceKind

if TYPE_CHECKING:
    from listings.application.interfaces.repositories import IResourceStore


@dataclass
class CatalogPage:
    items: list[Any]
    pagination: Pagination


class CatalogService:
    def __init__(
        self,
        store: "IResourceStore",
        resource_kind: ResourceKind,
        *,
        timeout: float = 10.0,
    ) -> None:
        self.store = store
        self.resource_kind = resource_kind
        self.timeout = timeout

    async def browse(
        self, page: int = 1, page_size: int = 12, search: str | None = None
    ) -> CatalogPage:
        if page < 1:
            raise ValidationException("page must be >= 1", field="page")
        if page_size < 1:
            raise ValidationException("limit must be >= 1", field="limit")

        filters: dict[str, Any] = {"is_active": True}
        if search:
            filters["search"] = search
        items, total = await self._bounded(
            self.store.list(skip=(page - 1) * page_size, limit=page_size, filters=filters)
        )
        return CatalogPage(items=list(items), pagination=Pagination.build(page, page_size, total))

    async def view(self, resource_id: str) -> Any:
        """Inactive rows are reported as missing"""
        resource = await self._bounded(self.store.get(resource_id))
        if resource is None or not resource.is_active:
            raise ResourceNotFoundException(self.resource_kind.value, resource_id)
        return resource

    async def _bounded(self, awaitable):
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TimeoutError as e:
            raise PersistenceError(
                f"{self.resource_kind.value} catalog read timed out after {self.timeout}s",
                "STORE_TIMEOUT",
            ) from e
