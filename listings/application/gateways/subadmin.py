"""
Subadmin gateway.

Subadmins are user rows managed by admins. Only admins pass the gate; the
admin's own permission vector decides which of create/read/update/delete
it may perform. Deleting a subadmin deactivates it so the activity log
keeps a valid actor reference.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from listings.application.gateways.base import ResourceGateway
from listings.domain.entities.principal import PermissionVector, Principal
from listings.domain.exceptions import ValidationException
from listings.infrastructure.security.password import get_password_hash
from listings.shared.enums import Action, ResourceKind, Role

if TYPE_CHECKING:
    from listings.application.interfaces.repositories import IResourceStore
    from listings.application.services.activity_service import ActivityService
    from listings.application.services.authorization_service import AuthorizationService
    from listings.infrastructure.cache.redis_cache import PrincipalCache


class SubadminGateway(ResourceGateway[Any]):
    resource_kind = ResourceKind.SUBADMIN
    label = "subadmin"

    def __init__(
        self,
        store: "IResourceStore",
        authz: "AuthorizationService",
        activity: "ActivityService",
        *,
        timeout: float = 10.0,
        principal_cache: "PrincipalCache | None" = None,
    ) -> None:
        super().__init__(store, authz, activity, timeout=timeout)
        self.principal_cache = principal_cache

    def _describe(self, resource: Any) -> str:
        return resource.username

    async def _prepare_create(self, principal: Principal, payload: dict[str, Any]) -> dict[str, Any]:
        password = payload.pop("password", None)
        if not password:
            raise ValidationException("password is required", field="password")
        permissions = payload.pop("permissions", None)
        vector = (
            PermissionVector.from_dict(permissions)
            if permissions is not None
            else PermissionVector.default_for(Role.SUBADMIN)
        )
        payload.update(
            role=Role.SUBADMIN.value,
            hashed_password=await asyncio.to_thread(get_password_hash, password),
            permissions=vector.to_dict(),
            is_active=True,
        )
        return payload

    async def _prepare_update(self, resource: Any, changes: dict[str, Any]) -> dict[str, Any]:
        if changes.get("permissions") is not None:
            current = PermissionVector.from_dict(resource.permissions)
            changes["permissions"] = current.merged(changes["permissions"]).to_dict()
        else:
            changes.pop("permissions", None)

        password = changes.pop("password", None)
        if password:
            changes["hashed_password"] = await asyncio.to_thread(get_password_hash, password)

        changes.pop("role", None)
        return {key: value for key, value in changes.items() if value is not None}

    async def _after_mutation(self, action: Action, resource_id: str) -> None:
        if action in (Action.UPDATE, Action.DELETE) and self.principal_cache is not None:
            await self.principal_cache.invalidate(resource_id)
