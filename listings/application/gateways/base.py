"""
Resource gateway base class.

A gateway is the only path by which a principal mutates a resource. Each
call walks one state machine:

    RECEIVED -> AUTHORIZING -> AUTHORIZED -> MUTATING -> MUTATED -> AUDITED_SUCCESS
                            \\-> DENIED -> AUDITED_FAILURE

Update and delete authorize against the same snapshot they later write
with (the write is conditional on that snapshot's version), so ownership
cannot change between the check and the write. MUTATED is reached only
after the store has committed, so a SUCCESS record never describes a
write that was rolled back.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from listings.application.services.authorization_service import denial_error
from listings.domain.entities.activity import ActivityRecord, Pagination, RequestContext
from listings.domain.entities.principal import Principal
from listings.domain.exceptions import (
    AccessDeniedError,
    ConflictError,
    MutationFailedError,
    PersistenceError,
    ResourceNotFoundException,
    ValidationException,
)
from listings.domain.services.permission_evaluator import Decision, DenialKind
from listings.shared.enums import Action, ActivityStatus, GatewayState, ResourceKind
from listings.shared.telemetry.logging import get_logger
from listings.shared.telemetry.tracing import add_span_attributes, traced

if TYPE_CHECKING:
    from listings.application.interfaces.repositories import IResourceStore
    from listings.application.services.activity_service import ActivityService
    from listings.application.services.authorization_service import AuthorizationService

logger = get_logger(__name__)

ResourceT = TypeVar("ResourceT")

# Fields a caller may never write through a gateway
PROTECTED_FIELDS = frozenset({"id", "created_by", "createdBy", "version", "created_at"})


@dataclass
class GatewayCall:
    """Bookkeeping for one trip through the state machine."""

    action: Action
    resource_kind: ResourceKind
    state: GatewayState = GatewayState.RECEIVED
    history: list[GatewayState] = field(default_factory=lambda: [GatewayState.RECEIVED])

    def advance(self, state: GatewayState) -> None:
        self.state = state
        self.history.append(state)
        logger.debug("%s.%s -> %s", self.resource_kind.value, self.action.value, state.value)


@dataclass
class GatewayResult(Generic[ResourceT]):
    resource: ResourceT | None
    state: GatewayState
    history: list[GatewayState]
    audit_record: ActivityRecord | None = None


@dataclass
class GatewayPage(Generic[ResourceT]):
    items: list[ResourceT]
    pagination: Pagination


class ResourceGateway(ABC, Generic[ResourceT]):
    """
    Authorize -> mutate -> audit sequencing for one resource kind.

    Subclasses provide ``resource_kind`` and ``_describe``; they may override
    the ``_prepare_*`` and ``_after_mutation`` hooks.
    """

    resource_kind: ResourceKind
    label: str = "resource"

    def __init__(
        self,
        store: "IResourceStore",
        authz: "AuthorizationService",
        activity: "ActivityService",
        *,
        timeout: float = 10.0,
    ) -> None:
        self.store = store
        self.authz = authz
        self.activity = activity
        self.timeout = timeout

    @abstractmethod
    def _describe(self, resource: ResourceT) -> str:
        """Short human-readable name used in activity details."""
        ...

    # Hooks
    async def _prepare_create(self, principal: Principal, payload: dict[str, Any]) -> dict[str, Any]:
        return payload

    async def _prepare_update(self, resource: ResourceT, changes: dict[str, Any]) -> dict[str, Any]:
        return changes

    async def _after_mutation(self, action: Action, resource_id: str) -> None:
        return None

    # Public operations
    @traced("gateway.create")
    async def create(
        self,
        principal: Principal,
        payload: dict[str, Any],
        context: RequestContext | None = None,
    ) -> GatewayResult[ResourceT]:
        call = GatewayCall(Action.CREATE, self.resource_kind)
        add_span_attributes(resource_kind=self.resource_kind.value, principal_id=principal.id)

        call.advance(GatewayState.AUTHORIZING)
        decision = self.authz.authorize(principal, Action.CREATE, self.resource_kind)
        if not decision.allowed:
            await self._deny(call, principal, decision, None, context)
        self._reject_protected(payload)

        call.advance(GatewayState.AUTHORIZED)
        prepared = await self._prepare_create(principal, dict(payload))
        call.advance(GatewayState.MUTATING)
        try:
            resource = await self._bounded(self.store.create(prepared, created_by=principal.id))
            await self._bounded(self.store.commit())
        except PersistenceError as e:
            await self._fail(call, principal, None, context, MutationFailedError(
                self.resource_kind.value, Action.CREATE.value, e.message
            ))
        call.advance(GatewayState.MUTATED)

        resource_id = str(resource.id)
        await self._after_mutation(Action.CREATE, resource_id)
        record = await self._audit(
            call, principal, resource_id, f"Created {self.label}: {self._describe(resource)}", context
        )
        return GatewayResult(resource, call.state, call.history, record)

    @traced("gateway.update")
    async def update(
        self,
        principal: Principal,
        resource_id: str,
        changes: dict[str, Any],
        context: RequestContext | None = None,
    ) -> GatewayResult[ResourceT]:
        call = GatewayCall(Action.UPDATE, self.resource_kind)
        add_span_attributes(resource_kind=self.resource_kind.value, principal_id=principal.id)

        resource = await self._load_for_mutation(call, principal, resource_id, context)
        self._reject_protected(changes)
        version = resource.version

        call.advance(GatewayState.AUTHORIZED)
        prepared = await self._prepare_update(resource, dict(changes))
        call.advance(GatewayState.MUTATING)
        try:
            updated = await self._bounded(
                self.store.update(resource_id, prepared, expected_version=version)
            )
        except PersistenceError as e:
            await self._fail(call, principal, resource_id, context, MutationFailedError(
                self.resource_kind.value, Action.UPDATE.value, e.message
            ))
        if updated is None:
            await self._fail(call, principal, resource_id, context, ConflictError(
                self.resource_kind.value, resource_id, version, Action.UPDATE.value
            ))
        await self._commit(call, principal, resource_id, context)
        call.advance(GatewayState.MUTATED)

        await self._after_mutation(Action.UPDATE, resource_id)
        record = await self._audit(
            call, principal, resource_id, f"Updated {self.label}: {self._describe(updated)}", context
        )
        return GatewayResult(updated, call.state, call.history, record)

    @traced("gateway.delete")
    async def delete(
        self,
        principal: Principal,
        resource_id: str,
        context: RequestContext | None = None,
    ) -> GatewayResult[ResourceT]:
        call = GatewayCall(Action.DELETE, self.resource_kind)
        add_span_attributes(resource_kind=self.resource_kind.value, principal_id=principal.id)

        resource = await self._load_for_mutation(call, principal, resource_id, context)
        description = self._describe(resource)

        call.advance(GatewayState.AUTHORIZED)
        call.advance(GatewayState.MUTATING)
        try:
            deleted = await self._bounded(
                self.store.delete(resource_id, expected_version=resource.version)
            )
        except PersistenceError as e:
            await self._fail(call, principal, resource_id, context, MutationFailedError(
                self.resource_kind.value, Action.DELETE.value, e.message
            ))
        if not deleted:
            await self._fail(call, principal, resource_id, context, ConflictError(
                self.resource_kind.value, resource_id, resource.version, Action.DELETE.value
            ))
        await self._commit(call, principal, resource_id, context)
        call.advance(GatewayState.MUTATED)

        await self._after_mutation(Action.DELETE, resource_id)
        record = await self._audit(
            call, principal, resource_id, f"Deleted {self.label}: {description}", context
        )
        return GatewayResult(resource, call.state, call.history, record)

    async def get(
        self,
        principal: Principal,
        resource_id: str,
        context: RequestContext | None = None,
    ) -> ResourceT:
        """Admin-view read of a single resource."""
        call = GatewayCall(Action.READ, self.resource_kind)
        await self._precheck_principal(call, principal, resource_id, context)

        resource = await self._bounded(self.store.get(resource_id))
        if resource is None:
            raise ResourceNotFoundException(self.resource_kind.value, resource_id)

        call.advance(GatewayState.AUTHORIZING)
        decision = self.authz.authorize(principal, Action.READ, self.resource_kind, resource)
        if not decision.allowed:
            await self._deny(call, principal, decision, resource_id, context)

        await self.activity.record(
            principal.id,
            Action.READ.activity_action,
            self.resource_kind,
            resource_id,
            f"Retrieved {self.label}: {self._describe(resource)}",
            context,
        )
        return resource

    async def list(
        self,
        principal: Principal,
        page: int = 1,
        page_size: int = 10,
        filters: dict[str, Any] | None = None,
        context: RequestContext | None = None,
    ) -> GatewayPage[ResourceT]:
        """Admin-view listing, optionally filtered by ``created_by``/``is_active``."""
        if page < 1:
            raise ValidationException("page must be >= 1", field="page")
        if page_size < 1:
            raise ValidationException("limit must be >= 1", field="limit")

        call = GatewayCall(Action.READ, self.resource_kind)
        call.advance(GatewayState.AUTHORIZING)
        decision = self.authz.authorize(principal, Action.READ, self.resource_kind)
        if not decision.allowed:
            await self._deny(call, principal, decision, None, context)

        clean_filters = {k: v for k, v in (filters or {}).items() if v is not None and v != ""}
        items, total = await self._bounded(
            self.store.list(skip=(page - 1) * page_size, limit=page_size, filters=clean_filters)
        )
        await self.activity.record(
            principal.id,
            Action.READ.activity_action,
            self.resource_kind,
            None,
            f"Retrieved {self.label} list (page {page})",
            context,
        )
        return GatewayPage(items=list(items), pagination=Pagination.build(page, page_size, total))

    # Internals
    async def _precheck_principal(
        self,
        call: GatewayCall,
        principal: Principal,
        resource_id: str | None,
        context: RequestContext | None,
    ) -> None:
        """Reject inactive or ineligible principals before touching the store."""
        decision = self.authz.authorize(principal, call.action, self.resource_kind)
        if decision.denial == DenialKind.UNAUTHORIZED:
            call.advance(GatewayState.AUTHORIZING)
            await self._deny(call, principal, decision, resource_id, context)

    async def _load_for_mutation(
        self,
        call: GatewayCall,
        principal: Principal,
        resource_id: str,
        context: RequestContext | None,
    ) -> ResourceT:
        await self._precheck_principal(call, principal, resource_id, context)

        resource = await self._bounded(self.store.get(resource_id))
        if resource is None:
            raise ResourceNotFoundException(self.resource_kind.value, resource_id)

        call.advance(GatewayState.AUTHORIZING)
        decision = self.authz.authorize(principal, call.action, self.resource_kind, resource)
        if not decision.allowed:
            await self._deny(call, principal, decision, resource_id, context)
        return resource

    async def _commit(
        self,
        call: GatewayCall,
        principal: Principal,
        resource_id: str,
        context: RequestContext | None,
    ) -> None:
        """End the store's unit of work; a failed commit is audited like a failed write."""
        try:
            await self._bounded(self.store.commit())
        except PersistenceError as e:
            await self._fail(call, principal, resource_id, context, MutationFailedError(
                self.resource_kind.value, call.action.value, e.message
            ))

    async def _bounded(self, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except TimeoutError as e:
            raise PersistenceError(
                f"{self.resource_kind.value} store call timed out after {self.timeout}s",
                "STORE_TIMEOUT",
            ) from e

    async def _deny(
        self,
        call: GatewayCall,
        principal: Principal,
        decision: Decision,
        resource_id: str | None,
        context: RequestContext | None,
    ) -> None:
        call.advance(GatewayState.DENIED)
        logger.info(
            "Denied %s on %s %s for principal %s: %s",
            call.action.value,
            self.resource_kind.value,
            resource_id or "-",
            principal.id,
            decision.reason,
        )
        error: AccessDeniedError = denial_error(decision, self.resource_kind, call.action)
        await self.activity.record(
            principal.id,
            call.action.activity_action,
            self.resource_kind,
            resource_id,
            f"Denied {call.action.value} {self.label}: {decision.reason}",
            context,
            ActivityStatus.FAILED,
        )
        call.advance(GatewayState.AUDITED_FAILURE)
        error.state = call.state.value
        raise error

    async def _fail(
        self,
        call: GatewayCall,
        principal: Principal,
        resource_id: str | None,
        context: RequestContext | None,
        error: MutationFailedError,
    ) -> None:
        """Report an authorized mutation that did not land."""
        call.advance(GatewayState.DENIED)
        logger.warning(
            "%s %s %s failed: %s",
            call.action.value,
            self.resource_kind.value,
            resource_id or "-",
            error.message,
        )
        await self.activity.record(
            principal.id,
            call.action.activity_action,
            self.resource_kind,
            resource_id,
            error.message,
            context,
            ActivityStatus.FAILED,
        )
        call.advance(GatewayState.AUDITED_FAILURE)
        error.state = call.state.value
        raise error

    async def _audit(
        self,
        call: GatewayCall,
        principal: Principal,
        resource_id: str,
        detail: str,
        context: RequestContext | None,
    ) -> ActivityRecord | None:
        record = await self.activity.record(
            principal.id,
            call.action.activity_action,
            self.resource_kind,
            resource_id,
            detail,
            context,
            ActivityStatus.SUCCESS,
        )
        call.advance(GatewayState.AUDITED_SUCCESS)
        return record

    @staticmethod
    def _reject_protected(payload: dict[str, Any]) -> None:
        protected = sorted(PROTECTED_FIELDS & payload.keys())
        if protected:
            raise ValidationException(
                f"{protected[0]} cannot be set by the caller", field=protected[0]
            )
