"""
Authorization façade used by gateways and routes.

Wraps the pure permission evaluator with resource-kind rules and turns
denials into the matching domain exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from listings.domain.entities.activity import RequestContext
from listings.domain.entities.principal import Principal
from listings.domain.exceptions import ForbiddenError, UnauthorizedError
from listings.domain.services.permission_evaluator import (
    Decision,
    DenialKind,
    evaluate,
)
from listings.shared.enums import Action, ActivityAction, ActivityStatus, ResourceKind, Role

if TYPE_CHECKING:
    from listings.application.services.activity_service import ActivityService

# Resource kinds only admins may manage, regardless of a subadmin's vector
ADMIN_ONLY_KINDS = frozenset({ResourceKind.SUBADMIN, ResourceKind.ACTIVITY, ResourceKind.USER_ACTIVITY})


class AuthorizationService:
    """
    Centralized permission checking.

    Holds no per-request state: the principal and resource snapshot are
    passed into every call.
    """

    def __init__(self, activity_service: "ActivityService | None" = None) -> None:
        self.activity = activity_service

    def authorize(
        self,
        principal: Principal,
        action: Action,
        resource_kind: ResourceKind,
        resource: Any = None,
    ) -> Decision:
        """Allow or Deny(reason) for ``action`` on a resource of ``resource_kind``."""
        if resource_kind in ADMIN_ONLY_KINDS and principal.is_active and not principal.is_admin:
            return Decision(
                allowed=False,
                reason="Insufficient permissions",
                denial=DenialKind.UNAUTHORIZED,
            )
        return evaluate(principal, action, resource)

    def require(
        self,
        principal: Principal,
        action: Action,
        resource_kind: ResourceKind,
        resource: Any = None,
    ) -> None:
        """Raise UnauthorizedError/ForbiddenError when ``authorize`` denies."""
        decision = self.authorize(principal, action, resource_kind, resource)
        if not decision.allowed:
            raise denial_error(decision, resource_kind, action)

    async def require_role(
        self,
        principal: Principal,
        *roles: Role,
        context: RequestContext | None = None,
    ) -> None:
        """
        Role gate for whole route groups.

        A failed check is recorded as a FAILED read of UNAUTHORIZED_ACCESS
        naming the attempted path.
        """
        if not principal.is_active:
            raise UnauthorizedError()
        if principal.role in roles:
            return

        if self.activity is not None:
            path = context.path if context and context.path else "unknown path"
            await self.activity.record(
                principal.id,
                ActivityAction.READ,
                ResourceKind.UNAUTHORIZED_ACCESS,
                detail=f"Attempted to access {path}",
                context=context,
                status=ActivityStatus.FAILED,
            )
        raise ForbiddenError("Insufficient permissions")


def denial_error(
    decision: Decision, resource_kind: ResourceKind, action: Action
) -> UnauthorizedError | ForbiddenError:
    """Map a deny decision onto the exception the caller should see."""
    resource = ResourceKind(resource_kind).value
    if decision.denial == DenialKind.UNAUTHORIZED:
        return UnauthorizedError(decision.reason or "Unauthorized", resource, Action(action).value)
    return ForbiddenError(decision.reason or "Forbidden", resource, Action(action).value)
