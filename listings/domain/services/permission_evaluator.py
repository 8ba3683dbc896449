"""
Permission evaluation.

One pure rule set decides whether a principal may perform an action on a
resource. Evaluation order:

1. inactive principals are denied everything;
2. admins are gated by their own permission vector only;
3. subadmins need the flag, and for update/delete also ownership;
4. every other role is denied.

``evaluate`` explains the verdict; ``can_perform`` is the boolean view of the
same rules.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from listings.domain.entities.principal import Principal
from listings.domain.services.ownership import is_owner
from listings.shared.enums import Action, Role

OWNERSHIP_GATED_ACTIONS = frozenset({Action.UPDATE, Action.DELETE})

OWNERSHIP_REASON = "You can only modify resources you created"


class DenialKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Decision:
    """Outcome of an authorization check"""

    allowed: bool
    reason: str | None = None
    denial: DenialKind | None = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(allowed=True)


def _deny(denial: DenialKind, reason: str) -> Decision:
    return Decision(allowed=False, reason=reason, denial=denial)


def evaluate(principal: Principal, action: Action, resource: Any = None) -> Decision:
    """Decide ``action`` for ``principal`` on ``resource`` (None for create)."""
    action = Action(action)

    if not principal.is_active:
        return _deny(DenialKind.UNAUTHORIZED, "Invalid or inactive user")

    if principal.role not in (Role.ADMIN, Role.SUBADMIN):
        return _deny(DenialKind.UNAUTHORIZED, "Insufficient permissions")

    if not principal.permissions.allows(action):
        return _deny(DenialKind.FORBIDDEN, f"Missing {action.permission_flag} permission")

    if principal.role == Role.ADMIN:
        return ALLOW

    if action in OWNERSHIP_GATED_ACTIONS and not is_owner(principal, resource):
        return _deny(DenialKind.FORBIDDEN, OWNERSHIP_REASON)

    return ALLOW


def can_perform(principal: Principal, action: Action, resource: Any = None) -> bool:
    """Boolean form of ``evaluate``."""
    return evaluate(principal, action, resource).allowed
