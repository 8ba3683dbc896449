"""Activity log domain entities."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from listings.shared.enums import ActivityAction, ActivityStatus, ResourceKind


@dataclass(frozen=True)
class RequestContext:
    """Where a request came from, as recorded in the activity log."""

    ip_address: str | None = None
    user_agent: str | None = None
    path: str | None = None


@dataclass(frozen=True)
class ActivityRecord:
    """Immutable audit entry."""

    id: str
    actor_id: str | None
    action: ActivityAction
    resource_kind: str
    status: ActivityStatus
    created_at: datetime
    resource_id: str | None = None
    detail: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "actor_id": self.actor_id,
            "action": self.action.value,
            "resource_kind": self.resource_kind,
            "resource_id": self.resource_id,
            "status": self.status.value,
            "detail": self.detail,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class ActivityFilter:
    """
    Filters for activity queries. All set fields are ANDed; None is a no-op.
    Time bounds are inclusive.
    """

    action: ActivityAction | None = None
    resource_kind: str | None = None
    actor_id: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    def __post_init__(self) -> None:
        # Empty strings from query strings mean "no filter"
        for name in ("resource_kind", "actor_id"):
            if getattr(self, name) == "":
                object.__setattr__(self, name, None)
        if isinstance(self.resource_kind, ResourceKind):
            object.__setattr__(self, "resource_kind", self.resource_kind.value)


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_dict(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


@dataclass(frozen=True)
class ActivityPage:
    records: list[ActivityRecord] = field(default_factory=list)
    pagination: Pagination = field(default_factory=lambda: Pagination(1, 1, 0, 0))
