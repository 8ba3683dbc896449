from listings.domain.entities.activity import (
    ActivityFilter,
    ActivityPage,
    ActivityRecord,
    Pagination,
    RequestContext,
)
from listings.domain.entities.principal import PermissionVector, Principal

__all__ = [
    "ActivityFilter",
    "ActivityPage",
    "ActivityRecord",
    "Pagination",
    "PermissionVector",
    "Principal",
    "RequestContext",
]
