from listings.domain.services.ownership import NO_OWNER, is_owner, resolve_creator_id
from listings.domain.services.permission_evaluator import (
    ALLOW,
    Decision,
    DenialKind,
    can_perform,
    evaluate,
)

__all__ = [
    "ALLOW",
    "NO_OWNER",
    "Decision",
    "DenialKind",
    "can_perform",
    "evaluate",
    "is_owner",
    "resolve_creator_id",
]
