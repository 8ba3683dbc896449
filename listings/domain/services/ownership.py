"""
Ownership resolution.

Resources reach the core in two shapes: ``created_by`` holding the bare
creator id, or ``created_by`` holding an expanded user (a mapping with
``id``/``_id`` or an object with an ``id`` attribute). Every ownership check
goes through ``resolve_creator_id`` so both shapes normalize the same way.
"""

from collections.abc import Mapping
from typing import Any

from listings.domain.entities.principal import Principal


class _NoOwner:
    """Sentinel creator id that never equals anything, itself included."""

    __slots__ = ()

    def __eq__(self, other: object) -> bool:
        return False

    def __ne__(self, other: object) -> bool:
        return True

    def __hash__(self) -> int:
        return id(self)

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_OWNER"


NO_OWNER = _NoOwner()

_CREATOR_KEYS = ("created_by", "createdBy")
_ID_KEYS = ("id", "_id")


def _read_creator(resource: Any) -> Any:
    if resource is None:
        return None
    if isinstance(resource, Mapping):
        for key in _CREATOR_KEYS:
            if key in resource:
                return resource[key]
        return None
    return getattr(resource, "created_by", None)


def _normalize(value: Any) -> str | _NoOwner:
    if value is None or isinstance(value, bool):
        return NO_OWNER
    if isinstance(value, str | int):
        text = str(value).strip()
        return text if text else NO_OWNER
    if isinstance(value, Mapping):
        for key in _ID_KEYS:
            if value.get(key) is not None:
                return _normalize(value[key])
        return NO_OWNER
    nested = getattr(value, "id", None)
    if nested is not None and nested is not value:
        return _normalize(nested)
    return NO_OWNER


def resolve_creator_id(resource: Any) -> str | _NoOwner:
    """
    Return the normalized creator id of ``resource``.

    Returns ``NO_OWNER`` when the creator is missing or unreadable, so an
    ownership comparison against it always fails.
    """
    return _normalize(_read_creator(resource))


def is_owner(principal: Principal, resource: Any) -> bool:
    """True when ``principal`` is the recorded creator of ``resource``."""
    creator_id = resolve_creator_id(resource)
    if creator_id is NO_OWNER:
        return False
    return creator_id == str(principal.id)
