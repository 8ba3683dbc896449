"""
Principal domain entity.

This represents an authenticated actor, independent of how its user row
is stored in the database.
"""

from dataclasses import asdict, dataclass, field, replace
from typing import Any

from listings.shared.enums import Action, Role


@dataclass(frozen=True)
class PermissionVector:
    """Fixed-shape {create, read, update, delete} grant attached to a principal."""

    can_create: bool = False
    can_read: bool = True
    can_update: bool = False
    can_delete: bool = False

    def allows(self, action: Action) -> bool:
        return bool(getattr(self, action.permission_flag))

    def merged(self, changes: dict[str, Any]) -> "PermissionVector":
        """Return a copy with the known, non-None flags in ``changes`` applied."""
        known = {
            k: bool(v)
            for k, v in changes.items()
            if k in self.__dataclass_fields__ and v is not None
        }
        return replace(self, **known)

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "PermissionVector":
        if not data:
            return cls()
        return cls().merged(data)

    @classmethod
    def full(cls) -> "PermissionVector":
        return cls(can_create=True, can_read=True, can_update=True, can_delete=True)

    @classmethod
    def read_only(cls) -> "PermissionVector":
        return cls(can_create=False, can_read=True, can_update=False, can_delete=False)

    @classmethod
    def default_for(cls, role: Role) -> "PermissionVector":
        """Vector assigned on creation when the creator supplies none."""
        return cls.full() if role == Role.ADMIN else cls.read_only()


@dataclass(frozen=True)
class Principal:
    """
    Authenticated actor passed explicitly into every authorize/audit call.

    Immutable so an authorization decision can never observe a principal
    changing underneath it.
    """

    id: str
    role: Role
    permissions: PermissionVector = field(default_factory=PermissionVector)
    is_active: bool = True
    username: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_subadmin(self) -> bool:
        return self.role == Role.SUBADMIN

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role.value,
            "permissions": self.permissions.to_dict(),
            "is_active": self.is_active,
            "username": self.username,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Principal":
        return cls(
            id=str(data["id"]),
            role=Role(data["role"]),
            permissions=PermissionVector.from_dict(data.get("permissions")),
            is_active=bool(data.get("is_active", True)),
            username=data.get("username"),
        )
