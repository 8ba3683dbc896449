from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from listings.domain.entities.principal import PermissionVector, Principal
from listings.infrastructure.persistence.database import Base
from listings.infrastructure.persistence.models.mixins import (CuidMixin,
                                                               TimestampMixin,
                                                               VersionedMixin)
from listings.shared.enums import Role


class User(CuidMixin, TimestampMixin, VersionedMixin, Base):
    """
    Platform account: admin, subadmin or end user.

    ``created_by`` is the admin that created a subadmin (null for self-signup
    and seeded admins). Accounts are deactivated, never deleted.
    """

    __tablename__ = "user"

    username: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    hashed_password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(50), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = mapped_column(
        String, ForeignKey("user.id", ondelete="SET NULL"), nullable=True, index=True
    )
    last_login: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    permissions: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=lambda: PermissionVector.read_only().to_dict()
    )

    def to_principal(self) -> Principal:
        return Principal(
            id=self.id,
            role=Role(self.role),
            permissions=PermissionVector.from_dict(self.permissions),
            is_active=self.is_active,
            username=self.username,
        )
