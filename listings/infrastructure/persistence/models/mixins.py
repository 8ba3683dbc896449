"""
SQLAlchemy mixins for common model patterns.

These mixins provide reusable column definitions so every resource table
carries the same identity, timestamp, versioning and ownership columns.
"""
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from listings.shared.utils.generators import generate_cuid


class CuidMixin:
    """
    Mixin for models using CUID as primary key.

    Provides:
        - id: String primary key with automatic CUID generation
    """

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """
    Mixin for timestamp tracking.

    Provides:
        - created_at: Timestamp set on creation (server-side default)
        - updated_at: Timestamp updated on modification (server-side default + onupdate)
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class VersionedMixin:
    """
    Optimistic locking with version tracking.

    Provides:
        - version: Integer counter incremented by every conditional write

    Writers update with ``WHERE id = :id AND version = :seen_version`` and
    treat zero affected rows as a concurrent modification.
    """

    @declared_attr
    def version(cls) -> Mapped[int]:
        return mapped_column(Integer, default=1, nullable=False)


class OwnedMixin:
    """
    Creator tracking and visibility.

    Provides:
        - created_by: User ID of the creator; written once on insert
        - is_active: Soft visibility flag, distinct from deletion
    """

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(
            String,
            ForeignKey("user.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        )

    @declared_attr
    def is_active(cls) -> Mapped[bool]:
        return mapped_column(Boolean, nullable=False, default=True)


class ListingModel(CuidMixin, TimestampMixin, VersionedMixin, OwnedMixin):
    """
    Complete mixin for gated listing resources.

    Combines:
        - CuidMixin: CUID primary key
        - TimestampMixin: Created/updated timestamps
        - VersionedMixin: Optimistic locking counter
        - OwnedMixin: created_by + is_active
    """

    __abstract__ = True
