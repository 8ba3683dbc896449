from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from listings.domain.entities.activity import ActivityRecord
from listings.infrastructure.persistence.database import Base
from listings.infrastructure.persistence.models.mixins import CuidMixin
from listings.shared.enums import ActivityAction, ActivityStatus
from listings.shared.utils import ensure_utc


class Activity(CuidMixin, Base):
    """
    Append-only activity log row.

    ``created_at`` is assigned by the recorder's monotonic clock rather than
    the database so ordering is decided before the row is written. There is
    no ``updated_at``: rows are never modified.
    """

    __tablename__ = "activity"

    actor_id: Mapped[str | None] = mapped_column(String, nullable=True)
    action: Mapped[str] = mapped_column(String(16), nullable=False)
    resource_kind: Mapped[str] = mapped_column(String(32), nullable=False)
    resource_id: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String(8), nullable=False)
    detail: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)  # IPv6 max length
    user_agent: Mapped[str | None] = mapped_column(String(512), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_activity_created", "created_at", "id"),
        Index("ix_activity_actor_created", "actor_id", "created_at"),
        Index("ix_activity_action", "action"),
        Index("ix_activity_resource_kind", "resource_kind"),
    )

    @classmethod
    def from_record(cls, record: ActivityRecord) -> "Activity":
        return cls(
            id=record.id,
            actor_id=record.actor_id,
            action=record.action.value,
            resource_kind=record.resource_kind,
            resource_id=record.resource_id,
            status=record.status.value,
            detail=record.detail,
            ip_address=record.ip_address,
            user_agent=record.user_agent[:512] if record.user_agent else None,
            created_at=record.created_at,
        )

    def to_record(self) -> ActivityRecord:
        return ActivityRecord(
            id=self.id,
            actor_id=self.actor_id,
            action=ActivityAction(self.action),
            resource_kind=self.resource_kind,
            status=ActivityStatus(self.status),
            created_at=ensure_utc(self.created_at),
            resource_id=self.resource_id,
            detail=self.detail,
            ip_address=self.ip_address,
            user_agent=self.user_agent,
        )
