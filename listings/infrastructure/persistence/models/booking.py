from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from listings.infrastructure.persistence.database import Base
from listings.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin
from listings.shared.enums import BookingStatus


class Booking(CuidMixin, TimestampMixin, Base):
    """
    A principal's request to stay at or use a listing.

    ``listing_id`` is polymorphic over the listing tables, so it carries no
    foreign key; ``listing_kind`` names the table.
    """

    __tablename__ = "booking"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    listing_id: Mapped[str] = mapped_column(String, nullable=False)
    listing_kind: Mapped[str] = mapped_column(String(32), nullable=False)
    check_in_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    check_out_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=BookingStatus.PENDING.value
    )
    contact_phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_booking_user_created", "user_id", "created_at"),
        Index("ix_booking_listing", "listing_kind", "listing_id"),
    )
