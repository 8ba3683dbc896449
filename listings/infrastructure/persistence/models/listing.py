from decimal import Decimal

from sqlalchemy import Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from listings.infrastructure.persistence.database import Base
from listings.infrastructure.persistence.models.mixins import ListingModel


class Property(ListingModel, Base):
    """PG/hostel listing"""

    __tablename__ = "property"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)


class Mess(ListingModel, Base):
    """Mess / cafe listing"""

    __tablename__ = "mess"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    monthly_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)


class GamingZone(ListingModel, Base):
    """Gaming zone listing"""

    __tablename__ = "gaming_zone"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    hourly_rate: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
