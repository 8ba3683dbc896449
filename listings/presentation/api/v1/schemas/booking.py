from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from listings.presentation.api.v1.schemas.activity import PaginationResponse
from listings.presentation.api.v1.schemas.principal import normalize_email
from listings.shared.utils import ensure_utc


class BookingCreate(BaseModel):
    listing_id: str = Field(..., min_length=1)
    listing_kind: Literal["PROPERTY", "MESS", "GAMING_ZONE"]
    check_in_date: datetime
    check_out_date: datetime | None = None
    total_amount: Decimal = Field(..., gt=0)
    contact_phone: str | None = Field(None, max_length=20)
    contact_email: str | None = None
    notes: str | None = Field(None, max_length=1000)

    @field_validator("check_in_date", "check_out_date")
    @classmethod
    def as_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return normalize_email(v) if v else None

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        if self.check_out_date is not None and self.check_out_date < self.check_in_date:
            raise ValueError("check_out_date must not be before check_in_date")
        return self


class BookingResponse(BaseModel):
    id: str
    user_id: str
    listing_id: str
    listing_kind: str
    check_in_date: datetime
    check_out_date: datetime | None = None
    total_amount: Decimal
    status: str
    contact_phone: str | None = None
    contact_email: str | None = None
    notes: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingEnvelope(BaseModel):
    message: str | None = None
    booking: BookingResponse


class BookingListResponse(BaseModel):
    bookings: list[BookingResponse]
    pagination: PaginationResponse
