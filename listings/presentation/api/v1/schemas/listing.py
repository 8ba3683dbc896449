from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from listings.presentation.api.v1.schemas.activity import PaginationResponse


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Must not be blank")
    return value


class ListingResponseBase(BaseModel):
    id: str
    description: str | None = None
    location: str
    created_by: str | None
    is_active: bool
    version: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Property Schemas
class PropertyCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: Decimal = Field(..., gt=0, description="Monthly rent")
    location: str = Field(..., min_length=1, max_length=255)

    @field_validator("title", "location")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class PropertyUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    price: Decimal | None = Field(None, gt=0)
    location: str | None = Field(None, min_length=1, max_length=255)
    is_active: bool | None = None


class PropertyResponse(ListingResponseBase):
    title: str
    price: Decimal


# Mess Schemas
class MessCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    location: str = Field(..., min_length=1, max_length=255)
    monthly_price: Decimal | None = Field(None, gt=0)

    @field_validator("name", "location")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class MessUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, min_length=1, max_length=255)
    monthly_price: Decimal | None = Field(None, gt=0)
    is_active: bool | None = None


class MessResponse(ListingResponseBase):
    name: str
    monthly_price: Decimal | None = None


# Gaming Zone Schemas
class GamingZoneCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    location: str = Field(..., min_length=1, max_length=255)
    hourly_rate: Decimal | None = Field(None, gt=0)

    @field_validator("name", "location")
    @classmethod
    def not_blank(cls, v: str) -> str:
        return _strip_required(v)


class GamingZoneUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None
    location: str | None = Field(None, min_length=1, max_length=255)
    hourly_rate: Decimal | None = Field(None, gt=0)
    is_active: bool | None = None


class GamingZoneResponse(ListingResponseBase):
    name: str
    hourly_rate: Decimal | None = None


# Envelopes
class PropertyEnvelope(BaseModel):
    message: str | None = None
    property: PropertyResponse


class PropertyListResponse(BaseModel):
    properties: list[PropertyResponse]
    pagination: PaginationResponse


class MessEnvelope(BaseModel):
    message: str | None = None
    mess: MessResponse


class MessListResponse(BaseModel):
    messes: list[MessResponse]
    pagination: PaginationResponse


class GamingZoneEnvelope(BaseModel):
    message: str | None = None
    gaming_zone: GamingZoneResponse


class GamingZoneListResponse(BaseModel):
    gaming_zones: list[GamingZoneResponse]
    pagination: PaginationResponse


class MessageResponse(BaseModel):
    message: str
