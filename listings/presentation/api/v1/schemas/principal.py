import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from listings.presentation.api.v1.schemas.activity import PaginationResponse

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


class PermissionsSchema(BaseModel):
    """Full permission vector"""

    can_create: bool = False
    can_read: bool = True
    can_update: bool = False
    can_delete: bool = False


class PermissionsUpdate(BaseModel):
    """Partial permission vector; unset flags keep their stored value"""

    can_create: bool | None = None
    can_read: bool | None = None
    can_update: bool | None = None
    can_delete: bool | None = None


class PrincipalResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    is_active: bool
    permissions: PermissionsSchema
    created_by: str | None = None
    last_login: datetime | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SubadminCreate(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: str
    password: str = Field(..., min_length=6)
    name: str | None = Field(None, max_length=50)
    permissions: PermissionsSchema | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class SubadminUpdate(BaseModel):
    username: str | None = Field(None, min_length=3, max_length=30)
    email: str | None = None
    password: str | None = Field(None, min_length=6)
    name: str | None = Field(None, max_length=50)
    permissions: PermissionsUpdate | None = None
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        return normalize_email(v) if v is not None else v


class SubadminEnvelope(BaseModel):
    message: str | None = None
    subadmin: PrincipalResponse


class SubadminListResponse(BaseModel):
    subadmins: list[PrincipalResponse]
    pagination: PaginationResponse
