from pydantic import BaseModel, Field, field_validator

from listings.presentation.api.v1.schemas.principal import PrincipalResponse, normalize_email


class LoginRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return v.strip().lower()


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: str
    password: str = Field(..., min_length=6)
    name: str | None = Field(None, max_length=50)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return normalize_email(v)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: PrincipalResponse


class TokenPayload(BaseModel):
    """Claims carried by an access token"""

    sub: str
    role: str | None = None
    exp: int | None = None
