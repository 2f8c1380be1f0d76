"""Authentication request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    """User signup request."""

    email: EmailStr = Field(description="User email address")
    password: str = Field(
        min_length=6,
        max_length=128,
        description="Password (6-128 chars)",
    )

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class LoginRequest(BaseModel):
    """User login request."""

    email: EmailStr = Field(description="User email address")
    password: str = Field(min_length=1, description="User password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower().strip()


class UserResponse(BaseModel):
    """Public user representation (never includes the password hash)."""

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: int
    email: str
    created_at: datetime


class AuthResponse(BaseModel):
    """Signup/login response: bearer token plus the user."""

    model_config = ConfigDict(frozen=True)

    token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token TTL in seconds")
    user: UserResponse


class TokenPayload(BaseModel):
    """Decoded JWT payload."""

    model_config = ConfigDict(frozen=True)

    sub: str
    email: str
    type: str
    jti: str
    iss: str
    exp: int

    @property
    def user_id(self) -> int:
        return int(self.sub)
