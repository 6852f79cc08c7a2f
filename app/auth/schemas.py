"""
AuthNotes - Authentication Schemas

Pydantic schemas for auth request/response validation. Request bodies
reject unknown fields; JSON keys are camelCase on the wire.
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import date, datetime


class _Request(BaseModel):
    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class _Response(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


def _normalize_email(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


# -----------------------------------------------------------------------------
# Request Schemas
# -----------------------------------------------------------------------------

class SignupRequest(_Request):
    """Schema for password signup."""
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128, description="Password must be at least 8 characters")
    date_of_birth: Optional[date] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return _strip(v)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def blank_date_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LoginRequest(_Request):
    """Schema for password login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        return _normalize_email(v)


class GoogleLoginRequest(_Request):
    """Schema for Google sign-in; token is the Google ID token."""
    token: str = Field(..., min_length=1)


# -----------------------------------------------------------------------------
# Response Schemas
# -----------------------------------------------------------------------------

class UserResponse(_Response):
    """Public user view. Never carries the password hash or OAuth subject."""
    id: str
    name: str
    email: str
    date_of_birth: Optional[date] = None
    avatar: Optional[str] = None


class AuthResponse(BaseModel):
    """Schema for signup/login/google responses."""
    message: str
    token: str
    user: UserResponse


class ProfileResponse(BaseModel):
    user: UserResponse


class AuthStatusResponse(_Response):
    google_enabled: bool
    token_expire_days: int
    storage: str


# -----------------------------------------------------------------------------
# Internal
# -----------------------------------------------------------------------------

class TokenClaims(BaseModel):
    """Decoded bearer token (internal use)."""
    user_id: str
    version: int = 0
    exp: datetime


class VerifiedIdentity(BaseModel):
    """Identity claims from a verified Google ID token."""
    subject: str
    email: str
    name: Optional[str] = None
    picture: Optional[str] = None
