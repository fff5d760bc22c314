"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from fleetflow.app.schemas.common import CamelModel


class UserSignup(CamelModel):
    """
    Schema for user registration.

    Role is kept as a plain string so an unknown role gets the
    "Invalid role" business error instead of a generic validation error.
    Defaults to dispatcher.
    """
    name: str = Field(..., min_length=1, max_length=120, description="Display name")
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=6, description="Password (min 6 characters)")
    role: Optional[str] = Field(default=None, description="User role (defaults to dispatcher)")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class UserLogin(CamelModel):
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class UserPublic(CamelModel):
    """User fields safe to send to clients."""
    id: int
    name: str
    email: str
    role: str


class TokenResponse(CamelModel):
    """
    Returned by successful signup/login operations.
    """
    success: bool = True
    token: str
    user: UserPublic
