"""User-related Pydantic schemas for request/response validation."""

from pydantic import EmailStr, Field, field_validator

from .base import BaseSchema


class UserSignupRequest(BaseSchema):
    """Schema for user signup request."""

    name: str = Field(..., min_length=1, max_length=100, description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, max_length=72, description="Account password")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate that name is not blank."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()


class UserLoginRequest(BaseSchema):
    """Schema for user login request."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, max_length=72, description="Account password")


class UserInfoResponse(BaseSchema):
    """Schema for the authenticated user's public profile."""

    message: str = "OK"
    name: str
    email: str


class LogoutResponse(BaseSchema):
    """Schema for logout response."""

    message: str = "Logout successful"
