"""Authentication schemas for request/response models."""

from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from raices.presentation.api.sanitize import strip_markup


def _clean(value: Any) -> Any:
    return strip_markup(value) if isinstance(value, str) else value


class RegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: EmailStr = Field(..., description="User's email address")
    full_name: str = Field(
        ...,
        alias="fullName",
        min_length=1,
        max_length=255,
        description="Display name",
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=72,
        description="Password (6-72 characters)",
    )
    is_seller: bool = Field(default=False, alias="isSeller")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "email": "artesana@example.com",
                "fullName": "María López",
                "password": "securepassword123",
                "isSeller": True,
            },
        },
    )

    @field_validator("email", "full_name", mode="before")
    @classmethod
    def _sanitize(cls, v: Any) -> Any:
        return _clean(v)


class LoginRequest(BaseModel):
    """Request schema for user login."""

    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "artesana@example.com",
                "password": "securepassword123",
            },
        },
    )

    @field_validator("email", mode="before")
    @classmethod
    def _sanitize(cls, v: Any) -> Any:
        return _clean(v)


class RequestResetRequest(BaseModel):
    """Request schema for requesting a password reset code."""

    email: EmailStr

    @field_validator("email", mode="before")
    @classmethod
    def _sanitize(cls, v: Any) -> Any:
        return _clean(v)


class VerifyCodeRequest(BaseModel):
    """Request schema for checking a reset code without consuming it."""

    email: EmailStr
    code: str = Field(..., pattern=r"^\d{6}$", description="6-digit reset code")

    @field_validator("email", "code", mode="before")
    @classmethod
    def _sanitize(cls, v: Any) -> Any:
        return _clean(v)


class ResetPasswordRequest(BaseModel):
    """Request schema for setting a new password with a reset code."""

    email: EmailStr
    code: str = Field(..., pattern=r"^\d{6}$", description="6-digit reset code")
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=72)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("email", "code", mode="before")
    @classmethod
    def _sanitize(cls, v: Any) -> Any:
        return _clean(v)


class UserResponse(BaseModel):
    """Public view of an account. Never includes the password hash."""

    id: UUID
    email: str
    full_name: str
    is_seller: bool


class AuthResponse(BaseModel):
    """Response schema for register and login.

    ``access_token`` is only filled when the API runs with bearer
    transport; with cookie transport the token travels in ``Set-Cookie``.
    """

    success: bool = True
    message: str
    user: UserResponse
    access_token: str | None = None
    token_type: str = "bearer"


class ProfileResponse(BaseModel):
    """Response schema for the current session's account."""

    success: bool = True
    message: str = "Authenticated user"
    user: UserResponse


class MessageResponse(BaseModel):
    """Generic confirmation response."""

    success: bool = True
    message: str
