"""
Auth API schemas (request models and enums).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class UserRole(str, Enum):
    USER = "USER"
    SPECIALIST = "SPECIALIST"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


def _lower_email(value: str) -> str:
    value = (value or "").strip().lower()
    if "@" not in value:
        raise ValueError("Invalid email address.")
    return value


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=6, max_length=100)
    name: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _lower_email(value)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _lower_email(value)


class RefreshRequest(BaseModel):
    # The cookie is preferred; the body is a fallback for non-browser clients.
    refresh_token: str | None = None


class ForgetPasswordRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _lower_email(value)


class ResetPasswordRequest(BaseModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=100)

    model_config = {"populate_by_name": True}
