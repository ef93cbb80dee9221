"""
Pydantic schemas for user administration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from auth.schemas import UserRole, UserStatus


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=255)
    role: UserRole | None = None
    status: UserStatus | None = None
