"""
Pydantic schemas for specialist endpoints.
"""

from __future__ import annotations

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class VerificationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class SpecialistCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    base_price: float = Field(..., gt=0)
    duration_days: int = Field(..., gt=0)
    is_draft: bool = True
    service_offerings_master_list_ids: list[UUID] = Field(default_factory=list)


class SpecialistUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    slug: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1)
    base_price: float | None = Field(default=None, gt=0)
    duration_days: int | None = Field(default=None, gt=0)
    is_draft: bool | None = None
    verification_status: VerificationStatus | None = None
    is_verified: bool | None = None
    # None leaves the links alone; [] clears them.
    service_offerings_master_list_ids: list[UUID] | None = None


class ServiceOfferingLinks(BaseModel):
    service_offerings_master_list_ids: list[UUID] = Field(..., min_length=1)
