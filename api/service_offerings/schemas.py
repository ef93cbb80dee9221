"""
Pydantic schemas for the service-offerings master list.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class ServiceOfferingCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class ServiceOfferingUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
