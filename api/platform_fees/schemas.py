"""
Pydantic schemas for platform-fee endpoints.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

RANGE_ORDER_MESSAGE = "max_value must be greater than or equal to min_value"


class TierName(str, Enum):
    BASIC = "BASIC"
    STANDARD = "STANDARD"
    PREMIUM = "PREMIUM"


class PlatformFeeCreate(BaseModel):
    tier_name: TierName
    min_value: int = Field(..., ge=0)
    max_value: int = Field(..., gt=0)
    platform_fee_percentage: float = Field(..., ge=0, le=100)

    @model_validator(mode="after")
    def check_range(self) -> "PlatformFeeCreate":
        if self.max_value < self.min_value:
            raise ValueError(RANGE_ORDER_MESSAGE)
        return self


class PlatformFeeUpdate(BaseModel):
    tier_name: TierName | None = None
    min_value: int | None = Field(default=None, ge=0)
    max_value: int | None = Field(default=None, gt=0)
    platform_fee_percentage: float | None = Field(default=None, ge=0, le=100)

    @model_validator(mode="after")
    def check_range(self) -> "PlatformFeeUpdate":
        if self.min_value is not None and self.max_value is not None and self.max_value < self.min_value:
            raise ValueError(RANGE_ORDER_MESSAGE)
        return self
