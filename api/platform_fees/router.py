"""
Platform-fee API endpoints.
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, status

from auth.dependencies import get_current_user, require_admin
from core.responses import envelope

from . import schemas, service

router = APIRouter(prefix="/platform-fees")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_platform_fee(
    payload: schemas.PlatformFeeCreate,
    _: dict = Depends(require_admin),
) -> dict:
    row = await service.create_platform_fee(**payload.model_dump())
    return envelope("Platform fee created successfully", row, status_code=status.HTTP_201_CREATED)


@router.get("")
async def list_platform_fees(_: dict = Depends(require_admin)) -> dict:
    rows = await service.list_platform_fees()
    return envelope("Platform fees retrieved successfully", rows)


@router.get("/quote")
async def quote_platform_fee(
    amount: float = Query(..., gt=0),
    _: dict = Depends(get_current_user),
) -> dict:
    result = await service.quote(amount)
    return envelope("Platform fee calculated successfully", asdict(result))


@router.get("/{tier_id}")
async def get_platform_fee(tier_id: str, _: dict = Depends(require_admin)) -> dict:
    row = await service.get_platform_fee(tier_id)
    return envelope("Platform fee retrieved successfully", row)


@router.patch("/{tier_id}")
async def update_platform_fee(
    tier_id: str,
    payload: schemas.PlatformFeeUpdate,
    _: dict = Depends(require_admin),
) -> dict:
    row = await service.update_platform_fee(tier_id, payload.model_dump(exclude_unset=True))
    return envelope("Platform fee updated successfully", row)


@router.delete("/{tier_id}")
async def delete_platform_fee(tier_id: str, _: dict = Depends(require_admin)) -> dict:
    row = await service.delete_platform_fee(tier_id)
    return envelope("Platform fee deleted successfully", row)
