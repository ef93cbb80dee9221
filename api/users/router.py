"""
User administration endpoints (admin only).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth.dependencies import require_admin
from core.responses import envelope

from . import schemas, service

router = APIRouter(prefix="/users", dependencies=[Depends(require_admin)])


@router.get("")
async def list_users(
    email: str = Query(default="", max_length=320),
    name: str = Query(default="", max_length=255),
) -> dict:
    rows = await service.list_users(email=email, name=name)
    return envelope("Users retrieved successfully", rows)


@router.get("/{user_id}")
async def get_user(user_id: str) -> dict:
    return envelope("User retrieved successfully", await service.get_user(user_id))


@router.patch("/{user_id}")
async def update_user(user_id: str, payload: schemas.UserUpdate) -> dict:
    row = await service.update_user(user_id, **payload.model_dump(exclude_unset=True))
    return envelope("User updated successfully", row)


@router.delete("/{user_id}")
async def delete_user(user_id: str) -> dict:
    return envelope("User deleted successfully", await service.delete_user(user_id))
