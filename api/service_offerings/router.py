"""
Service-offerings master list API endpoints.

Reads are public; writes require an admin.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from auth.dependencies import require_admin
from core.responses import envelope

from . import schemas, service

router = APIRouter(prefix="/service-offerings-master-list")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_service_offering(
    payload: schemas.ServiceOfferingCreate,
    _: dict = Depends(require_admin),
) -> dict:
    row = await service.create_service_offering(title=payload.title, description=payload.description)
    return envelope(
        "Service offering master list created successfully",
        row,
        status_code=status.HTTP_201_CREATED,
    )


@router.get("")
async def list_service_offerings() -> dict:
    rows = await service.list_service_offerings()
    return envelope("Service offering master lists retrieved successfully", rows)


@router.get("/{item_id}")
async def get_service_offering(item_id: str) -> dict:
    row = await service.get_service_offering(item_id)
    return envelope("Service offering master list retrieved successfully", row)


@router.patch("/{item_id}")
async def update_service_offering(
    item_id: str,
    payload: schemas.ServiceOfferingUpdate,
    _: dict = Depends(require_admin),
) -> dict:
    row = await service.update_service_offering(
        item_id,
        title=payload.title,
        description=payload.description,
    )
    return envelope("Service offering master list updated successfully", row)


@router.delete("/{item_id}")
async def delete_service_offering(item_id: str, _: dict = Depends(require_admin)) -> dict:
    row = await service.delete_service_offering(item_id)
    return envelope("Service offering master list deleted successfully", row)
