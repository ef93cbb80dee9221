"""
Specialist API endpoints.

Reads are public; writes require an admin or a specialist account.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from auth.dependencies import check_auth
from auth.schemas import UserRole
from core.responses import envelope

from . import schemas, service

router = APIRouter(prefix="/specialists")

can_manage_specialists = check_auth(UserRole.ADMIN, UserRole.SPECIALIST)


@router.post("", status_code=201)
async def create_specialist(
    payload: schemas.SpecialistCreate,
    _: dict = Depends(can_manage_specialists),
) -> dict:
    row = await service.create_specialist(**payload.model_dump())
    return envelope("Specialist created successfully", row, status_code=201)


@router.get("")
async def list_specialists(
    page: int = Query(service.DEFAULT_PAGE, ge=1),
    limit: int = Query(service.DEFAULT_LIMIT, ge=1, le=service.MAX_LIMIT),
    search: str = Query(default="", max_length=255),
    is_draft: bool | None = None,
    verification_status: schemas.VerificationStatus | None = None,
    is_verified: bool | None = None,
) -> dict:
    result = await service.list_specialists(
        page=page,
        limit=limit,
        search=search,
        is_draft=is_draft,
        verification_status=verification_status,
        is_verified=is_verified,
    )
    return {**envelope("Specialists retrieved successfully", result["data"]), "meta": result["meta"]}


@router.get("/slug/{slug}")
async def get_specialist_by_slug(slug: str) -> dict:
    row = await service.get_specialist_by_slug(slug)
    return envelope("Specialist retrieved successfully", row)


@router.get("/{specialist_id}")
async def get_specialist(specialist_id: str) -> dict:
    row = await service.get_specialist(specialist_id)
    return envelope("Specialist retrieved successfully", row)


@router.patch("/{specialist_id}")
async def update_specialist(
    specialist_id: str,
    payload: schemas.SpecialistUpdate,
    _: dict = Depends(can_manage_specialists),
) -> dict:
    row = await service.update_specialist(specialist_id, payload.model_dump(exclude_unset=True))
    return envelope("Specialist updated successfully", row)


@router.delete("/{specialist_id}")
async def delete_specialist(
    specialist_id: str,
    _: dict = Depends(can_manage_specialists),
) -> dict:
    row = await service.delete_specialist(specialist_id)
    return envelope("Specialist deleted successfully", row)


@router.post("/{specialist_id}/service-offerings")
async def add_service_offerings(
    specialist_id: str,
    payload: schemas.ServiceOfferingLinks,
    _: dict = Depends(can_manage_specialists),
) -> dict:
    row = await service.add_service_offerings(specialist_id, payload.service_offerings_master_list_ids)
    return envelope("Service offerings added successfully", row)


@router.delete("/{specialist_id}/service-offerings")
async def remove_service_offerings(
    specialist_id: str,
    payload: schemas.ServiceOfferingLinks,
    _: dict = Depends(can_manage_specialists),
) -> dict:
    row = await service.remove_service_offerings(specialist_id, payload.service_offerings_master_list_ids)
    return envelope("Service offerings removed successfully", row)
