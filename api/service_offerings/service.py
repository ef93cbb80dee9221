"""
Service-offerings master list business logic.
"""

from __future__ import annotations

from core.errors import NotFound

from . import repository

NOT_FOUND_MESSAGE = "Service offering master list not found"


async def create_service_offering(*, title: str, description: str | None = None) -> dict:
    return await repository.create_item(title=title.strip(), description=description)


async def list_service_offerings() -> list[dict]:
    return await repository.list_items()


async def get_service_offering(item_id: str) -> dict:
    row = await repository.get_item(item_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return {**row, "specialist_ids": await repository.list_specialist_ids_for_item(item_id)}


async def update_service_offering(
    item_id: str,
    *,
    title: str | None = None,
    description: str | None = None,
) -> dict:
    row = await repository.update_item(
        item_id,
        title=title.strip() if title else None,
        description=description,
    )
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return row


async def delete_service_offering(item_id: str) -> dict:
    row = await repository.delete_item(item_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return row


async def all_exist(item_ids: list[str]) -> bool:
    unique_ids = {str(i) for i in item_ids}
    return await repository.count_existing(sorted(unique_ids)) == len(unique_ids)
