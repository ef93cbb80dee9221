"""
Specialist business logic.

`platform_fee` and `final_price` are derived from `base_price` through the
platform-fee tier table whenever a price is set; clients never send them.
"""

from __future__ import annotations

import logging
import math
import re
import unicodedata
from typing import Any

from core import db
from core.errors import BadRequest, Conflict, NotFound
from platform_fees import service as platform_fee_service
from service_offerings import service as offering_service

from . import repository

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Specialist not found"
INVALID_OFFERINGS_MESSAGE = "One or more service offering master list IDs are invalid"

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def slugify(text: str) -> str:
    """
    "Tax Filing & Advice" -> "tax-filing-and-advice"
    """
    text = (text or "").replace("&", " and ")
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-zA-Z0-9]+", "-", text.lower())
    return text.strip("-")


def _ids(values: list[Any] | None) -> list[str]:
    # Keep order, drop duplicates.
    return list(dict.fromkeys(str(v) for v in (values or [])))


async def _require_offerings(master_list_ids: list[str]) -> None:
    if master_list_ids and not await offering_service.all_exist(master_list_ids):
        raise BadRequest(INVALID_OFFERINGS_MESSAGE)


async def _price_fields(base_price: float) -> dict[str, float]:
    quote = await platform_fee_service.quote(base_price)
    return {
        "base_price": quote.base_amount,
        "platform_fee": quote.fee_amount,
        "final_price": quote.final_amount,
    }


async def _with_offerings(rows: list[dict]) -> list[dict]:
    offerings = await repository.list_offerings([str(r["id"]) for r in rows])
    by_specialist: dict[str, list[dict]] = {}
    for item in offerings:
        specialist_id = str(item.pop("specialist_id"))
        by_specialist.setdefault(specialist_id, []).append(item)
    return [{**row, "service_offerings": by_specialist.get(str(row["id"]), [])} for row in rows]


async def _one_with_offerings(row: dict) -> dict:
    return (await _with_offerings([row]))[0]


async def create_specialist(
    *,
    title: str,
    description: str,
    base_price: float,
    duration_days: int,
    is_draft: bool = True,
    service_offerings_master_list_ids: list[Any] | None = None,
) -> dict:
    slug = slugify(title)
    if not slug:
        raise BadRequest("Title must contain at least one letter or digit")
    if await repository.get_specialist_by_slug(slug) is not None:
        raise Conflict(f'Specialist with slug "{slug}" already exists')

    master_list_ids = _ids(service_offerings_master_list_ids)
    await _require_offerings(master_list_ids)

    prices = await _price_fields(base_price)
    row = await repository.create_specialist(
        title=title.strip(),
        slug=slug,
        description=description,
        duration_days=duration_days,
        is_draft=is_draft,
        master_list_ids=master_list_ids,
        **prices,
    )
    logger.info(
        "specialist_created id=%s base_price=%s platform_fee=%s",
        row["id"],
        prices["base_price"],
        prices["platform_fee"],
    )
    return await _one_with_offerings(row)


async def list_specialists(
    *,
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    search: str = "",
    is_draft: bool | None = None,
    verification_status: Any = None,
    is_verified: bool | None = None,
) -> dict:
    page = max(int(page), 1)
    limit = max(1, min(int(limit), MAX_LIMIT))
    rows, total = await repository.list_specialists(
        limit=limit,
        offset=(page - 1) * limit,
        search=search,
        is_draft=is_draft,
        verification_status=getattr(verification_status, "value", verification_status),
        is_verified=is_verified,
    )
    return {
        "data": await _with_offerings(rows),
        "meta": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit),
        },
    }


async def get_specialist(specialist_id: str) -> dict:
    row = await repository.get_specialist_by_id(specialist_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return await _one_with_offerings(row)


async def get_specialist_by_slug(slug: str) -> dict:
    row = await repository.get_specialist_by_slug(slug)
    if row is None or row.get("deleted_at") is not None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return await _one_with_offerings(row)


async def update_specialist(specialist_id: str, patch: dict) -> dict:
    existing = await repository.get_specialist_by_id(specialist_id)
    if existing is None:
        raise NotFound(NOT_FOUND_MESSAGE)

    fields = {k: v for k, v in patch.items() if v is not None}
    raw_ids = fields.pop("service_offerings_master_list_ids", None)
    master_list_ids = _ids(raw_ids) if raw_ids is not None else None

    new_slug = fields.get("slug")
    if new_slug and new_slug != existing["slug"]:
        if await repository.get_specialist_by_slug(new_slug) is not None:
            raise Conflict(f'Specialist with slug "{new_slug}" already exists')

    if "verification_status" in fields:
        fields["verification_status"] = getattr(
            fields["verification_status"], "value", fields["verification_status"]
        )

    if master_list_ids is not None:
        await _require_offerings(master_list_ids)

    if "base_price" in fields:
        fields.update(await _price_fields(fields["base_price"]))

    # Raising inside the block rolls the link swap back with the row update.
    async with db.transaction() as conn:
        if master_list_ids is not None:
            await repository.replace_offerings(specialist_id, master_list_ids, conn=conn)
        row = await repository.update_specialist(specialist_id, conn=conn, **fields)
        if row is None:
            raise NotFound(NOT_FOUND_MESSAGE)
    logger.info("specialist_updated id=%s fields=%s", specialist_id, sorted(fields))
    return await _one_with_offerings(row)


async def delete_specialist(specialist_id: str) -> dict:
    row = await repository.soft_delete_specialist(specialist_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    logger.info("specialist_deleted id=%s", specialist_id)
    return row


async def add_service_offerings(specialist_id: str, master_list_ids: list[Any]) -> dict:
    if await repository.get_specialist_by_id(specialist_id) is None:
        raise NotFound(NOT_FOUND_MESSAGE)

    requested = _ids(master_list_ids)
    if not requested or not await offering_service.all_exist(requested):
        raise BadRequest(INVALID_OFFERINGS_MESSAGE)

    existing = await repository.linked_master_list_ids(specialist_id)
    new_ids = [item_id for item_id in requested if item_id not in existing]
    if not new_ids:
        raise BadRequest("All service offerings already exist for this specialist")

    await repository.add_offerings(specialist_id, new_ids)
    return await get_specialist(specialist_id)


async def remove_service_offerings(specialist_id: str, master_list_ids: list[Any]) -> dict:
    if await repository.get_specialist_by_id(specialist_id) is None:
        raise NotFound(NOT_FOUND_MESSAGE)

    await repository.remove_offerings(specialist_id, _ids(master_list_ids))
    return await get_specialist(specialist_id)
