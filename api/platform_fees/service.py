"""
Platform-fee business logic: tier-table administration and fee quotes.

Tier ranges are validated one tier at a time (`max_value >= min_value`).
Overlap between different tiers is not checked; `calculator.find_tier`
resolves overlaps by taking the lowest-starting match.
"""

from __future__ import annotations

import logging

from core.errors import BadRequest, Conflict, NotFound

from . import calculator, repository
from .schemas import RANGE_ORDER_MESSAGE

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Platform fee not found"


def _tier_name(value) -> str:
    return str(getattr(value, "value", value))


def _check_range(min_value: float, max_value: float) -> None:
    if max_value < min_value:
        raise BadRequest(RANGE_ORDER_MESSAGE)


def _duplicate(tier_name: str) -> Conflict:
    return Conflict(f"Platform fee for tier {tier_name} already exists")


async def create_platform_fee(
    *,
    tier_name,
    min_value: int,
    max_value: int,
    platform_fee_percentage: float,
) -> dict:
    tier_name = _tier_name(tier_name)
    _check_range(min_value, max_value)

    if await repository.get_tier_by_name(tier_name) is not None:
        raise _duplicate(tier_name)

    row = await repository.create_tier(
        tier_name=tier_name,
        min_value=min_value,
        max_value=max_value,
        platform_fee_percentage=platform_fee_percentage,
    )
    logger.info(
        "platform_fee_created tier=%s range=[%s,%s] pct=%s",
        tier_name,
        min_value,
        max_value,
        platform_fee_percentage,
    )
    return row


async def list_platform_fees() -> list[dict]:
    return await repository.list_tiers_by_creation()


async def get_platform_fee(tier_id: str) -> dict:
    row = await repository.get_tier_by_id(tier_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return row


async def update_platform_fee(tier_id: str, patch: dict) -> dict:
    """
    Apply a partial update. The range check runs on the merged values, so a
    patch that only moves `min_value` above the stored `max_value` is rejected.
    """
    existing = await repository.get_tier_by_id(tier_id)
    if existing is None:
        raise NotFound(NOT_FOUND_MESSAGE)

    merged = {**existing, **{k: v for k, v in patch.items() if v is not None}}
    merged["tier_name"] = _tier_name(merged["tier_name"])
    _check_range(merged["min_value"], merged["max_value"])

    if merged["tier_name"] != existing["tier_name"]:
        other = await repository.get_tier_by_name(merged["tier_name"])
        if other is not None and str(other["id"]) != str(existing["id"]):
            raise _duplicate(merged["tier_name"])

    row = await repository.update_tier(
        tier_id,
        tier_name=merged["tier_name"],
        min_value=merged["min_value"],
        max_value=merged["max_value"],
        platform_fee_percentage=merged["platform_fee_percentage"],
    )
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    logger.info("platform_fee_updated id=%s tier=%s", tier_id, row["tier_name"])
    return row


async def delete_platform_fee(tier_id: str) -> dict:
    row = await repository.delete_tier(tier_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    logger.info("platform_fee_deleted id=%s tier=%s", tier_id, row["tier_name"])
    return row


async def load_tier_table() -> list[calculator.FeeTier]:
    rows = await repository.list_tiers_by_min_value()
    return [calculator.FeeTier.from_row(row) for row in rows]


async def quote(base_amount: float) -> calculator.FeeQuote:
    """
    Fee quote against the current tier table snapshot.
    """
    return calculator.compute_fee(base_amount, await load_tier_table())
