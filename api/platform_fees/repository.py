"""
Platform-fee tier persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

_COLUMNS = "id, tier_name, min_value, max_value, platform_fee_percentage, created_at, updated_at"


def _normalize(row: dict[str, Any] | None) -> dict[str, Any] | None:
    # NUMERIC comes back as Decimal; the API speaks floats.
    if row is None:
        return None
    row["platform_fee_percentage"] = float(row["platform_fee_percentage"])
    return row


async def list_tiers_by_creation() -> list[dict[str, Any]]:
    rows = await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM platform_fees
        ORDER BY created_at ASC, id ASC
        """
    )
    return [_normalize(r) for r in rows]


async def list_tiers_by_min_value() -> list[dict[str, Any]]:
    rows = await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM platform_fees
        ORDER BY min_value ASC, created_at ASC
        """
    )
    return [_normalize(r) for r in rows]


async def get_tier_by_id(tier_id: str) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM platform_fees
        WHERE id::text = $1
        """,
        str(tier_id),
    )
    return _normalize(row)


async def get_tier_by_name(tier_name: str) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM platform_fees
        WHERE tier_name = $1
        LIMIT 1
        """,
        tier_name,
    )
    return _normalize(row)


async def create_tier(
    *,
    tier_name: str,
    min_value: int,
    max_value: int,
    platform_fee_percentage: float,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO platform_fees (tier_name, min_value, max_value, platform_fee_percentage)
        VALUES ($1, $2, $3, $4)
        RETURNING {_COLUMNS}
        """,
        tier_name,
        min_value,
        max_value,
        platform_fee_percentage,
    )
    if row is None:
        raise RuntimeError("Failed to create platform fee.")
    return _normalize(row)


async def update_tier(
    tier_id: str,
    *,
    tier_name: str,
    min_value: int,
    max_value: int,
    platform_fee_percentage: float,
) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        UPDATE platform_fees
        SET tier_name = $2,
            min_value = $3,
            max_value = $4,
            platform_fee_percentage = $5,
            updated_at = now()
        WHERE id::text = $1
        RETURNING {_COLUMNS}
        """,
        str(tier_id),
        tier_name,
        min_value,
        max_value,
        platform_fee_percentage,
    )
    return _normalize(row)


async def delete_tier(tier_id: str) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        DELETE FROM platform_fees
        WHERE id::text = $1
        RETURNING {_COLUMNS}
        """,
        str(tier_id),
    )
    return _normalize(row)
