"""
Service-offerings master list persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db

_COLUMNS = "id, title, description, created_at, updated_at"


async def create_item(*, title: str, description: str | None) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO service_offerings_master_list (title, description)
        VALUES ($1, $2)
        RETURNING {_COLUMNS}
        """,
        title,
        description,
    )
    if row is None:
        raise RuntimeError("Failed to create service offering.")
    return row


async def list_items() -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM service_offerings_master_list
        ORDER BY created_at DESC, id DESC
        """
    )


async def get_item(item_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM service_offerings_master_list
        WHERE id::text = $1
        """,
        str(item_id),
    )


async def list_specialist_ids_for_item(item_id: str) -> list[str]:
    rows = await db.fetch_all(
        """
        SELECT so.specialist_id
        FROM service_offerings so
        JOIN specialists s ON s.id = so.specialist_id
        WHERE so.service_offerings_master_list_id::text = $1
          AND s.deleted_at IS NULL
        ORDER BY so.created_at ASC
        """,
        str(item_id),
    )
    return [str(r["specialist_id"]) for r in rows]


async def count_existing(item_ids: list[str]) -> int:
    """
    How many of `item_ids` exist. Duplicates in the input count once.
    """
    if not item_ids:
        return 0
    value = await db.fetch_value(
        """
        SELECT count(*)
        FROM service_offerings_master_list
        WHERE id::text = ANY($1::text[])
        """,
        [str(i) for i in item_ids],
    )
    return int(value or 0)


async def update_item(
    item_id: str,
    *,
    title: str | None,
    description: str | None,
) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        UPDATE service_offerings_master_list
        SET title = COALESCE($2, title),
            description = COALESCE($3, description),
            updated_at = now()
        WHERE id::text = $1
        RETURNING {_COLUMNS}
        """,
        str(item_id),
        title,
        description,
    )


async def delete_item(item_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        DELETE FROM service_offerings_master_list
        WHERE id::text = $1
        RETURNING {_COLUMNS}
        """,
        str(item_id),
    )
