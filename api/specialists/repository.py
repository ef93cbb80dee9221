"""
Specialist persistence (raw SQL).

Service offerings are a join table (`service_offerings`) between a
specialist and master-list items.
"""

from __future__ import annotations

from typing import Any

import asyncpg

from core import db

_COLUMNS = """
    id, title, slug, description, base_price, platform_fee, final_price,
    duration_days, is_draft, verification_status, is_verified,
    created_at, updated_at, deleted_at
"""

_MONEY_COLUMNS = ("base_price", "platform_fee", "final_price")


def _normalize(row: dict[str, Any] | None) -> dict[str, Any] | None:
    if row is None:
        return None
    for column in _MONEY_COLUMNS:
        if row.get(column) is not None:
            row[column] = float(row[column])
    return row


async def _fetch_one(conn: asyncpg.Connection | None, sql: str, *args: Any) -> dict[str, Any] | None:
    if conn is None:
        return await db.fetch_one(sql, *args)
    row = await conn.fetchrow(sql, *args)
    return dict(row) if row is not None else None


def _list_filters(
    *,
    search: str,
    is_draft: bool | None,
    verification_status: str | None,
    is_verified: bool | None,
) -> tuple[str, list[Any]]:
    clauses = ["deleted_at IS NULL"]
    args: list[Any] = []

    if search:
        args.append(search)
        n = len(args)
        clauses.append(f"(title ILIKE ('%' || ${n} || '%') OR description ILIKE ('%' || ${n} || '%'))")
    if is_draft is not None:
        args.append(is_draft)
        clauses.append(f"is_draft = ${len(args)}")
    if verification_status is not None:
        args.append(verification_status)
        clauses.append(f"verification_status = ${len(args)}")
    if is_verified is not None:
        args.append(is_verified)
        clauses.append(f"is_verified = ${len(args)}")

    return " AND ".join(clauses), args


async def list_specialists(
    *,
    limit: int,
    offset: int,
    search: str = "",
    is_draft: bool | None = None,
    verification_status: str | None = None,
    is_verified: bool | None = None,
) -> tuple[list[dict[str, Any]], int]:
    where, args = _list_filters(
        search=(search or "").strip(),
        is_draft=is_draft,
        verification_status=verification_status,
        is_verified=is_verified,
    )
    rows = await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM specialists
        WHERE {where}
        ORDER BY created_at DESC, id DESC
        LIMIT ${len(args) + 1}
        OFFSET ${len(args) + 2}
        """,
        *args,
        limit,
        offset,
    )
    total = await db.fetch_value(f"SELECT count(*) FROM specialists WHERE {where}", *args)
    return [_normalize(r) for r in rows], int(total or 0)


async def get_specialist_by_id(specialist_id: str) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM specialists
        WHERE id::text = $1
          AND deleted_at IS NULL
        """,
        str(specialist_id),
    )
    return _normalize(row)


async def get_specialist_by_slug(slug: str) -> dict[str, Any] | None:
    """
    Includes soft-deleted rows: slugs stay reserved after deletion.
    """
    row = await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM specialists
        WHERE slug = $1
        """,
        slug,
    )
    return _normalize(row)


async def create_specialist(
    *,
    title: str,
    slug: str,
    description: str,
    base_price: float,
    platform_fee: float,
    final_price: float,
    duration_days: int,
    is_draft: bool,
    master_list_ids: list[str],
) -> dict[str, Any]:
    async with db.transaction() as conn:
        row = await conn.fetchrow(
            f"""
            INSERT INTO specialists
              (title, slug, description, base_price, platform_fee, final_price, duration_days, is_draft)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING {_COLUMNS}
            """,
            title,
            slug,
            description,
            base_price,
            platform_fee,
            final_price,
            duration_days,
            is_draft,
        )
        if row is None:
            raise RuntimeError("Failed to create specialist.")
        if master_list_ids:
            await conn.executemany(
                """
                INSERT INTO service_offerings (specialist_id, service_offerings_master_list_id)
                VALUES ($1, $2::uuid)
                ON CONFLICT DO NOTHING
                """,
                [(row["id"], item_id) for item_id in master_list_ids],
            )
    return _normalize(dict(row))


async def update_specialist(
    specialist_id: str,
    *,
    conn: asyncpg.Connection | None = None,
    **fields: Any,
) -> dict[str, Any] | None:
    """
    Patch the given columns; `None` leaves a column unchanged.

    Pass `conn` to run inside a caller-owned transaction.
    """
    row = await _fetch_one(
        conn,
        f"""
        UPDATE specialists
        SET title = COALESCE($2, title),
            slug = COALESCE($3, slug),
            description = COALESCE($4, description),
            base_price = COALESCE($5, base_price),
            platform_fee = COALESCE($6, platform_fee),
            final_price = COALESCE($7, final_price),
            duration_days = COALESCE($8, duration_days),
            is_draft = COALESCE($9, is_draft),
            verification_status = COALESCE($10, verification_status),
            is_verified = COALESCE($11, is_verified),
            updated_at = now()
        WHERE id::text = $1
          AND deleted_at IS NULL
        RETURNING {_COLUMNS}
        """,
        str(specialist_id),
        fields.get("title"),
        fields.get("slug"),
        fields.get("description"),
        fields.get("base_price"),
        fields.get("platform_fee"),
        fields.get("final_price"),
        fields.get("duration_days"),
        fields.get("is_draft"),
        fields.get("verification_status"),
        fields.get("is_verified"),
    )
    return _normalize(row)


async def soft_delete_specialist(specialist_id: str) -> dict[str, Any] | None:
    row = await db.fetch_one(
        f"""
        UPDATE specialists
        SET deleted_at = now()
        WHERE id::text = $1
          AND deleted_at IS NULL
        RETURNING {_COLUMNS}
        """,
        str(specialist_id),
    )
    return _normalize(row)


async def list_offerings(specialist_ids: list[str]) -> list[dict[str, Any]]:
    if not specialist_ids:
        return []
    return await db.fetch_all(
        """
        SELECT so.specialist_id, m.id, m.title, m.description
        FROM service_offerings so
        JOIN service_offerings_master_list m ON m.id = so.service_offerings_master_list_id
        WHERE so.specialist_id::text = ANY($1::text[])
        ORDER BY so.created_at ASC, m.title ASC
        """,
        [str(i) for i in specialist_ids],
    )


async def linked_master_list_ids(specialist_id: str) -> set[str]:
    rows = await db.fetch_all(
        """
        SELECT service_offerings_master_list_id
        FROM service_offerings
        WHERE specialist_id::text = $1
        """,
        str(specialist_id),
    )
    return {str(r["service_offerings_master_list_id"]) for r in rows}


async def add_offerings(specialist_id: str, master_list_ids: list[str]) -> None:
    if not master_list_ids:
        return
    async with db.transaction() as conn:
        await conn.executemany(
            """
            INSERT INTO service_offerings (specialist_id, service_offerings_master_list_id)
            VALUES ($1::uuid, $2::uuid)
            ON CONFLICT DO NOTHING
            """,
            [(str(specialist_id), item_id) for item_id in master_list_ids],
        )


async def replace_offerings(
    specialist_id: str,
    master_list_ids: list[str],
    *,
    conn: asyncpg.Connection,
) -> None:
    """
    Swap the whole link set. Runs on the caller's transaction so the links
    and the specialist row change together.
    """
    await conn.execute(
        "DELETE FROM service_offerings WHERE specialist_id::text = $1",
        str(specialist_id),
    )
    if master_list_ids:
        await conn.executemany(
            """
            INSERT INTO service_offerings (specialist_id, service_offerings_master_list_id)
            VALUES ($1::uuid, $2::uuid)
            ON CONFLICT DO NOTHING
            """,
            [(str(specialist_id), item_id) for item_id in master_list_ids],
        )


async def remove_offerings(specialist_id: str, master_list_ids: list[str]) -> None:
    await db.execute(
        """
        DELETE FROM service_offerings
        WHERE specialist_id::text = $1
          AND service_offerings_master_list_id::text = ANY($2::text[])
        """,
        str(specialist_id),
        [str(i) for i in master_list_ids],
    )
