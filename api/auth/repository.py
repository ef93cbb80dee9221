"""
User persistence (the credential store).

Only `get_user_with_password_by_email` returns `password_hash`; everything
else selects the public columns.
"""

from __future__ import annotations

from typing import Any

from core import db

_PUBLIC_COLUMNS = "id, email, name, role, status, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    *,
    email: str,
    password_hash: str,
    name: str | None = None,
    role: str = "USER",
    status: str = "active",
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (email, password_hash, name, role, status)
        VALUES ($1, $2, $3, $4, $5)
        RETURNING {_PUBLIC_COLUMNS}
        """,
        normalize_email(email),
        password_hash,
        name,
        role,
        status,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_PUBLIC_COLUMNS}
        FROM users
        WHERE lower(email) = $1
        """,
        normalize_email(email),
    )


async def get_user_with_password_by_email(email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_PUBLIC_COLUMNS}, password_hash
        FROM users
        WHERE lower(email) = $1
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_PUBLIC_COLUMNS}
        FROM users
        WHERE id::text = $1
        """,
        str(user_id),
    )


async def list_users(*, email: str = "", name: str = "") -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_PUBLIC_COLUMNS}
        FROM users
        WHERE ($1 = '' OR email ILIKE ('%' || $1 || '%'))
          AND ($2 = '' OR name ILIKE ('%' || $2 || '%'))
        ORDER BY created_at DESC
        """,
        (email or "").strip(),
        (name or "").strip(),
    )


async def update_user(
    user_id: str,
    *,
    name: str | None = None,
    role: str | None = None,
    status: str | None = None,
    password_hash: str | None = None,
) -> dict[str, Any] | None:
    """
    Patch a user. `None` leaves a column unchanged.
    """
    return await db.fetch_one(
        f"""
        UPDATE users
        SET name = COALESCE($2, name),
            role = COALESCE($3, role),
            status = COALESCE($4, status),
            password_hash = COALESCE($5, password_hash),
            updated_at = now()
        WHERE id::text = $1
        RETURNING {_PUBLIC_COLUMNS}
        """,
        str(user_id),
        name,
        role,
        status,
        password_hash,
    )


async def delete_user(user_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        DELETE FROM users
        WHERE id::text = $1
        RETURNING {_PUBLIC_COLUMNS}
        """,
        str(user_id),
    )
