"""
User administration. Reads and writes go through the credential store in
`auth.repository`; password hashes are never selected here.
"""

from __future__ import annotations

import logging

from auth import repository
from core.errors import NotFound

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "User not found"


def _value(value):
    return getattr(value, "value", value)


async def list_users(*, email: str = "", name: str = "") -> list[dict]:
    return await repository.list_users(email=email, name=name)


async def get_user(user_id: str) -> dict:
    row = await repository.get_user_by_id(user_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    return row


async def update_user(user_id: str, *, name=None, role=None, status=None) -> dict:
    row = await repository.update_user(user_id, name=name, role=_value(role), status=_value(status))
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    logger.info("user_updated id=%s role=%s status=%s", user_id, row["role"], row["status"])
    return row


async def delete_user(user_id: str) -> dict:
    row = await repository.delete_user(user_id)
    if row is None:
        raise NotFound(NOT_FOUND_MESSAGE)
    logger.info("user_deleted id=%s", user_id)
    return row
