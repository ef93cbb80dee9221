"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from typing import Callable

from fastapi import Cookie, Depends, Header

from core.config import Settings, get_settings
from core.errors import Forbidden

from . import service
from .cookies import ACCESS_TOKEN_COOKIE
from .schemas import UserRole


def extract_access_token(authorization: str | None, cookie_token: str | None) -> str | None:
    """
    Prefer the Authorization header ("Bearer <token>" or the bare token),
    then fall back to the access-token cookie.
    """
    raw = (authorization or "").strip()
    if raw:
        parts = raw.split(" ", 1)
        if len(parts) == 2 and parts[0].strip().lower() == "bearer":
            return parts[1].strip()
        return raw
    return (cookie_token or "").strip() or None


async def get_current_user(
    authorization: str | None = Header(default=None),
    access_token_cookie: str | None = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
    settings: Settings = Depends(get_settings),
) -> dict:
    token = extract_access_token(authorization, access_token_cookie)
    return await service.get_user_from_access_token(token, settings)


def check_auth(*roles: UserRole) -> Callable:
    """
    Dependency factory: authenticated user whose role is one of `roles`.
    With no roles, any authenticated user passes.

    Usage:
        @router.post("/platform-fees")
        async def create(current_user: dict = Depends(check_auth(UserRole.ADMIN))):
    """
    allowed = {role.value for role in roles}

    async def _check(current_user: dict = Depends(get_current_user)) -> dict:
        if allowed and str(current_user.get("role") or "") not in allowed:
            raise Forbidden("You do not have permission to access this resource")
        return current_user

    return _check


require_admin = check_auth(UserRole.ADMIN)
