"""
Auth cookie helpers.

Browsers keep both tokens in http-only cookies; the frontend runs on a
different origin, hence `samesite="none"` (which in turn requires `secure`).
"""

from __future__ import annotations

from fastapi import Response

from core.config import Settings

ACCESS_TOKEN_COOKIE = "accessToken"
REFRESH_TOKEN_COOKIE = "refreshToken"


def _samesite(settings: Settings) -> str:
    # Browsers drop SameSite=None cookies that are not Secure.
    return "none" if settings.cookie_secure else "lax"


def set_auth_cookies(
    response: Response,
    settings: Settings,
    *,
    access_token: str | None = None,
    refresh_token: str | None = None,
) -> None:
    if access_token:
        response.set_cookie(
            ACCESS_TOKEN_COOKIE,
            access_token,
            max_age=settings.access_token.expires_in,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=_samesite(settings),
        )

    if refresh_token:
        response.set_cookie(
            REFRESH_TOKEN_COOKIE,
            refresh_token,
            max_age=settings.refresh_token.expires_in,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=_samesite(settings),
        )


def clear_auth_cookies(response: Response, settings: Settings) -> None:
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            httponly=True,
            secure=settings.cookie_secure,
            samesite=_samesite(settings),
        )
