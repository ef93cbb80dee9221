"""
Auth business logic.

Flows raise `core.errors` types; the HTTP mapping happens in `main.py`.
Every function takes `Settings` explicitly so secrets and lifetimes are
injected rather than read from the environment here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.config import Settings
from core.errors import BadRequest, Conflict, NotFound, Unauthorized

from . import repository, security
from .schemas import UserStatus

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"
SUSPENDED = "Your account has been suspended"
PASSWORD_TOO_LONG = f"Password must be at most {security.BCRYPT_MAX_PASSWORD_BYTES} bytes"


@dataclass(frozen=True)
class LoginResult:
    user: dict
    tokens: security.TokenPair


def public_user(user_row: dict) -> dict:
    return {key: value for key, value in user_row.items() if key != "password_hash"}


def _is_suspended(user_row: dict) -> bool:
    return str(user_row.get("status") or "") == UserStatus.SUSPENDED.value


def _hash_password(password: str, settings: Settings) -> str:
    try:
        return security.hash_password(password, rounds=settings.bcrypt_salt_rounds)
    except security.PasswordTooLong as exc:
        raise BadRequest(PASSWORD_TOO_LONG) from exc


async def register(
    email: str,
    password: str,
    settings: Settings,
    *,
    name: str | None = None,
) -> dict:
    if not email or not password:
        raise BadRequest("Email and password are required")

    normalized_email = repository.normalize_email(email)
    existing = await repository.get_user_by_email(normalized_email)
    if existing is not None:
        raise Conflict("User already exists")

    password_hash = _hash_password(password, settings)
    user_row = await repository.create_user(
        email=normalized_email,
        password_hash=password_hash,
        name=name,
    )
    logger.info("user_registered user_id=%s", user_row["id"])
    return public_user(user_row)


async def login(email: str, password: str, settings: Settings) -> LoginResult:
    if not email or not password:
        raise BadRequest("Email and password are required")

    user_row = await repository.get_user_with_password_by_email(email)
    if user_row is None:
        logger.info("login_rejected reason=unknown_email")
        raise Unauthorized(INVALID_CREDENTIALS)

    if not security.verify_password(password, str(user_row.get("password_hash") or "")):
        logger.info("login_rejected reason=bad_password user_id=%s", user_row["id"])
        raise Unauthorized(INVALID_CREDENTIALS)

    if _is_suspended(user_row):
        logger.warning("login_rejected reason=suspended user_id=%s", user_row["id"])
        raise Unauthorized(SUSPENDED)

    tokens = security.issue_token_pair(security.IdentityClaims.from_user(user_row), settings)
    logger.info("login_succeeded user_id=%s", user_row["id"])
    return LoginResult(user=public_user(user_row), tokens=tokens)


async def refresh_access_token(refresh_token: str | None, settings: Settings) -> str:
    """
    Mint a new access token from a refresh token.

    The refresh token itself is never reissued; it stays valid until its own
    expiry. The new access token carries the user's current role, re-read
    from storage.
    """
    refresh_token = (refresh_token or "").strip()
    if not refresh_token:
        raise Unauthorized("Refresh token is required")

    try:
        claims = security.verify_token(refresh_token, settings.refresh_token.secret)
    except security.TokenExpired as exc:
        raise Unauthorized("Token has expired") from exc
    except security.TokenError as exc:
        logger.info("refresh_rejected reason=%s", type(exc).__name__)
        raise Unauthorized("Invalid refresh token") from exc

    user_row = await repository.get_user_by_id(claims.id)
    if user_row is None:
        raise Unauthorized("User account not found")
    if repository.normalize_email(user_row["email"]) != repository.normalize_email(claims.email):
        # Email changed since the token was issued; treat as a different account.
        raise Unauthorized("User account not found")

    access_token = security.issue_token(
        security.IdentityClaims.from_user(user_row),
        settings.access_token,
        token_type="access",
    )
    logger.info("access_token_refreshed user_id=%s", user_row["id"])
    return access_token


async def forget_password(email: str, settings: Settings) -> dict:
    # TODO: mint a reset token with settings.reset_password_token and email the
    # link once an outbound mail provider is wired in.
    if not email or not email.strip():
        raise BadRequest("Email is required")

    user_row = await repository.get_user_by_email(email)
    if user_row is None:
        raise NotFound("User not found")

    if not settings.reset_password_token.secret or not settings.reset_password_token.expires_in:
        raise RuntimeError("Server configuration error")

    logger.info("password_reset_requested user_id=%s", user_row["id"])
    return {"message": "Password reset link sent to your email"}


async def reset_password(token: str, new_password: str, settings: Settings) -> dict:
    try:
        payload = security.decode_token(token, settings.reset_password_token.secret)
    except security.TokenError as exc:
        raise BadRequest("Invalid or expired reset token") from exc

    token_id = str(payload.get("id") or "")
    token_email = str(payload.get("email") or "")
    if not token_id or not token_email:
        raise BadRequest("Invalid token payload")

    user_row = await repository.get_user_by_email(token_email)
    if user_row is None or str(user_row["id"]) != token_id:
        raise NotFound("User not found or token mismatch")

    password_hash = _hash_password(new_password, settings)
    await repository.update_user(token_id, password_hash=password_hash)
    logger.info("password_reset user_id=%s", token_id)
    return {"message": "Password reset successful"}


async def get_user_from_access_token(access_token: str | None, settings: Settings) -> dict:
    access_token = (access_token or "").strip()
    if not access_token:
        raise Unauthorized("Access token is required")

    try:
        claims = security.verify_token(access_token, settings.access_token.secret)
    except security.TokenExpired as exc:
        raise Unauthorized("Token has expired") from exc
    except security.TokenError as exc:
        raise Unauthorized("Invalid access token") from exc

    user_row = await repository.get_user_by_email(claims.email)
    if user_row is None:
        raise Unauthorized("User does not exist")
    if _is_suspended(user_row):
        raise Unauthorized(SUSPENDED)
    return user_row
