"""
Auth security helpers: password hashing and signed tokens.

Every token kind (access, refresh, reset-password) is an HS256 JWT signed
with its own secret and carrying its own expiry. Verification needs no
database round trip.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from core.config import Settings, TokenConfig

JWT_ALGORITHM = "HS256"

# bcrypt ignores (4.x) or rejects (5.x) anything past this.
BCRYPT_MAX_PASSWORD_BYTES = 72


class AuthSecurityError(RuntimeError):
    pass


class PasswordTooLong(AuthSecurityError):
    pass


class TokenError(AuthSecurityError):
    pass


class TokenExpired(TokenError):
    pass


class TokenInvalidSignature(TokenError):
    pass


class TokenMalformed(TokenError):
    pass


@dataclass(frozen=True)
class IdentityClaims:
    id: str
    email: str
    role: str

    @classmethod
    def from_user(cls, user_row: dict) -> "IdentityClaims":
        return cls(
            id=str(user_row["id"]),
            email=str(user_row["email"]),
            role=str(user_row["role"]),
        )


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str, *, rounds: int = 12) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    if len(password) > BCRYPT_MAX_PASSWORD_BYTES:
        raise PasswordTooLong(f"Password is longer than {BCRYPT_MAX_PASSWORD_BYTES} bytes.")
    return bcrypt.hashpw(password, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def issue_token(
    claims: IdentityClaims,
    config: TokenConfig,
    *,
    token_type: str,
    issued_at: int | None = None,
) -> str:
    issued_at = now_epoch_s() if issued_at is None else issued_at
    payload = {
        "id": claims.id,
        "email": claims.email,
        "role": claims.role,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + config.expires_in,
    }
    return jwt.encode(payload, config.secret, algorithm=JWT_ALGORITHM)


def issue_token_pair(claims: IdentityClaims, settings: Settings) -> TokenPair:
    return TokenPair(
        access_token=issue_token(claims, settings.access_token, token_type="access"),
        refresh_token=issue_token(claims, settings.refresh_token, token_type="refresh"),
    )


def decode_token(token: str, secret: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise TokenMalformed("Token is empty.")

    try:
        return jwt.decode(raw, secret, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired("Token has expired.") from exc
    # InvalidSignatureError subclasses DecodeError, so it must come first.
    except jwt.InvalidSignatureError as exc:
        raise TokenInvalidSignature("Invalid token signature.") from exc
    except jwt.InvalidTokenError as exc:
        raise TokenMalformed("Malformed token.") from exc


def verify_token(token: str, secret: str) -> IdentityClaims:
    payload = decode_token(token, secret)

    token_id = payload.get("id")
    email = payload.get("email")
    if not token_id or not email:
        raise TokenMalformed("Token payload is missing identity claims.")

    return IdentityClaims(
        id=str(token_id),
        email=str(email),
        role=str(payload.get("role") or ""),
    )
