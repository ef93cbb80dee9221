"""
Process configuration.

Settings are read from the environment exactly once (`get_settings()`) and
then passed into services explicitly. Business logic never touches
`os.environ` directly.

Token lifetimes use the same short duration strings as the frontend team's
`.env` files: "15m", "30d", "12h", "45s", "2w", or bare seconds.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


class ConfigError(RuntimeError):
    pass


_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": 1,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
    "w": 7 * 24 * 60 * 60,
}


@dataclass(frozen=True)
class TokenConfig:
    secret: str
    expires_in: int  # seconds


@dataclass(frozen=True)
class Settings:
    database_url: str
    env: str
    frontend_url: str
    bcrypt_salt_rounds: int
    log_level: str
    cookie_secure: bool
    access_token: TokenConfig
    refresh_token: TokenConfig
    # Loaded and validated, but the forget-password flow does not mint
    # tokens with it yet. Reset-password verifies with it.
    reset_password_token: TokenConfig

    @property
    def is_production(self) -> bool:
        return self.env == "production"


def parse_duration(raw: str) -> int:
    """
    Convert a duration like "15m" or "30d" into seconds.
    """
    match = _DURATION_RE.match(raw or "")
    if match is None:
        raise ConfigError(f"Invalid duration: {raw!r}")
    value = int(match.group(1))
    if value <= 0:
        raise ConfigError(f"Duration must be > 0: {raw!r}")
    return value * _DURATION_UNITS[match.group(2).lower()]


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _env_str(environ: Mapping[str, str], name: str, default: str = "") -> str:
    return (environ.get(name) or "").strip() or default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = _env_str(environ, name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer.") from exc


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = _env_str(environ, name).lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _token_config(
    environ: Mapping[str, str],
    *,
    secret_name: str,
    expiration_name: str,
    default_expiration: str,
) -> TokenConfig:
    secret = _env_str(environ, secret_name)
    if not secret:
        raise ConfigError(f"Missing required environment variable: {secret_name}")
    try:
        expires_in = parse_duration(_env_str(environ, expiration_name, default_expiration))
    except ConfigError as exc:
        raise ConfigError(f"{expiration_name}: {exc}") from exc
    return TokenConfig(secret=secret, expires_in=expires_in)


DEFAULT_FRONTEND_URL = "http://localhost:5173"


def load_frontend_url(environ: Mapping[str, str] | None = None) -> str:
    """
    The CORS origin alone. Middleware is registered at import time, before
    the secrets `load_settings` requires are guaranteed to be present.
    """
    environ = os.environ if environ is None else environ
    return _env_str(environ, "FRONTEND_URL", DEFAULT_FRONTEND_URL)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    environ = os.environ if environ is None else environ

    env = _env_str(environ, "APP_ENV") or _env_str(environ, "NODE_ENV", "development")
    url_name = "TEST_DB_URI" if env == "test" else "DATABASE_URL"
    database_url = _env_str(environ, url_name)
    if not database_url:
        raise ConfigError(f"Missing required environment variable: {url_name}")

    salt_rounds = _env_int(environ, "BCRYPT_SALT_ROUNDS", 12)
    if not 4 <= salt_rounds <= 31:
        raise ConfigError("BCRYPT_SALT_ROUNDS must be between 4 and 31.")

    return Settings(
        database_url=_sanitize_database_url(database_url),
        env=env,
        frontend_url=load_frontend_url(environ),
        bcrypt_salt_rounds=salt_rounds,
        log_level=_env_str(environ, "LOG_LEVEL", "INFO").upper(),
        cookie_secure=_env_bool(environ, "COOKIE_SECURE", True),
        access_token=_token_config(
            environ,
            secret_name="ACCESS_TOKEN_JWT_SECRET",
            expiration_name="ACCESS_TOKEN_JWT_EXPIRATION",
            default_expiration="15m",
        ),
        refresh_token=_token_config(
            environ,
            secret_name="REFRESH_TOKEN_JWT_SECRET",
            expiration_name="REFRESH_TOKEN_JWT_EXPIRATION",
            default_expiration="30d",
        ),
        reset_password_token=_token_config(
            environ,
            secret_name="FORGET_PASSWORD_TOKEN_JWT_SECRET",
            expiration_name="FORGET_PASSWORD_TOKEN_JWT_EXPIRATION",
            default_expiration="10m",
        ),
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
