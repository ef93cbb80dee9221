from contextlib import asynccontextmanager
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from auth import security
from core.config import Settings, TokenConfig, get_settings

ACCESS_SECRET = "test-access-secret"
REFRESH_SECRET = "test-refresh-secret"
RESET_SECRET = "test-reset-secret"

CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_settings(**overrides) -> Settings:
    values = {
        "database_url": "postgresql://localhost/test",
        "env": "test",
        "frontend_url": "http://localhost:5173",
        "bcrypt_salt_rounds": 4,
        "log_level": "INFO",
        "cookie_secure": False,
        "access_token": TokenConfig(secret=ACCESS_SECRET, expires_in=15 * 60),
        "refresh_token": TokenConfig(secret=REFRESH_SECRET, expires_in=30 * 24 * 60 * 60),
        "reset_password_token": TokenConfig(secret=RESET_SECRET, expires_in=10 * 60),
    }
    values.update(overrides)
    return Settings(**values)


def make_user(**overrides) -> dict:
    user = {
        "id": "7f1c2a52-0d0c-4b8e-9a57-3f1f5c1b2d11",
        "email": "alice@example.com",
        "name": "Alice",
        "role": "USER",
        "status": "active",
        "created_at": CREATED_AT,
        "updated_at": CREATED_AT,
    }
    user.update(overrides)
    return user


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def user():
    return make_user()


@pytest.fixture
def admin():
    return make_user(
        id="0b6f9e3e-8f0a-4f57-8c39-2f3c1f0f7a90",
        email="admin@example.com",
        name="Admin",
        role="ADMIN",
    )


@pytest.fixture
def client(settings):
    # Imported lazily so unit tests don't pay for building the app.
    from main import app

    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def as_user(client):
    """
    Authenticate every request in the test as the given user row.
    """
    from auth.dependencies import get_current_user
    from main import app

    def _login(user_row: dict) -> TestClient:
        app.dependency_overrides[get_current_user] = lambda: user_row
        return client

    return _login


def access_token_for(user_row: dict, settings: Settings) -> str:
    return security.issue_token(
        security.IdentityClaims.from_user(user_row),
        settings.access_token,
        token_type="access",
    )


@pytest.fixture
def db_transaction():
    """
    Stand-in for `core.db.transaction()`. Yields a mock connection that
    records whether the block committed or rolled back.
    """
    conn = MagicMock(name="conn")
    conn.committed = False
    conn.rolled_back = False

    @asynccontextmanager
    async def _transaction():
        try:
            yield conn
        except BaseException:
            conn.rolled_back = True
            raise
        conn.committed = True

    with patch("core.db.transaction", _transaction):
        yield conn
