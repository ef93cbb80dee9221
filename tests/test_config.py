import pytest

from core.config import ConfigError, load_frontend_url, load_settings, parse_duration

BASE_ENV = {
    "DATABASE_URL": "postgresql://user:pw@db:5432/app?sslmode=require&application_name=api",
    "ACCESS_TOKEN_JWT_SECRET": "a",
    "REFRESH_TOKEN_JWT_SECRET": "r",
    "FORGET_PASSWORD_TOKEN_JWT_SECRET": "f",
}


class TestParseDuration:
    @pytest.mark.parametrize(
        "raw,seconds",
        [
            ("45s", 45),
            ("15m", 900),
            ("12h", 43200),
            ("30d", 2592000),
            ("2w", 1209600),
            ("3600", 3600),
            (" 15M ", 900),
        ],
    )
    def test_valid(self, raw, seconds):
        assert parse_duration(raw) == seconds

    @pytest.mark.parametrize("raw", ["", "abc", "15x", "-5m", "0m", "1.5h"])
    def test_invalid(self, raw):
        with pytest.raises(ConfigError):
            parse_duration(raw)


class TestLoadSettings:
    def test_defaults(self):
        settings = load_settings(BASE_ENV)
        assert settings.access_token.secret == "a"
        assert settings.access_token.expires_in == 15 * 60
        assert settings.refresh_token.expires_in == 30 * 24 * 60 * 60
        assert settings.reset_password_token.expires_in == 10 * 60
        assert settings.bcrypt_salt_rounds == 12
        assert settings.cookie_secure is True
        assert settings.env == "development"

    def test_strips_sslmode(self):
        settings = load_settings(BASE_ENV)
        assert "sslmode" not in settings.database_url
        assert "application_name=api" in settings.database_url

    def test_distinct_expirations(self):
        env = {
            **BASE_ENV,
            "ACCESS_TOKEN_JWT_EXPIRATION": "5m",
            "REFRESH_TOKEN_JWT_EXPIRATION": "7d",
        }
        settings = load_settings(env)
        assert settings.access_token.expires_in == 300
        assert settings.refresh_token.expires_in == 7 * 86400

    @pytest.mark.parametrize(
        "missing",
        ["DATABASE_URL", "ACCESS_TOKEN_JWT_SECRET", "REFRESH_TOKEN_JWT_SECRET", "FORGET_PASSWORD_TOKEN_JWT_SECRET"],
    )
    def test_missing_required(self, missing):
        env = {k: v for k, v in BASE_ENV.items() if k != missing}
        with pytest.raises(ConfigError) as exc_info:
            load_settings(env)
        assert missing in str(exc_info.value)

    def test_test_env_uses_test_db(self):
        env = {**BASE_ENV, "NODE_ENV": "test", "TEST_DB_URI": "postgresql://localhost/test_db"}
        settings = load_settings(env)
        assert settings.database_url == "postgresql://localhost/test_db"

    def test_test_env_requires_test_db(self):
        with pytest.raises(ConfigError):
            load_settings({**BASE_ENV, "NODE_ENV": "test"})

    def test_bad_expiration(self):
        with pytest.raises(ConfigError) as exc_info:
            load_settings({**BASE_ENV, "ACCESS_TOKEN_JWT_EXPIRATION": "soon"})
        assert "ACCESS_TOKEN_JWT_EXPIRATION" in str(exc_info.value)

    def test_bad_salt_rounds(self):
        with pytest.raises(ConfigError):
            load_settings({**BASE_ENV, "BCRYPT_SALT_ROUNDS": "2"})

    def test_frontend_url(self):
        assert load_settings(BASE_ENV).frontend_url == "http://localhost:5173"
        settings = load_settings({**BASE_ENV, "FRONTEND_URL": " https://app.example.com "})
        assert settings.frontend_url == "https://app.example.com"


class TestLoadFrontendUrl:
    def test_needs_no_secrets(self):
        assert load_frontend_url({}) == "http://localhost:5173"
        assert load_frontend_url({"FRONTEND_URL": "https://app.example.com"}) == "https://app.example.com"
