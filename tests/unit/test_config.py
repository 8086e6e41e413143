"""
Unit tests for settings parsing

Tests:
- Defaults
- Boolean and integer parsing
- Derived values (database URL, rate limit, JWT)
- require_env and settings caching
"""

import pytest
from pydantic import ValidationError

from domain_config.config import (
    ConfigurationError,
    Settings,
    get_config_snapshot,
    get_settings,
    parse_duration,
    reload_settings,
    require_env
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove the variables conftest sets so defaults are visible"""
    for key in ("NODE_ENV", "DATABASE_URL", "LOG_FILE", "REDIS_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir("/")
    return monkeypatch


@pytest.mark.unit
class TestSettingsDefaults:
    """Values used when nothing is set"""

    def test_defaults(self, clean_env):
        settings = Settings()

        assert settings.NODE_ENV == "development"
        assert settings.PORT == 3000
        assert settings.DB_HOST == "localhost"
        assert settings.DB_PORT == 3306
        assert settings.DB_NAME == "domain_config"
        assert settings.REDIS_ENABLED is False
        assert settings.REDIS_TTL == 3600
        assert settings.LOG_LEVEL == "info"
        assert settings.API_PREFIX == "/api/v1"
        assert settings.MAX_PAGE_SIZE == 100
        assert settings.DEFAULT_PAGE_SIZE == 20
        assert settings.RATE_LIMIT_WINDOW_MS == 60000
        assert settings.RATE_LIMIT_MAX == 100
        assert settings.JWT_EXPIRES_IN == "24h"

    def test_default_database_url_is_mysql(self, clean_env):
        settings = Settings()

        assert settings.database_url == (
            "mysql+pymysql://root@localhost:3306/domain_config?charset=utf8mb4"
        )

    def test_environment_flags(self, clean_env):
        assert Settings().is_development is True
        assert Settings(NODE_ENV="production").is_production is True
        assert Settings(NODE_ENV="test").is_test is True


@pytest.mark.unit
class TestSettingsParsing:
    """Environment values are converted and validated"""

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("TRUE", True),
        ("1", True),
        ("false", False),
        ("yes", False),
        ("0", False),
    ])
    def test_redis_enabled_flag(self, clean_env, raw, expected):
        clean_env.setenv("REDIS_ENABLED", raw)

        assert Settings().REDIS_ENABLED is expected

    def test_integer_from_environment(self, clean_env):
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("RATE_LIMIT_MAX", "5")

        settings = Settings()

        assert settings.PORT == 8080
        assert settings.RATE_LIMIT_MAX == 5

    def test_invalid_integer_raises(self, clean_env):
        clean_env.setenv("PORT", "not-a-number")

        with pytest.raises(ValidationError):
            Settings()

    def test_empty_value_uses_default(self, clean_env):
        clean_env.setenv("PORT", "")

        assert Settings().PORT == 3000

    def test_invalid_jwt_expiry_raises(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(JWT_EXPIRES_IN="tomorrow")


@pytest.mark.unit
class TestDerivedSettings:
    """Properties computed from the raw values"""

    def test_database_url_override(self):
        settings = Settings(DATABASE_URL="sqlite:///./local.db")

        assert settings.database_url == "sqlite:///./local.db"

    def test_database_url_quotes_credentials(self):
        settings = Settings(DATABASE_URL="", DB_USER="app", DB_PASSWORD="p@ss word", DB_HOST="db")

        assert settings.database_url == (
            "mysql+pymysql://app:p%40ss+word@db:3306/domain_config?charset=utf8mb4"
        )

    def test_redis_url(self):
        assert Settings(REDIS_HOST="cache", REDIS_PORT=6380).redis_url == "redis://cache:6380/0"
        assert Settings(REDIS_PASSWORD="secret").redis_url == "redis://:secret@localhost:6379/0"

    @pytest.mark.parametrize("window_ms,seconds", [
        (60000, 60),
        (1000, 1),
        (1500, 2),
        (10, 1),
    ])
    def test_rate_limit_window(self, window_ms, seconds):
        settings = Settings(RATE_LIMIT_WINDOW_MS=window_ms, RATE_LIMIT_MAX=7)

        assert settings.rate_limit_window_seconds == seconds
        assert settings.rate_limit == f"7 per {seconds} second"

    def test_jwt_secret_falls_back_to_admin_password(self):
        assert Settings(ADMIN_PASSWORD="pw", JWT_SECRET="").jwt_secret == "pw"
        assert Settings(ADMIN_PASSWORD="pw", JWT_SECRET="other").jwt_secret == "other"

    def test_jwt_expires_seconds(self):
        assert Settings(JWT_EXPIRES_IN="24h").jwt_expires_seconds == 86400
        assert Settings(JWT_EXPIRES_IN="15m").jwt_expires_seconds == 900

    def test_cors_origins_list(self):
        settings = Settings(CORS_ORIGINS="https://a.example.com, https://b.example.com,")

        assert settings.cors_origins_list == ["https://a.example.com", "https://b.example.com"]


@pytest.mark.unit
class TestParseDuration:

    @pytest.mark.parametrize("value,expected", [
        ("90", 90),
        ("30s", 30),
        ("30m", 1800),
        ("24h", 86400),
        ("7d", 604800),
        (" 2H ", 7200),
    ])
    def test_valid(self, value, expected):
        assert parse_duration(value) == expected

    @pytest.mark.parametrize("value", ["", "h", "1w", "-5", "1.5h"])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_duration(value)


@pytest.mark.unit
class TestEnvironmentAccess:

    def test_require_env_returns_value(self, monkeypatch):
        monkeypatch.setenv("DOMAIN_CONFIG_TEST_VALUE", "present")

        assert require_env("DOMAIN_CONFIG_TEST_VALUE") == "present"

    def test_require_env_missing_raises(self, monkeypatch):
        monkeypatch.delenv("DOMAIN_CONFIG_TEST_VALUE", raising=False)

        with pytest.raises(ConfigurationError):
            require_env("DOMAIN_CONFIG_TEST_VALUE")

    def test_require_env_empty_raises(self, monkeypatch):
        monkeypatch.setenv("DOMAIN_CONFIG_TEST_VALUE", "")

        with pytest.raises(ConfigurationError):
            require_env("DOMAIN_CONFIG_TEST_VALUE")

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reload_settings_reads_environment_again(self, monkeypatch):
        try:
            monkeypatch.setenv("MAX_PAGE_SIZE", "42")
            assert reload_settings().MAX_PAGE_SIZE == 42
            assert get_settings().MAX_PAGE_SIZE == 42
        finally:
            monkeypatch.delenv("MAX_PAGE_SIZE", raising=False)
            reload_settings()

    def test_config_snapshot_is_uncached(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "7")

        assert get_config_snapshot().DEFAULT_PAGE_SIZE == 7
        assert get_config_snapshot() is not get_config_snapshot()
