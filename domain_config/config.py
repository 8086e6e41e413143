"""
Configuration management for the Domain Config Service
Uses pydantic-settings for environment variable validation
"""

import math
import os
import re
from functools import lru_cache
from typing import List
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


class ConfigurationError(Exception):
    """Raised when a required environment variable is missing"""
    pass


def parse_duration(value: str) -> int:
    """
    Parse a duration string into seconds

    Accepts a bare number of seconds or a number followed by s, m, h or d.

    Examples:
        >>> parse_duration("24h")
        86400
        >>> parse_duration("90")
        90
    """
    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ValueError(f'"{value}" is not a valid duration (expected e.g. 3600, 30m, 24h, 7d)')
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit.lower()]


def require_env(key: str) -> str:
    """
    Read a required environment variable

    Args:
        key: Environment variable name

    Returns:
        str: The variable's value

    Raises:
        ConfigurationError: if the variable is unset or empty
    """
    value = os.environ.get(key)
    if value is None or value == "":
        raise ConfigurationError(f"Required environment variable {key} is not set")
    return value


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Service
    NODE_ENV: str = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Database
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "domain_config"
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_POOL_MIN: int = 2
    DB_POOL_MAX: int = 10
    DATABASE_URL: str = ""  # Optional: overrides the URL built from DB_*

    # Redis
    REDIS_ENABLED: bool = False
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str = ""
    REDIS_TTL: int = 3600  # Cache TTL in seconds

    # Logging
    LOG_LEVEL: str = "info"
    LOG_FILE: str = "logs/app.log"

    # API
    API_PREFIX: str = "/api/v1"
    MAX_PAGE_SIZE: int = 100
    DEFAULT_PAGE_SIZE: int = 20
    CORS_ORIGINS: str = "*"

    # Rate limiting
    RATE_LIMIT_WINDOW_MS: int = 60000
    RATE_LIMIT_MAX: int = 100

    # Admin authentication
    ADMIN_PASSWORD: str = "admin123"
    JWT_SECRET: str = ""  # Falls back to ADMIN_PASSWORD when empty
    JWT_EXPIRES_IN: str = "24h"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("REDIS_ENABLED", mode="before")
    @classmethod
    def parse_flag(cls, value):
        """Only "true" (any case) and "1" enable a flag"""
        if isinstance(value, str):
            return value.strip().lower() in ("true", "1")
        return value

    @field_validator("JWT_EXPIRES_IN")
    @classmethod
    def validate_duration(cls, value: str) -> str:
        parse_duration(value)
        return value

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL: DATABASE_URL if set, otherwise MySQL built from DB_*"""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        credentials = quote_plus(self.DB_USER)
        if self.DB_PASSWORD:
            credentials += f":{quote_plus(self.DB_PASSWORD)}"
        return (
            f"mysql+pymysql://{credentials}@{self.DB_HOST}:{self.DB_PORT}"
            f"/{self.DB_NAME}?charset=utf8mb4"
        )

    @property
    def redis_url(self) -> str:
        auth = f":{quote_plus(self.REDIS_PASSWORD)}@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth}{self.REDIS_HOST}:{self.REDIS_PORT}/0"

    @property
    def rate_limit_window_seconds(self) -> int:
        """Rate limit window in whole seconds (at least one)"""
        return max(1, math.ceil(self.RATE_LIMIT_WINDOW_MS / 1000))

    @property
    def rate_limit(self) -> str:
        """Limit string understood by slowapi, e.g. "100 per 60 second" """
        return f"{self.RATE_LIMIT_MAX} per {self.rate_limit_window_seconds} second"

    @property
    def jwt_secret(self) -> str:
        return self.JWT_SECRET or self.ADMIN_PASSWORD

    @property
    def jwt_expires_seconds(self) -> int:
        return parse_duration(self.JWT_EXPIRES_IN)

    @property
    def cors_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        return self.NODE_ENV == "development"

    @property
    def is_test(self) -> bool:
        return self.NODE_ENV == "test"

    @property
    def is_production(self) -> bool:
        return self.NODE_ENV == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance

    The environment is parsed once; use reload_settings() after changing it.
    """
    return Settings()


def reload_settings() -> Settings:
    """Discard the cached settings and read the environment again"""
    get_settings.cache_clear()
    return get_settings()


def get_config_snapshot() -> Settings:
    """Fresh, uncached settings (mainly for debugging)"""
    return Settings()


# Global settings instance
settings = get_settings()
