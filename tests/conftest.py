"""
Pytest configuration and shared fixtures for the Domain Config Service tests

Provides:
- Environment for an in-memory SQLite database and quiet file logging
- Fresh tables for every test
- Mock Redis connection
- Application factory and admin token helpers
"""

import os
import tempfile

# Must be set before domain_config is imported: the engine and the global
# settings are built at import time.
_LOG_DIR = tempfile.mkdtemp(prefix="domain-config-tests-")
os.environ["NODE_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE"] = os.path.join(_LOG_DIR, "app.log")
os.environ["REDIS_ENABLED"] = "false"

import pytest
from typing import Callable, Dict, Generator
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from domain_config.config import Settings
from domain_config.database import SessionLocal, create_tables, drop_tables
from domain_config.main import create_app

ADMIN_PASSWORD = "test-admin-password"


@pytest.fixture(autouse=True)
def database() -> Generator[None, None, None]:
    """Create all tables before each test and drop them afterwards"""
    create_tables()
    yield
    drop_tables()


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Database session bound to the in-memory test database"""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mock_redis():
    """Mock Redis connection for unit tests"""
    mock = MagicMock()
    mock.ping.return_value = True
    mock.get.return_value = None
    mock.setex.return_value = True
    mock.delete.return_value = 1
    mock.scan_iter.return_value = iter([])
    return mock


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    """Build Settings for tests; keyword arguments override individual fields"""
    return make_settings


def make_settings(**overrides) -> Settings:
    """Settings for tests; keyword arguments override individual fields"""
    values = {
        "NODE_ENV": "test",
        "DATABASE_URL": "sqlite://",
        "LOG_FILE": os.environ["LOG_FILE"],
        "REDIS_ENABLED": False,
        "ADMIN_PASSWORD": ADMIN_PASSWORD,
        "JWT_SECRET": "test-jwt-secret",
        "RATE_LIMIT_MAX": 1000,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def app_factory() -> Callable[..., TestClient]:
    """
    Build a TestClient for an app created with the given settings overrides

    Server exceptions are rendered as responses so 500 envelopes can be asserted.
    """
    def _create(**overrides) -> TestClient:
        app = create_app(make_settings(**overrides))
        return TestClient(app, raise_server_exceptions=False)

    return _create


@pytest.fixture
def client(app_factory) -> TestClient:
    return app_factory()


@pytest.fixture
def admin_token(client) -> str:
    response = client.post("/api/v1/sessions", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 201
    return response.json()["data"]["token"]


@pytest.fixture
def auth_headers(admin_token) -> Dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests for individual components"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests for API endpoints"
    )
