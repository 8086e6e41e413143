"""
Database session management for the Domain Config Service
SQLAlchemy setup; MySQL in deployment, SQLite for local runs and tests
"""

from functools import lru_cache
from typing import Optional
import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from domain_config.config import Settings, settings

logger = logging.getLogger(__name__)


def create_db_engine(url: str, pool_min: int = 2, pool_max: int = 10) -> Engine:
    """
    Build an engine for the given URL

    In-memory SQLite shares one connection across threads so every session
    sees the same database; other backends get a pre-pinged pool of
    pool_min connections that may grow to pool_max.
    """
    parsed = make_url(url)

    if parsed.get_backend_name() == "sqlite":
        kwargs = {"connect_args": {"check_same_thread": False}}
        if parsed.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_min,
        max_overflow=max(pool_max - pool_min, 0),
    )


@lru_cache()
def _cached_engine(url: str, pool_min: int, pool_max: int) -> Engine:
    return create_db_engine(url, pool_min, pool_max)


def get_engine(app_settings: Settings) -> Engine:
    """
    Engine for the database described by the given settings

    Engines are shared between callers with the same URL and pool sizes,
    so an application and its tests see the same in-memory database.
    """
    return _cached_engine(
        app_settings.database_url,
        app_settings.DB_POOL_MIN,
        app_settings.DB_POOL_MAX,
    )


def create_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


engine = get_engine(settings)

# Session factory for the environment settings
SessionLocal = create_session_factory(engine)

# Base class for all models
Base = declarative_base()


def get_db(request: Request):
    """
    Dependency for FastAPI endpoints to get database session
    Uses the session factory of the running application, rolls back on
    error and always closes the session
    """
    session_factory = getattr(request.app.state, "session_factory", None) or SessionLocal
    db = session_factory()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def create_tables(bind: Optional[Engine] = None):
    """
    Create all tables in the database

    Note: Import models here to ensure they're registered with Base.metadata
    """
    from domain_config.models import Config, Domain  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind: Optional[Engine] = None):
    from domain_config.models import Config, Domain  # noqa: F401

    Base.metadata.drop_all(bind=bind or engine)


def is_database_connected(bind: Optional[Engine] = None) -> bool:
    """Run SELECT 1 against the database"""
    try:
        with (bind or engine).connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
