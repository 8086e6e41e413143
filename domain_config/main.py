"""
Domain Config Service - FastAPI application entry point
Serves per-domain site configs (title, author, links, permissions) to front ends
"""

from datetime import datetime, timezone
from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from domain_config.config import Settings, get_settings
from domain_config.core.logging_config import setup_logging
from domain_config.database import create_session_factory, create_tables, get_engine, is_database_connected
from domain_config.middleware.rate_limiter import setup_rate_limiting
from domain_config.middleware.request_context import RequestContextMiddleware
from domain_config.services.cache_service import CacheService
from domain_config.utils.error_handlers import setup_error_handlers
from domain_config.api import sessions, configs, domains

logger = logging.getLogger(__name__)

APP_NAME = "Domain Config Service"
APP_VERSION = "1.0.0"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application

    Args:
        settings: Settings to run with (defaults to the environment)

    Returns:
        FastAPI: Configured application
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        description="Domain-keyed site configuration API",
        docs_url="/api-docs",
        redoc_url=None,
        openapi_tags=[
            {"name": "sessions", "description": "Admin login and logout"},
            {"name": "configs", "description": "Site config management"},
            {"name": "domains", "description": "Domain management and lookup"},
            {"name": "health", "description": "Service health"}
        ]
    )
    app.state.settings = settings
    app.state.engine = get_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.cache = CacheService(settings)

    # Rate limiting runs innermost, inside the request id and CORS layers
    setup_rate_limiting(app, settings)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    setup_error_handlers(app)

    app.include_router(sessions.router, prefix=settings.API_PREFIX)
    app.include_router(configs.router, prefix=settings.API_PREFIX)
    app.include_router(domains.router, prefix=settings.API_PREFIX)

    @app.on_event("startup")
    async def startup_event():
        """Create tables outside production (production uses the init script)"""
        if not settings.is_production:
            create_tables(app.state.engine)
        logger.info(f"{APP_NAME} v{APP_VERSION} started (env={settings.NODE_ENV})")
        logger.info(f"API Docs: http://{settings.HOST}:{settings.PORT}/api-docs")

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.cache.close()
        logger.info(f"{APP_NAME} stopped")

    @app.get("/", tags=["health"])
    async def root():
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "docs": "/api-docs"
        }

    @app.get("/health", tags=["health"])
    async def health_check(request: Request):
        """
        Health check

        Returns:
            200 healthy, 200 degraded when Redis is enabled but unreachable,
            503 unhealthy when the database is down
        """
        cache: CacheService = request.app.state.cache

        database = "connected" if is_database_connected(request.app.state.engine) else "disconnected"
        if settings.REDIS_ENABLED:
            redis_status = "connected" if cache.ping() else "disconnected"
        else:
            redis_status = "disabled"

        if database != "connected":
            health = "unhealthy"
        elif redis_status == "disconnected":
            health = "degraded"
        else:
            health = "healthy"

        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE if health == "unhealthy" else status.HTTP_200_OK,
            content={
                "status": health,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "services": {
                    "database": database,
                    "redis": redis_status
                }
            }
        )

    return app


app = create_app()


def run():
    """Serve the application with uvicorn"""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "domain_config.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development
    )


if __name__ == "__main__":
    run()
