"""
Rate Limiting Middleware

Protects the API from abuse using SlowAPI.
One application-wide limit per client IP: RATE_LIMIT_MAX requests per
RATE_LIMIT_WINDOW_MS, counted in memory or in Redis when REDIS_ENABLED.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
import logging

from domain_config.config import Settings

logger = logging.getLogger(__name__)


def create_limiter(settings: Settings) -> Limiter:
    """
    Build the limiter for an application

    Args:
        settings: Application settings

    Returns:
        Limiter: Fixed-window limiter keyed by client IP
    """
    storage_uri = settings.redis_url if settings.REDIS_ENABLED else "memory://"

    return Limiter(
        key_func=get_remote_address,
        application_limits=[settings.rate_limit],
        storage_uri=storage_uri,
        headers_enabled=True,
        # Keep counting in memory if Redis goes away
        in_memory_fallback_enabled=settings.REDIS_ENABLED,
        in_memory_fallback=[settings.rate_limit] if settings.REDIS_ENABLED else [],
    )


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Handler for rate limit exceeded errors

    Called synchronously by SlowAPIMiddleware.

    Returns:
        JSONResponse: 429 with the standard error envelope and rate limit headers
    """
    logger.warning(
        f"Rate limit exceeded for {get_remote_address(request)} "
        f"on {request.method} {request.url.path} ({exc.detail})"
    )

    response = JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": {
                "code": "RATE_LIMIT_EXCEEDED",
                "message": "Too many requests, please try again later",
            }
        },
    )

    return add_rate_limit_headers(request, response)


def add_rate_limit_headers(request: Request, response: Response) -> Response:
    """
    Add X-RateLimit-* and Retry-After headers for the limit hit by this request

    Returns:
        Response: The same response, with headers when a limit was evaluated
    """
    view_rate_limit = getattr(request.state, "view_rate_limit", None)
    limiter: Limiter = getattr(request.app.state, "limiter", None)
    if view_rate_limit is None or limiter is None:
        return response
    return limiter._inject_headers(response, view_rate_limit)


def setup_rate_limiting(app, settings: Settings) -> Limiter:
    """
    Setup rate limiting middleware

    Args:
        app: FastAPI application instance
        settings: Application settings

    Returns:
        Limiter: The limiter attached to app.state
    """
    limiter = create_limiter(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    logger.info(
        f"Rate limiting enabled: {settings.rate_limit} "
        f"({'redis' if settings.REDIS_ENABLED else 'memory'} storage)"
    )
    return limiter
