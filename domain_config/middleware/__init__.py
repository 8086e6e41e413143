"""
Middleware Components

Provides cross-cutting concerns like rate limiting and request tracing.
"""

from domain_config.middleware.rate_limiter import create_limiter, setup_rate_limiting
from domain_config.middleware.request_context import RequestContextMiddleware

__all__ = ["create_limiter", "setup_rate_limiting", "RequestContextMiddleware"]
