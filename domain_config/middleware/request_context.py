"""
Request context middleware

Assigns every request an id (incoming X-Request-ID or a new UUID4), makes it
available to handlers and log records, echoes it in the response and logs the
request with its duration.
"""

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from domain_config.core.logging_config import request_id_var
from domain_config.middleware.rate_limiter import add_rate_limit_headers
from domain_config.utils.error_handlers import generic_error_handler
from domain_config.utils.sanitize import sanitize_headers

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        client_ip = request.client.host if request.client else None
        start = time.perf_counter()

        logger.info(
            "Incoming request",
            extra={
                "method": request.method,
                "url": str(request.url.path),
                "ip": client_ip,
                "user_agent": request.headers.get("user-agent"),
            },
        )
        logger.debug("Request headers", extra={"headers": sanitize_headers(dict(request.headers))})

        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                # The app-level Exception handler runs outside this middleware
                response = add_rate_limit_headers(request, await generic_error_handler(request, exc))
            duration_ms = (time.perf_counter() - start) * 1000

            response.headers[REQUEST_ID_HEADER] = request_id
            logger.log(
                _completion_level(response.status_code),
                "Request completed",
                extra={
                    "method": request.method,
                    "url": str(request.url.path),
                    "status_code": response.status_code,
                    "duration": f"{duration_ms:.2f}ms",
                    "ip": client_ip,
                },
            )
            return response
        finally:
            request_id_var.reset(token)


def _completion_level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO
