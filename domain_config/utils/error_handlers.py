"""
Centralized Error Handling

Every error leaves the service as
    {"error": {"code": "...", "message": "...", "details": {...}?}}
and is logged with the request context.
"""

from typing import Any, Dict, Optional
import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain_config.core.exceptions import AppError
from domain_config.core.logging_config import log_error

logger = logging.getLogger(__name__)

# Codes for errors raised by the framework itself (routing, HTTPException)
HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: "PAYLOAD_TOO_LARGE",
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: "UNSUPPORTED_MEDIA_TYPE",
    status.HTTP_429_TOO_MANY_REQUESTS: "RATE_LIMIT_EXCEEDED",
}

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_body(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Build the error envelope"""
    error: Dict[str, Any] = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"error": error}


def _request_context(request: Request) -> Dict[str, Any]:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "url": str(request.url.path),
        "ip": request.client.host if request.client else None,
    }


class ErrorHandler:
    """Translate exceptions into (status, envelope) pairs"""

    @staticmethod
    def handle_app_error(error: AppError) -> Dict[str, Any]:
        return error.to_dict()

    @staticmethod
    def handle_validation_error(error: RequestValidationError) -> Dict[str, Any]:
        """
        Handle request validation errors

        Returns:
            Envelope whose details.errors lists field, message and type
        """
        errors = []
        for item in error.errors():
            location = [str(part) for part in item.get("loc", ()) if part not in ("body", "query", "path")]
            errors.append({
                "field": ".".join(location) or "body",
                "message": item.get("msg", "Invalid value"),
                "type": item.get("type", "value_error"),
            })

        message = errors[0]["message"] if len(errors) == 1 else "Request validation failed"
        return error_body("VALIDATION_ERROR", message, {"errors": errors})

    @staticmethod
    def handle_http_error(error: StarletteHTTPException) -> Dict[str, Any]:
        code = HTTP_STATUS_CODES.get(error.status_code, "HTTP_ERROR")
        message = error.detail if isinstance(error.detail, str) else code.replace("_", " ").capitalize()
        return error_body(code, message)

    @staticmethod
    def handle_generic_error(error: Exception) -> Dict[str, Any]:
        return error_body("INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE)


# Global exception handlers for FastAPI

async def app_error_handler(request: Request, exc: AppError):
    """FastAPI exception handler for service errors"""
    if exc.status_code >= 500:
        original = getattr(exc, "original_error", None)
        log_error(original or exc, code=exc.code, **_request_context(request))
    else:
        logger.warning(f"{exc.code}: {exc.message}", extra=_request_context(request))

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorHandler.handle_app_error(exc),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """FastAPI exception handler for request validation errors"""
    body = ErrorHandler.handle_validation_error(exc)
    logger.warning(f"Validation error: {body['error']['message']}", extra=_request_context(request))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """FastAPI exception handler for framework HTTP errors (404 route, 405, ...)"""
    logger.warning(f"HTTP {exc.status_code}: {exc.detail}", extra=_request_context(request))
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorHandler.handle_http_error(exc),
        headers=getattr(exc, "headers", None),
    )


async def generic_error_handler(request: Request, exc: Exception):
    """FastAPI exception handler for generic errors"""
    log_error(exc, **_request_context(request))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorHandler.handle_generic_error(exc),
    )


# Setup function for FastAPI app
def setup_error_handlers(app):
    """
    Setup global error handlers for FastAPI app

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    logger.info("Error handlers registered")
