"""
Custom exceptions for the Domain Config Service

Every exception carries an HTTP status and a machine-readable code.
They are rendered as {"error": {"code", "message", "details"?}} by
domain_config.utils.error_handlers.
"""

from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base exception for the service"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        """Error envelope body"""
        error: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"error": error}


class ValidationError(AppError):
    """Request data failed validation"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "VALIDATION_ERROR"


class AuthenticationError(AppError):
    """Missing or malformed credentials"""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_code = "UNAUTHORIZED"


class InvalidTokenError(AppError):
    """Bearer token is invalid or expired"""
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "INVALID_TOKEN"


class NotFoundError(AppError):
    """Resource not found"""
    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"


class ConflictError(AppError):
    """Resource already exists or is still referenced"""
    status_code = status.HTTP_409_CONFLICT
    default_code = "CONFLICT"


class DatabaseError(AppError):
    """Database operation failed"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code = "DATABASE_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code)
        self.original_error = original_error
