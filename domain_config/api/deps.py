"""
FastAPI dependencies
Settings, authentication, database session, services and pagination
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import logging

from fastapi import Depends, Header, Query, Request
from sqlalchemy.orm import Session

from domain_config.config import Settings, get_settings
from domain_config.core.exceptions import AuthenticationError, InvalidTokenError, ValidationError
from domain_config.core.security import decode_access_token, parse_bearer
from domain_config.database import get_db
from domain_config.services.cache_service import CacheService
from domain_config.services.config_service import ConfigService
from domain_config.services.domain_service import DomainService

logger = logging.getLogger(__name__)

# Methods that never need a session
PUBLIC_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def get_app_settings(request: Request) -> Settings:
    """Settings the running application was built with"""
    return getattr(request.app.state, "settings", None) or get_settings()


def get_cache_service(request: Request) -> Optional[CacheService]:
    return getattr(request.app.state, "cache", None)


def get_config_service(
    db: Session = Depends(get_db),
    cache: Optional[CacheService] = Depends(get_cache_service)
) -> ConfigService:
    return ConfigService(db, cache)


def get_domain_service(
    db: Session = Depends(get_db),
    cache: Optional[CacheService] = Depends(get_cache_service)
) -> DomainService:
    return DomainService(db, cache)


async def get_current_session(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token"),
    settings: Settings = Depends(get_app_settings)
) -> Dict[str, Any]:
    """
    Get the current admin session from the Authorization header

    Args:
        authorization: Authorization header (format: "Bearer <jwt>")

    Returns:
        dict: Verified token claims (also stored on request.state.session)

    Raises:
        AuthenticationError: 401 if the header is missing or malformed
        InvalidTokenError: 403 if the token is forged or expired
    """
    if not authorization:
        raise AuthenticationError("Authorization header is required")

    token = parse_bearer(authorization)
    if token is None:
        raise AuthenticationError(
            "Authorization header must be in the format: Bearer <token>",
            "INVALID_TOKEN_FORMAT",
        )

    claims = decode_access_token(token, settings)
    if claims is None:
        raise InvalidTokenError("Invalid or expired token")

    request.state.session = claims
    return claims


async def require_admin_for_writes(
    request: Request,
    authorization: Optional[str] = Header(None, description="Bearer token"),
    settings: Settings = Depends(get_app_settings)
) -> Optional[Dict[str, Any]]:
    """
    Reads are public; every other method needs an admin session

    Returns:
        The session claims for writes, None for reads
    """
    if request.method in PUBLIC_METHODS:
        return None
    return await get_current_session(request, authorization, settings)


@dataclass
class Pagination:
    page: int
    page_size: int

    def total_pages(self, total: int) -> int:
        return (total + self.page_size - 1) // self.page_size


def get_pagination(
    page: int = Query(1, description="Page number, starting at 1"),
    page_size: Optional[int] = Query(None, alias="pageSize", description="Items per page"),
    settings: Settings = Depends(get_app_settings)
) -> Pagination:
    """
    Validate page/pageSize query parameters

    Raises:
        ValidationError: 400 if page < 1 or pageSize is outside 1..MAX_PAGE_SIZE
    """
    if page_size is None:
        page_size = settings.DEFAULT_PAGE_SIZE

    if page < 1:
        raise ValidationError("page must be greater than or equal to 1", details={"field": "page"})

    if page_size < 1 or page_size > settings.MAX_PAGE_SIZE:
        raise ValidationError(
            f"pageSize must be between 1 and {settings.MAX_PAGE_SIZE}",
            details={"field": "pageSize"},
        )

    return Pagination(page=page, page_size=page_size)
