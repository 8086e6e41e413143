"""
Session API endpoints
Admin login (JWT issuance), session introspection and logout
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Body, Depends, Request, Response, status

from domain_config.api.deps import get_app_settings, get_current_session
from domain_config.config import Settings
from domain_config.core.exceptions import AuthenticationError, ValidationError
from domain_config.core.security import (
    ADMIN_ROLE,
    TOKEN_TYPE,
    create_access_token,
    verify_admin_password
)
from domain_config.schemas.session import (
    SessionCreate,
    SessionInfo,
    SessionInfoEnvelope,
    SessionToken,
    SessionTokenEnvelope
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionTokenEnvelope, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: Request,
    payload: Optional[SessionCreate] = Body(None),
    settings: Settings = Depends(get_app_settings)
):
    """
    Log in with the admin password

    Args:
        payload: {"password": "..."}

    Returns:
        SessionTokenEnvelope: Bearer token and its lifetime in seconds

    Raises:
        ValidationError: 400 if the password is missing
        AuthenticationError: 401 if the password is wrong
    """
    password = payload.password if payload else None
    if not password:
        raise ValidationError("Password is required", details={"field": "password"})

    if not verify_admin_password(password, settings):
        logger.warning(
            "Failed login attempt",
            extra={
                "ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
            },
        )
        raise AuthenticationError("Invalid password")

    token, expires_in = create_access_token(settings)
    logger.info("Admin session created", extra={"ip": request.client.host if request.client else None})

    return SessionTokenEnvelope(
        data=SessionToken(token=token, token_type=TOKEN_TYPE, expires_in=expires_in)
    )


@router.get("/current", response_model=SessionInfoEnvelope)
async def get_session(session: Dict[str, Any] = Depends(get_current_session)):
    """
    Describe the session behind the presented token

    Returns:
        SessionInfoEnvelope: role and expiry of the token
    """
    expires_at = None
    if session.get("exp") is not None:
        expires_at = datetime.fromtimestamp(session["exp"], tz=timezone.utc)

    return SessionInfoEnvelope(
        data=SessionInfo(
            authenticated=True,
            token_type=TOKEN_TYPE,
            role=session.get("role", ADMIN_ROLE),
            expires_at=expires_at,
        )
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_session(
    request: Request,
    session: Dict[str, Any] = Depends(get_current_session)
):
    """
    Log out

    Tokens are stateless, so the client discarding the token ends the session.
    """
    logger.info(
        "Admin session ended",
        extra={"ip": request.client.host if request.client else None, "role": session.get("role")},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
