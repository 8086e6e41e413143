"""
Security utilities for authentication
Admin password check and JWT issuance/verification
"""

import logging
import secrets
import time
from typing import Any, Dict, Optional, Tuple

from jose import ExpiredSignatureError, JWTError, jwt

from domain_config.config import Settings
from domain_config.utils.sanitize import get_safe_token_display

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
TOKEN_TYPE = "Bearer"
ADMIN_ROLE = "admin"


def verify_admin_password(password: str, settings: Settings) -> bool:
    """
    Compare a password against ADMIN_PASSWORD in constant time

    Args:
        password: Password supplied by the client
        settings: Application settings

    Returns:
        bool: True if the password matches
    """
    if not password:
        return False
    return secrets.compare_digest(
        password.encode("utf-8"),
        settings.ADMIN_PASSWORD.encode("utf-8"),
    )


def create_access_token(settings: Settings) -> Tuple[str, int]:
    """
    Issue an admin session token

    Returns:
        tuple: (token, expires_in)
            - token: HS256 JWT with role, iat and exp claims
            - expires_in: Token lifetime in seconds
    """
    expires_in = settings.jwt_expires_seconds
    issued_at = int(time.time())
    claims = {
        "role": ADMIN_ROLE,
        "iat": issued_at,
        "exp": issued_at + expires_in,
    }
    token = jwt.encode(claims, settings.jwt_secret, algorithm=JWT_ALGORITHM)
    return token, expires_in


def decode_access_token(token: str, settings: Settings) -> Optional[Dict[str, Any]]:
    """
    Verify a session token

    Args:
        token: Raw JWT
        settings: Application settings

    Returns:
        The token claims, or None if the token is malformed, forged or expired
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except ExpiredSignatureError:
        logger.warning(f"JWT expired: {get_safe_token_display(token)}")
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
    return None


def parse_bearer(authorization: str) -> Optional[str]:
    """
    Extract the token from an "Authorization: Bearer <token>" header

    Returns:
        The token, or None if the header is not exactly two parts
        starting with "Bearer"
    """
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != TOKEN_TYPE or not parts[1]:
        return None
    return parts[1]
