"""
Pydantic Schemas for Session endpoints
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from domain_config.schemas.common import ApiModel


class SessionCreate(ApiModel):
    """Login request"""
    password: Optional[str] = Field(None, description="Admin password")


class SessionToken(ApiModel):
    """Issued session"""
    token: str = Field(..., description="JWT bearer token")
    token_type: str = Field("Bearer", description="Always Bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class SessionTokenEnvelope(ApiModel):
    data: SessionToken


class SessionInfo(ApiModel):
    """Current session introspection"""
    authenticated: bool = True
    token_type: str = "Bearer"
    role: str
    expires_at: Optional[datetime] = None


class SessionInfoEnvelope(ApiModel):
    data: SessionInfo
