"""
Pydantic Schemas for API request/response validation
"""

from domain_config.schemas.common import ApiModel, PaginationInfo
from domain_config.schemas.config import (
    ConfigBase,
    ConfigCreate,
    ConfigUpdate,
    ConfigResponse,
    ConfigEnvelope,
    ConfigListResponse,
)
from domain_config.schemas.domain import (
    DomainCreate,
    DomainUpdate,
    DomainResponse,
    DomainEnvelope,
    DomainListResponse,
    DomainLookup,
    DomainLookupEnvelope,
)
from domain_config.schemas.session import (
    SessionCreate,
    SessionToken,
    SessionTokenEnvelope,
    SessionInfo,
    SessionInfoEnvelope,
)

__all__ = [
    "ApiModel",
    "PaginationInfo",
    "ConfigBase",
    "ConfigCreate",
    "ConfigUpdate",
    "ConfigResponse",
    "ConfigEnvelope",
    "ConfigListResponse",
    "DomainCreate",
    "DomainUpdate",
    "DomainResponse",
    "DomainEnvelope",
    "DomainListResponse",
    "DomainLookup",
    "DomainLookupEnvelope",
    "SessionCreate",
    "SessionToken",
    "SessionTokenEnvelope",
    "SessionInfo",
    "SessionInfoEnvelope",
]
