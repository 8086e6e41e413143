"""
Pydantic Schemas for Domain endpoints
Request/Response validation
"""

from datetime import datetime
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import Field, field_validator

from domain_config.schemas.common import ApiModel, PaginationInfo
from domain_config.schemas.config import ConfigBase, ConfigResponse


def _normalize_domain(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip().lower()
    if not value:
        raise ValueError("domain must not be empty")
    return value


def _validate_homepage(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("homepage must be a valid http(s) URL")
    return value


class DomainCreate(ApiModel):
    """Schema for creating a domain"""
    domain: str = Field(..., min_length=1, max_length=255, description="Host name, e.g. example.com")
    config_id: int = Field(..., gt=0, description="Config served for this domain")
    homepage: Optional[str] = Field(None, max_length=500, description="Homepage URL")

    normalize_domain = field_validator("domain")(_normalize_domain)
    validate_homepage = field_validator("homepage")(_validate_homepage)


class DomainUpdate(ApiModel):
    """Schema for updating a domain (all fields optional)"""
    domain: Optional[str] = Field(None, min_length=1, max_length=255)
    config_id: Optional[int] = Field(None, gt=0)
    homepage: Optional[str] = Field(None, max_length=500)

    normalize_domain = field_validator("domain")(_normalize_domain)
    validate_homepage = field_validator("homepage")(_validate_homepage)


class DomainResponse(ApiModel):
    """Schema for domain responses"""
    id: int
    domain: str
    homepage: Optional[str] = None
    config_id: int
    config: Optional[ConfigResponse] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DomainEnvelope(ApiModel):
    data: DomainResponse


class DomainListResponse(ApiModel):
    """Schema for paginated list of domains"""
    data: List[DomainResponse]
    pagination: PaginationInfo


class DomainLookup(ApiModel):
    """Public lookup result: the matched domain and its config without ids or timestamps"""
    domain: str
    homepage: Optional[str] = None
    config: Optional[ConfigBase] = None


class DomainLookupEnvelope(ApiModel):
    data: DomainLookup
