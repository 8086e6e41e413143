"""
Pydantic Schemas for Config endpoints
Request/Response validation
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from domain_config.schemas.common import ApiModel, PaginationInfo


class ConfigBase(ApiModel):
    """Base schema with common fields"""
    title: Optional[str] = Field(None, max_length=255, description="Site title")
    author: Optional[str] = Field(None, max_length=255, description="Site author")
    description: Optional[str] = Field(None, max_length=255, description="Site description")
    keywords: Optional[str] = Field(None, max_length=255, description="Comma-separated keywords")
    links: Optional[Dict[str, Any]] = Field(None, description="Free-form links object")
    permissions: Optional[Dict[str, Any]] = Field(None, description="Free-form permissions object")


class ConfigCreate(ConfigBase):
    """Schema for creating (or fully replacing) a config"""
    pass


class ConfigUpdate(ConfigBase):
    """Schema for partially updating a config; only sent fields change"""
    pass


class ConfigResponse(ConfigBase):
    """Schema for config responses"""
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ConfigEnvelope(ApiModel):
    data: ConfigResponse


class ConfigListResponse(ApiModel):
    """Schema for paginated list of configs"""
    data: List[ConfigResponse]
    pagination: PaginationInfo
