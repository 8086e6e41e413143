"""
Services

Modules:
    - cache_service: Optional Redis cache for domain lookups
    - config_service: Config CRUD
    - domain_service: Domain CRUD and host-name lookup
"""

from domain_config.services.cache_service import CacheService
from domain_config.services.config_service import ConfigService
from domain_config.services.domain_service import DomainService

__all__ = ["CacheService", "ConfigService", "DomainService"]
