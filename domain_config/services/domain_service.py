"""
Domain service - business logic for domains and domain lookups

Lookup matching:
1. Normalise the input (drop scheme, path, query, fragment and port)
2. Try an exact match
3. Fall back to the root domain (last two labels)

    https://www.example.com/a/b  ->  www.example.com  ->  example.com
"""

from typing import Any, Dict, List, Optional, Tuple
import logging
import re

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from domain_config.core.exceptions import ConflictError, DatabaseError, NotFoundError
from domain_config.models.config import Config
from domain_config.models.domain import Domain
from domain_config.schemas.config import ConfigBase
from domain_config.schemas.domain import DomainLookup
from domain_config.services.cache_service import CacheService

logger = logging.getLogger(__name__)

DOMAIN_FIELDS = ("domain", "config_id", "homepage")

_SCHEME = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)


def extract_domain(value: str) -> str:
    """
    Reduce a URL or host string to a bare lower-case host

    Examples:
        >>> extract_domain("https://www.example.com:8080/a/b?c#d")
        'www.example.com'
        >>> extract_domain("Example.COM")
        'example.com'
    """
    domain = value.strip().lower()
    domain = _SCHEME.sub("", domain)

    for separator in ("/", "?", "#"):
        domain = domain.split(separator, 1)[0]

    return domain.split(":", 1)[0]


def extract_root_domain(domain: str) -> str:
    """
    Last two labels of a host name

    Examples:
        >>> extract_root_domain("a.b.example.com")
        'example.com'
        >>> extract_root_domain("example.com")
        'example.com'
    """
    parts = domain.split(".")
    if len(parts) <= 2:
        return domain
    return ".".join(parts[-2:])


class DomainService:
    """CRUD for domains plus the cached public lookup"""

    def __init__(self, db: Session, cache: Optional[CacheService] = None):
        self.db = db
        self.cache = cache

    def create(self, data: Dict[str, Any]) -> Domain:
        """
        Create a domain

        Raises:
            ConflictError: DOMAIN_ALREADY_EXISTS
            NotFoundError: CONFIG_NOT_FOUND
        """
        logger.info(f"Creating domain: {data}")

        if self._find_by_domain(data["domain"]) is not None:
            raise ConflictError(f"Domain '{data['domain']}' already exists", "DOMAIN_ALREADY_EXISTS")

        self._require_config(data["config_id"])

        domain = Domain(**{key: data.get(key) for key in DOMAIN_FIELDS})
        self._commit(domain, "create", "DB_CREATE_ERROR")
        self._invalidate_cache()

        logger.info(f"Domain created: id={domain.id}, domain={domain.domain}")
        return domain

    def get_by_id(self, domain_id: int) -> Optional[Domain]:
        try:
            return self.db.get(Domain, domain_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to query domain {domain_id}: {e}")
            raise DatabaseError("Failed to query domain", "DB_QUERY_ERROR", e)

    def get_by_domain(self, value: str) -> Optional[DomainLookup]:
        """
        Resolve a host name or URL to its config

        Args:
            value: Host name or full URL

        Returns:
            DomainLookup for the matched domain, or None
        """
        clean_domain = extract_domain(value)
        logger.info(f"Looking up domain: input={value!r}, clean={clean_domain!r}")

        if self.cache is not None:
            cached = self.cache.get(clean_domain)
            if cached is not None:
                return DomainLookup.model_validate(cached)

        record = self._find_by_domain(clean_domain)

        if record is None:
            root_domain = extract_root_domain(clean_domain)
            if root_domain != clean_domain:
                logger.info(f"No exact match for {clean_domain}, trying root domain {root_domain}")
                record = self._find_by_domain(root_domain)

        if record is None:
            logger.info(f"Domain not found: {clean_domain}")
            return None

        lookup = DomainLookup(
            domain=record.domain,
            homepage=record.homepage or None,
            config=ConfigBase.model_validate(record.config) if record.config else None,
        )

        if self.cache is not None:
            self.cache.set(clean_domain, lookup.model_dump(mode="json"))

        return lookup

    def list(self, page: int, page_size: int) -> Tuple[List[Domain], int]:
        """
        List domains, newest first

        Returns:
            tuple: (domains on this page, total number of domains)
        """
        try:
            total = self.db.query(func.count(Domain.id)).scalar()
            domains = (
                self.db.query(Domain)
                .order_by(Domain.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list domains: {e}")
            raise DatabaseError("Failed to list domains", "DB_QUERY_ERROR", e)

        return domains, total

    def update(self, domain_id: int, data: Dict[str, Any]) -> Optional[Domain]:
        """
        Update the given fields of a domain

        Returns:
            The updated domain, or None if it does not exist

        Raises:
            ConflictError: DOMAIN_ALREADY_EXISTS when renaming onto an existing domain
            NotFoundError: CONFIG_NOT_FOUND when pointing at a missing config
        """
        logger.info(f"Updating domain {domain_id}: {data}")
        domain = self.get_by_id(domain_id)
        if domain is None:
            return None

        new_name = data.get("domain")
        if new_name and new_name != domain.domain:
            if self._find_by_domain(new_name) is not None:
                raise ConflictError(f"Domain '{new_name}' already exists", "DOMAIN_ALREADY_EXISTS")

        if data.get("config_id") is not None:
            self._require_config(data["config_id"])

        for key in DOMAIN_FIELDS:
            if key in data and (data[key] is not None or key == "homepage"):
                setattr(domain, key, data[key])

        self._commit(domain, "update", "DB_UPDATE_ERROR")
        self._invalidate_cache()
        return domain

    def delete(self, domain_id: int) -> bool:
        """
        Delete a domain

        Raises:
            NotFoundError: DOMAIN_NOT_FOUND
        """
        logger.info(f"Deleting domain {domain_id}")
        domain = self.get_by_id(domain_id)
        if domain is None:
            raise NotFoundError(f"Domain with id {domain_id} not found", "DOMAIN_NOT_FOUND")

        try:
            self.db.delete(domain)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete domain {domain_id}: {e}")
            raise DatabaseError("Failed to delete domain", "DB_DELETE_ERROR", e)

        self._invalidate_cache()
        return True

    # Private helper methods

    def _find_by_domain(self, name: str) -> Optional[Domain]:
        try:
            return self.db.query(Domain).filter(Domain.domain == name).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to query domain {name}: {e}")
            raise DatabaseError("Failed to query domain", "DB_QUERY_ERROR", e)

    def _require_config(self, config_id: int) -> Config:
        try:
            config = self.db.get(Config, config_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to query config {config_id}: {e}")
            raise DatabaseError("Failed to query config", "DB_QUERY_ERROR", e)

        if config is None:
            raise NotFoundError(f"Config with id {config_id} not found", "CONFIG_NOT_FOUND")
        return config

    def _commit(self, domain: Domain, action: str, code: str) -> None:
        try:
            self.db.add(domain)
            self.db.commit()
            self.db.refresh(domain)
        except IntegrityError as e:
            # Unique index lost a race with a concurrent insert
            self.db.rollback()
            raise ConflictError(f"Domain '{domain.domain}' already exists", "DOMAIN_ALREADY_EXISTS") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action} domain: {e}")
            raise DatabaseError(f"Failed to {action} domain", code, e)

    def _invalidate_cache(self) -> None:
        # Lookups are cached per requested host (including subdomains), so a
        # single key cannot be targeted
        if self.cache is not None:
            self.cache.invalidate_all()
