"""
Config service - business logic for site configs
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from domain_config.core.exceptions import ConflictError, DatabaseError, NotFoundError
from domain_config.models.config import Config
from domain_config.models.domain import Domain
from domain_config.services.cache_service import CacheService

logger = logging.getLogger(__name__)

CONFIG_FIELDS = ("title", "author", "description", "keywords", "links", "permissions")


class ConfigService:
    """CRUD for configs; deleting a config still used by a domain is refused"""

    def __init__(self, db: Session, cache: Optional[CacheService] = None):
        self.db = db
        self.cache = cache

    def create(self, data: Dict[str, Any]) -> Config:
        """
        Create a config

        Args:
            data: Config fields (unknown keys are ignored)

        Returns:
            Config: The persisted config
        """
        logger.info(f"Creating config: {self._loggable(data)}")
        config = Config(**{key: data.get(key) for key in CONFIG_FIELDS})

        try:
            self.db.add(config)
            self.db.commit()
            self.db.refresh(config)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create config: {e}")
            raise DatabaseError("Failed to create config", "DB_CREATE_ERROR", e)

        logger.info(f"Config created: id={config.id}")
        return config

    def get_by_id(self, config_id: int) -> Optional[Config]:
        try:
            return self.db.get(Config, config_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to query config {config_id}: {e}")
            raise DatabaseError("Failed to query config", "DB_QUERY_ERROR", e)

    def list(self, page: int, page_size: int) -> Tuple[List[Config], int]:
        """
        List configs, newest first

        Returns:
            tuple: (configs on this page, total number of configs)
        """
        try:
            total = self.db.query(func.count(Config.id)).scalar()
            configs = (
                self.db.query(Config)
                .order_by(Config.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to list configs: {e}")
            raise DatabaseError("Failed to list configs", "DB_QUERY_ERROR", e)

        return configs, total

    def update(self, config_id: int, data: Dict[str, Any]) -> Optional[Config]:
        """
        Update the given fields of a config

        Args:
            config_id: Config ID
            data: Fields to change; keys not present are left untouched

        Returns:
            The updated config, or None if it does not exist
        """
        logger.info(f"Updating config {config_id}: {self._loggable(data)}")
        config = self.get_by_id(config_id)
        if config is None:
            return None

        for key in CONFIG_FIELDS:
            if key in data:
                setattr(config, key, data[key])

        try:
            self.db.commit()
            self.db.refresh(config)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update config {config_id}: {e}")
            raise DatabaseError("Failed to update config", "DB_UPDATE_ERROR", e)

        # Cached domain lookups embed the config
        if self.cache is not None:
            self.cache.invalidate_all()

        return config

    def delete(self, config_id: int) -> bool:
        """
        Delete a config

        Raises:
            ConflictError: CONFIG_IN_USE if domains still reference it
            NotFoundError: CONFIG_NOT_FOUND if it does not exist
        """
        logger.info(f"Deleting config {config_id}")

        try:
            domain_count = (
                self.db.query(func.count(Domain.id))
                .filter(Domain.config_id == config_id)
                .scalar()
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to count domains for config {config_id}: {e}")
            raise DatabaseError("Failed to query config usage", "DB_QUERY_ERROR", e)

        if domain_count > 0:
            raise ConflictError(
                f"Config is used by {domain_count} domain(s) and cannot be deleted",
                "CONFIG_IN_USE",
            )

        config = self.get_by_id(config_id)
        if config is None:
            raise NotFoundError("Config not found", "CONFIG_NOT_FOUND")

        try:
            self.db.delete(config)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete config {config_id}: {e}")
            raise DatabaseError("Failed to delete config", "DB_DELETE_ERROR", e)

        if self.cache is not None:
            self.cache.invalidate_all()

        return True

    @staticmethod
    def _loggable(data: Dict[str, Any]) -> Dict[str, Any]:
        return {key: data[key] for key in CONFIG_FIELDS if key in data}
