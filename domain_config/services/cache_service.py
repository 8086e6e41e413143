"""
Redis caching service for domain lookups

Resolved domain lookups are read far more often than they change, so the
result of DomainService.get_by_domain is cached under domain:config:{domain}.
Caching is optional (REDIS_ENABLED); a cache failure never fails a request.
"""

from typing import Any, Optional
import json
import logging

from domain_config.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "domain:config:"


class CacheService:
    """
    Redis cache with JSON values

    Cache Keys:
    - domain:config:{domain} -> lookup result (REDIS_TTL)
    """

    def __init__(self, settings: Optional[Settings] = None, client=None):
        """
        Initialize Redis connection

        Args:
            settings: Application settings (defaults to the global instance)
            client: Pre-built Redis client (tests)
        """
        self.settings = settings or default_settings
        self.redis = None
        self.enabled = self.settings.REDIS_ENABLED

        if not self.enabled:
            return

        try:
            if client is None:
                import redis
                client = redis.from_url(
                    self.settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=5,
                    socket_timeout=5
                )
            client.ping()
            self.redis = client
            logger.info(
                f"Cache service connected to Redis at "
                f"{self.settings.REDIS_HOST}:{self.settings.REDIS_PORT}"
            )
        except Exception as e:
            logger.warning(f"Failed to connect to Redis: {e}. Caching disabled.")
            self.redis = None
            self.enabled = False

    def is_enabled(self) -> bool:
        """Check if cache is available"""
        return self.enabled and self.redis is not None

    def ping(self) -> bool:
        """Check the Redis connection is alive"""
        if not self.is_enabled():
            return False

        try:
            return bool(self.redis.ping())
        except Exception as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    def get(self, key: str) -> Optional[Any]:
        """
        Get a cached value

        Args:
            key: Key without prefix

        Returns:
            Decoded value or None on miss, when disabled, or on error
        """
        if not self.is_enabled():
            return None

        cache_key = self._make_key(key)
        try:
            data = self.redis.get(cache_key)

            if data is None:
                logger.debug(f"Cache MISS for {cache_key}")
                return None

            logger.debug(f"Cache HIT for {cache_key}")
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            return json.loads(data)

        except Exception as e:
            logger.error(f"Error getting {cache_key} from cache: {e}")
            return None

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Cache a JSON-serialisable value

        Args:
            key: Key without prefix
            value: Value to cache
            ttl: Time to live in seconds (default: REDIS_TTL)

        Returns:
            True if cached successfully
        """
        if not self.is_enabled():
            return False

        cache_key = self._make_key(key)
        try:
            ttl = ttl or self.settings.REDIS_TTL
            data = json.dumps(value, default=str).encode("utf-8")
            self.redis.setex(cache_key, ttl, data)
            logger.debug(f"Cached {cache_key} (ttl={ttl}s)")
            return True

        except Exception as e:
            logger.error(f"Error setting {cache_key} in cache: {e}")
            return False

    def delete(self, key: str) -> bool:
        """Remove a cached value"""
        if not self.is_enabled():
            return False

        cache_key = self._make_key(key)
        try:
            self.redis.delete(cache_key)
            logger.debug(f"Deleted {cache_key} from cache")
            return True

        except Exception as e:
            logger.error(f"Error deleting {cache_key} from cache: {e}")
            return False

    def invalidate_all(self) -> int:
        """
        Drop every cached lookup

        Called when a config changes, since any number of domains may embed it.

        Returns:
            Number of keys deleted
        """
        if not self.is_enabled():
            return 0

        try:
            keys = list(self.redis.scan_iter(match=f"{CACHE_KEY_PREFIX}*"))

            if keys:
                deleted = self.redis.delete(*keys)
                logger.info(f"Invalidated {deleted} cached domain lookups")
                return deleted

            return 0

        except Exception as e:
            logger.error(f"Error invalidating domain cache: {e}")
            return 0

    def close(self) -> None:
        if self.redis is not None:
            try:
                self.redis.close()
            except Exception as e:
                logger.warning(f"Error closing Redis connection: {e}")

    def _make_key(self, key: str) -> str:
        return f"{CACHE_KEY_PREFIX}{key}"
