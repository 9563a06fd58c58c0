"""
Persistent dataset cache for cyberdoc-tree.

Uses diskcache for SQLite-based persistent caching, so the raw record list
survives between runs and the provider only goes to the network or disk on
a miss.
"""

from typing import Any, Optional

from diskcache import Cache

from .logging_config import get_logger

logger = get_logger(__name__)


class DatasetCache:
    """
    SQLite-based cache for raw dataset records.

    Features:
    - TTL-based expiration
    - Failures degrade to a cache miss
    """

    def __init__(
        self,
        cache_dir: str = ".cyberdoc-cache",
        ttl_seconds: Optional[int] = 24 * 3600,
        enabled: bool = True,
    ):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage
            ttl_seconds: Time-to-live in seconds (None = never expires)
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds = ttl_seconds

        if self.enabled:
            self.cache: Optional[Cache] = Cache(cache_dir)
            logger.debug(f"Cache initialized at {cache_dir} with TTL={ttl_seconds}s")
        else:
            self.cache = None
            logger.debug("Cache disabled")

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache.

        Returns:
            Cached value or None if not found/expired
        """
        if not self.enabled or self.cache is None:
            return None

        try:
            value = self.cache.get(key)
            if value is not None:
                logger.debug(f"Cache hit: {key}")
            return value
        except Exception as e:
            logger.warning(f"Cache get failed: {e}")
            return None

    def set(self, key: str, value: Any) -> None:
        """Set value in cache."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.set(key, value, expire=self.ttl_seconds)
            logger.debug(f"Cache set: {key}")
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def delete(self, key: str) -> None:
        """Drop one entry."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.delete(key)
        except Exception as e:
            logger.warning(f"Cache delete failed: {e}")

    def clear(self) -> None:
        """Clear all cache entries."""
        if not self.enabled or self.cache is None:
            return

        try:
            self.cache.clear()
            logger.info("Cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if not self.enabled or self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            self.cache.close()

    def __enter__(self) -> "DatasetCache":
        return self

    def __exit__(self, *args) -> None:
        self.close()
