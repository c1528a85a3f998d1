"""
Process-local read-through cache with per-category TTL.
"""
import threading
import logging
import time
from typing import Any, Callable, Dict, Optional, Union

from .core import CacheEntry, DataCategory
from .ttl_policies import TTL_CONFIG, get_ttl_for_category

logger = logging.getLogger("cache.manager")


class CacheManager:
    """
    Key -> payload store where each entry expires according to its category.

    - get() is lazy: an expired entry is removed when it is next read
    - set() always replaces the whole entry (last writer wins)
    - clear_expired() is the periodic sweep, see CacheSweeper
    """

    def __init__(
        self,
        ttl_config: Optional[Dict[DataCategory, int]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl_config: Category -> TTL seconds (defaults to TTL_CONFIG)
            clock: Monotonic time source, injectable for tests
        """
        self._ttl_config = dict(TTL_CONFIG)
        if ttl_config:
            self._ttl_config.update(ttl_config)
        self._clock = clock
        self._cache: Dict[str, CacheEntry] = {}
        self._cache_lock = threading.Lock()
        self._stats = {"hits": 0, "misses": 0}

    def ttl_for(self, category: Union[DataCategory, str, None]) -> int:
        return get_ttl_for_category(category, self._ttl_config)

    def get(self, key: str, category: Union[DataCategory, str, None] = None) -> Optional[Any]:
        """
        Return the payload for key if it is still fresh.

        Args:
            key: Cache key
            category: Category whose TTL applies to this read

        Returns:
            The cached payload, or None on a miss
        """
        ttl = self.ttl_for(category)
        now = self._clock()
        with self._cache_lock:
            entry = self._cache.get(key)
            if entry is None:
                self._stats["misses"] += 1
                logger.info(f"CACHE MISS: {key}")
                return None
            if not entry.is_fresh(now, ttl):
                del self._cache[key]
                self._stats["misses"] += 1
                logger.info(f"CACHE EXPIRED: {key} [age={entry.age_seconds(now):.1f}s]")
                return None
            self._stats["hits"] += 1

        logger.debug(f"CACHE HIT: {key} [age={entry.age_seconds(now):.1f}s]")
        return entry.data

    def set(self, key: str, data: Any, category: Union[DataCategory, str, None] = None) -> None:
        """Store data under key, replacing any existing entry."""
        entry = CacheEntry(
            key=key,
            data=data,
            category=DataCategory.coerce(category),
            inserted_at=self._clock(),
        )
        with self._cache_lock:
            self._cache[key] = entry

    def clear(self, key: str) -> bool:
        """
        Invalidate a specific cache entry.

        Returns:
            True if entry was found and removed
        """
        with self._cache_lock:
            if self._cache.pop(key, None) is not None:
                logger.info(f"Invalidated cache: {key}")
                return True
            return False

    def clear_all(self) -> int:
        """
        Clear all cache entries.

        Returns:
            Number of entries cleared
        """
        with self._cache_lock:
            count = len(self._cache)
            self._cache.clear()
        logger.info(f"Cleared {count} cache entries")
        return count

    def clear_expired(self) -> int:
        """
        Remove every entry whose category TTL has elapsed.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._cache_lock:
            expired = [
                key for key, entry in self._cache.items()
                if not entry.is_fresh(now, self.ttl_for(entry.category))
            ]
            for key in expired:
                del self._cache[key]
        if expired:
            logger.info(f"Swept {len(expired)} expired cache entries")
        return len(expired)

    def get_stats(self) -> Dict[str, Any]:
        """Diagnostic snapshot: entry count, live keys and count per category."""
        with self._cache_lock:
            entries = list(self._cache.values())
            hits = self._stats["hits"]
            misses = self._stats["misses"]

        types: Dict[str, int] = {}
        for entry in entries:
            types[entry.category.value] = types.get(entry.category.value, 0) + 1

        return {
            "size": len(entries),
            "entries": [entry.key for entry in entries],
            "types": types,
            "hits": hits,
            "misses": misses,
        }

    def __len__(self) -> int:
        with self._cache_lock:
            return len(self._cache)
