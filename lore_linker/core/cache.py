"""
Time-limited cache used by catalog providers.

Each CacheManager holds one value with a timestamp; callers create one per
data source and pass it where it is needed.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_CACHE_DURATION = 5 * 60  # seconds


class CacheManager:
    """Single-value cache with an expiry duration and an injectable clock."""

    def __init__(
        self,
        name: str,
        duration: float = DEFAULT_CACHE_DURATION,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.duration = duration
        self._clock = clock
        self._data: Any = None
        self._timestamp: Optional[float] = None

    def get(self) -> Any:
        """Return cached data if present and not expired, otherwise None."""
        if self.is_valid():
            return self._data
        return None

    def set(self, data: Any) -> None:
        self._data = data
        self._timestamp = self._clock()

    def clear(self) -> None:
        self._data = None
        self._timestamp = None
        logger.info(f"{self.name} cache cleared")

    def is_valid(self) -> bool:
        if not self._data or self._timestamp is None:
            return False
        return (self._clock() - self._timestamp) < self.duration

    def age(self) -> Optional[float]:
        if self._timestamp is None:
            return None
        return self._clock() - self._timestamp

    def info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "has_data": bool(self._data),
            "timestamp": self._timestamp,
            "age": self.age(),
            "duration": self.duration,
            "is_valid": self.is_valid(),
        }

    def get_raw(self) -> Any:
        """Return cached data without checking expiry."""
        return self._data


def get_with_cache(cache: CacheManager, fetch: Callable[[], Any], fallback: Any = None) -> Any:
    """
    Return cached data, fetching fresh data when the cache is empty or stale.

    A falsy fetch result is not cached and yields ``fallback``. Errors raised
    by ``fetch`` are logged and also yield ``fallback``.
    """
    cached = cache.get()
    if cached:
        return cached

    try:
        fresh = fetch()
    except Exception as e:
        logger.error(f"Error fetching {cache.name} data: {e}")
        return fallback

    if fresh:
        cache.set(fresh)
        return fresh

    logger.warning(f"No {cache.name} data returned, using fallback")
    return fallback


def get_sync(cache: CacheManager, fallback: Any = None) -> Any:
    """Return whatever is cached, stale or not, or ``fallback``."""
    return cache.get_raw() or fallback


def initialize_cache(cache: CacheManager, fetch: Callable[[], Any]) -> bool:
    """Populate the cache eagerly. Returns False if the fetch failed."""
    try:
        cache.set(fetch())
    except Exception as e:
        logger.error(f"Failed to initialize {cache.name} cache: {e}")
        return False

    logger.info(f"{cache.name} cache initialized successfully")
    return True
