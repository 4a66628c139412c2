"""
Response Cache - per-entry TTL cache for scraper payloads.

Entries are keyed and timed by the CacheDirective attached to each request.
"""

import logging
import time
from typing import Any, Awaitable, Callable, Optional, Tuple

from cachetools import TLRUCache

from ..models.context import CacheDirective
from ..models.result import ScrapeResult

logger = logging.getLogger("gateway.cache")


class ResponseCache:
    """
    TTL-based LRU cache using cachetools.

    Note: This cache is designed for single-threaded async environments (FastAPI/uvicorn).
    All operations are atomic in this context, so no locking is required.
    """

    def __init__(self, max_size: int = 1024, timer: Callable[[], float] = time.monotonic):
        self.max_size = max_size
        # Each value is (duration, payload); the duration sets its expiry.
        self._cache = TLRUCache(maxsize=max_size, ttu=self._time_to_use, timer=timer)
        logger.debug(f"ResponseCache initialized: max_size={max_size}")

    @staticmethod
    def _time_to_use(key: str, value: Tuple[int, Any], now: float) -> float:
        return now + value[0]

    def get(self, key: str) -> Optional[Any]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        return entry[1]

    def set(self, key: str, payload: Any, duration: int) -> None:
        if duration <= 0:
            return
        self._cache[key] = (duration, payload)

    def invalidate(self, key: str) -> None:
        if key in self._cache:
            del self._cache[key]
            logger.debug(f"Cache invalidated: {key}")

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    async def get_or_set(
        self,
        getter: Callable[[], Awaitable[ScrapeResult]],
        directive: Optional[CacheDirective],
    ) -> ScrapeResult:
        """
        Return the cached payload for the directive, or fetch and store it.

        Failed results are returned as-is and never stored.
        """
        if directive is None:
            return await getter()

        # Entries are (duration, payload) tuples, so a stored None payload is still a hit.
        entry = self._cache.get(directive.key)
        if entry is not None:
            logger.debug(f"Cache hit: {directive.key}")
            return ScrapeResult.success(entry[1])

        result = await getter()
        if result.ok:
            self.set(directive.key, result.data, directive.duration)
        return result
