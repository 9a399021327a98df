"""Short-lived cache for session list results."""

import logging
import time
from typing import Any, Callable

from ..config import SESSION_LIST_CACHE_MAX_ENTRIES, SESSION_LIST_CACHE_TTL

logger = logging.getLogger('codexmate.cache')


class SessionCache:
    """TTL cache with bounded FIFO eviction.

    Entries are ``key -> (stored_at, value)``. Re-setting an existing key
    keeps its original insertion slot, so eviction drops the key that was
    first inserted, not the least recently used one.
    """

    def __init__(
        self,
        ttl: float = SESSION_LIST_CACHE_TTL,
        max_entries: int = SESSION_LIST_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    def get(self, key: str, force_refresh: bool = False) -> Any | None:
        """Cached value for ``key``, or None if missing, expired or bypassed."""
        if force_refresh:
            self._entries.pop(key, None)
            return None

        cached = self._entries.get(key)
        if cached is None:
            return None

        stored_at, value = cached
        if self._clock() - stored_at > self.ttl:
            del self._entries[key]
            logger.debug("Cache entry %s expired", key)
            return None

        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

        if len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def invalidate_all(self) -> None:
        """Drop every entry; called after any session is deleted."""
        if self._entries:
            logger.debug("Invalidating %d cached session lists", len(self._entries))
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
