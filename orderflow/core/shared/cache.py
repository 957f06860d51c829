"""
Cache Utilities

In-process TTL cache with LRU eviction. Backs the report cache when Redis is
disabled or unreachable.
"""

import asyncio
import time
from collections import OrderedDict
from typing import Any


class MemoryCache:
    """
    Example:
        ```python
        cache = MemoryCache(max_size=1000, default_ttl=30)
        await cache.async_set("orderflow:report:status_counts", counts)
        await cache.async_get("orderflow:report:status_counts")
        ```

    Entries are kept in recency order, so the oldest key is the first one.
    """

    def __init__(self, max_size: int = 1000, default_ttl: float | None = None):
        self.max_size = max_size
        self.default_ttl = default_ttl
        # key -> (value, monotonic deadline or None)
        self._entries: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()
        self._lock = asyncio.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default

        value, deadline = entry
        if deadline is not None and time.monotonic() > deadline:
            del self._entries[key]
            return default

        self._entries.move_to_end(key)
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = ttl if ttl is not None else self.default_ttl
        deadline = time.monotonic() + ttl if ttl else None

        self._entries[key] = (value, deadline)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def delete_prefix(self, prefix: str) -> int:
        """Remove every key starting with prefix and return how many went."""
        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    async def async_get(self, key: str, default: Any = None) -> Any:
        async with self._lock:
            return self.get(key, default)

    async def async_set(self, key: str, value: Any, ttl: float | None = None) -> None:
        async with self._lock:
            self.set(key, value, ttl)

    async def async_delete_prefix(self, prefix: str) -> int:
        async with self._lock:
            return self.delete_prefix(prefix)

    @property
    def size(self) -> int:
        return len(self._entries)
