"""
In-memory TTL + LRU cache.

Entries expire after their TTL and the least recently used entry is
evicted once max_entries is reached. Every operation runs under one
asyncio.Lock, so a write is never observed half-done and concurrent
writers to the same key are serialized.
"""

import asyncio
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import structlog

from ..config import settings

logger = structlog.get_logger(__name__)


class InMemoryCache:
    """
    Coroutine-safe TTL/LRU cache.

    Keys are namespaced with key_prefix. Values are stored as given;
    callers store immutable objects.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        default_ttl: Optional[int] = None,
        key_prefix: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_entries: Size bound (default: settings.cache_max_entries)
            default_ttl: TTL in seconds when set() gets none (default: settings.cache_ttl_seconds)
            key_prefix: Namespace prefix (default: settings.cache_key_prefix)
            clock: Monotonic time source (tests inject a fake)
        """
        self.max_entries = max_entries or settings.cache_max_entries
        self.default_ttl = default_ttl or settings.cache_ttl_seconds
        self.key_prefix = settings.cache_key_prefix if key_prefix is None else key_prefix
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()
        self._lock = asyncio.Lock()
        self._hits = 0
        self._misses = 0
        self._connected = True
        self.logger = logger.bind(component="memory_cache")

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _expired(self, expires_at: float) -> bool:
        return self._clock() >= expires_at

    async def get(self, key: str) -> Optional[Any]:
        """Value for key, or None when missing or expired."""
        async with self._lock:
            full_key = self._key(key)
            entry = self._entries.get(full_key)
            if entry is None:
                self._misses += 1
                return None
            value, expires_at = entry
            if self._expired(expires_at):
                del self._entries[full_key]
                self._misses += 1
                return None
            self._entries.move_to_end(full_key)
            self._hits += 1
            return value

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """Store value; evicts the least recently used entry when full."""
        ttl = ttl if ttl is not None else self.default_ttl
        async with self._lock:
            full_key = self._key(key)
            self._entries[full_key] = (value, self._clock() + ttl)
            self._entries.move_to_end(full_key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self.logger.debug("cache_evicted", key=evicted)

    async def has(self, key: str) -> bool:
        async with self._lock:
            entry = self._entries.get(self._key(key))
            return entry is not None and not self._expired(entry[1])

    async def delete(self, key: str) -> bool:
        async with self._lock:
            return self._entries.pop(self._key(key), None) is not None

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    async def get_or_set(
        self, key: str, factory: Callable[[], Awaitable[Any]], ttl: Optional[int] = None
    ) -> Any:
        """
        Cached value, or the awaited factory result (then stored).

        The factory runs outside the lock; concurrent callers may both run
        it and the last write wins.
        """
        value = await self.get(key)
        if value is not None:
            return value
        value = await factory()
        await self.set(key, value, ttl)
        return value

    async def stats(self) -> Dict[str, Any]:
        async with self._lock:
            total = self._hits + self._misses
            return {
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": self._hits / total if total else 0.0,
                "size": len(self._entries),
                "max_entries": self.max_entries,
            }

    async def ping(self) -> bool:
        return self._connected

    async def disconnect(self) -> None:
        async with self._lock:
            self._entries.clear()
            self._connected = False
        self.logger.info("cache_disconnected")
