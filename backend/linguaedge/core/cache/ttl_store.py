"""In-process key/value store with per-entry TTL.

Stands in for the host-level cache: entries expire after their TTL and
the oldest entries are evicted once the store is full.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """Stored value with its absolute expiry time."""

    value: V
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class TTLStore(Generic[V]):
    """Async-safe TTL cache.

    Access is serialised with an ``asyncio.Lock`` so concurrent request
    handlers never observe a half-written entry.
    """

    def __init__(
        self,
        default_ttl: float,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the store.

        Args:
            default_ttl: TTL in seconds used when ``set`` gets no explicit TTL
            max_entries: Upper bound on live entries (None = unbounded)
            clock: Monotonic time source, injectable for tests
        """
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry[V]]" = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, key: Hashable) -> Optional[V]:
        """Return the live value for ``key`` or None on miss/expiry."""
        async with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return None
            return entry.value

    async def set(self, key: Hashable, value: V, ttl: Optional[float] = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry."""
        ttl = self.default_ttl if ttl is None else ttl
        async with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
            self._evict()

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> dict[str, Any]:
        """Entry counts for diagnostics."""
        now = self._clock()
        expired = sum(1 for entry in self._entries.values() if entry.is_expired(now))
        return {
            "total_entries": len(self._entries),
            "expired_entries": expired,
            "active_entries": len(self._entries) - expired,
        }

    def _evict(self) -> None:
        now = self._clock()
        for key in [k for k, entry in self._entries.items() if entry.is_expired(now)]:
            del self._entries[key]
        if self.max_entries is None:
            return
        while len(self._entries) > self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug("Evicted oldest cache entry: %s", key)
