"""Response cache for augmented pages, keyed by (request URL, language)."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from linguaedge.core.cache.ttl_store import TTLStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageCacheEntry:
    """Exact bytes and headers of an augmented response."""

    status: int
    headers: tuple[tuple[str, str], ...] = field(default_factory=tuple)
    body: bytes = b""


class PageCache:
    """Page cache on top of a TTL store.

    The language is part of the key rather than the path because the
    canonical fetch to the origin uses the un-prefixed path. Read and
    write failures are logged and behave as a miss / no-op.
    """

    def __init__(self, store: TTLStore[PageCacheEntry]):
        self.store = store

    @staticmethod
    def key(url: str, language: str) -> tuple[str, str]:
        return (url, language)

    async def get(self, url: str, language: str) -> Optional[PageCacheEntry]:
        try:
            entry = await self.store.get(self.key(url, language))
        except Exception as e:
            logger.warning("Page cache read failed for %s [%s]: %s", url, language, e)
            return None
        if entry is None:
            logger.debug("Page cache miss: %s [%s]", url, language)
        else:
            logger.debug("Page cache hit: %s [%s]", url, language)
        return entry

    async def put(self, url: str, language: str, entry: PageCacheEntry) -> None:
        try:
            await self.store.set(self.key(url, language), entry)
        except Exception as e:
            logger.warning("Page cache write failed for %s [%s]: %s", url, language, e)
