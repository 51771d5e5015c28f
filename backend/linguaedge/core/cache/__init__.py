"""Cache module - TTL key/value store and the augmented page cache."""

from linguaedge.core.cache.page_cache import PageCache, PageCacheEntry
from linguaedge.core.cache.ttl_store import CacheEntry, TTLStore

__all__ = [
    "CacheEntry",
    "PageCache",
    "PageCacheEntry",
    "TTLStore",
]
