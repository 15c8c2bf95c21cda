"""Cache - per-domain stores with TTL-based freshness"""

from .store import CacheEntry, CacheStats, DomainCacheStore, KeyedCacheStore
from .service import (
    CacheDomain,
    CacheService,
    build_ttl_table,
    complaint_key,
    report_key,
    KEYED_DOMAINS,
    ACTIVITY_DOMAINS,
    STATUS_BUCKET_DOMAINS,
    METADATA_DOMAINS,
)

__all__ = [
    "CacheEntry",
    "CacheStats",
    "DomainCacheStore",
    "KeyedCacheStore",
    "CacheDomain",
    "CacheService",
    "build_ttl_table",
    "complaint_key",
    "report_key",
    "KEYED_DOMAINS",
    "ACTIVITY_DOMAINS",
    "STATUS_BUCKET_DOMAINS",
    "METADATA_DOMAINS",
]
