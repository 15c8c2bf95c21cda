"""
Cache Service
Owns one store per cached domain. Constructed explicitly and passed to the
components that need it, so every test (and every session) gets its own.
"""
import logging
from enum import Enum
from typing import Any, Dict, Optional

from ..core.clock import Clock, SystemClock
from ..core.config import PortalSettings, get_portal_settings
from ..core.logging_framework import LogCategory
from ..domain.entities import complaint_key
from .store import DomainCacheStore, KeyedCacheStore

logger = logging.getLogger(__name__)


class CacheDomain(str, Enum):
    """One category of cached data"""
    DASHBOARD_STATS = "dashboard_stats"
    COMPLAINTS = "complaints"
    COMPLAINT_DETAIL = "complaint_detail"
    SEARCH_RESULTS = "search_results"
    OPEN_COMPLAINTS = "open_complaints"
    PENDING_COMPLAINTS = "pending_complaints"
    RESOLVED_COMPLAINTS = "resolved_complaints"
    REFUSED_COMPLAINTS = "refused_complaints"
    ASSIGNED_COMPLAINTS = "assigned_complaints"
    COMMENTS = "comments"
    REPORTS = "reports"
    SETTINGS = "settings"
    USERS = "users"
    NOTIFICATIONS = "notifications"
    WORKERS = "workers"
    CLIENTS = "clients"
    PROVIDERS = "providers"
    STATUSES = "statuses"
    TYPES = "types"
    PRIORITIES = "priorities"
    SORT_OPTIONS = "sort_options"
    ROLES = "roles"


# Domains cached per key rather than in a single slot
KEYED_DOMAINS = frozenset({
    CacheDomain.COMPLAINT_DETAIL,
    CacheDomain.COMMENTS,
    CacheDomain.REPORTS,
})

# Status-bucket lists, one per canonical status
STATUS_BUCKET_DOMAINS = frozenset({
    CacheDomain.OPEN_COMPLAINTS,
    CacheDomain.PENDING_COMPLAINTS,
    CacheDomain.RESOLVED_COMPLAINTS,
    CacheDomain.REFUSED_COMPLAINTS,
})

# Other users' activity, refreshed more often
ACTIVITY_DOMAINS = frozenset({
    CacheDomain.COMMENTS,
    CacheDomain.ASSIGNED_COMPLAINTS,
})

METADATA_DOMAINS = frozenset({
    CacheDomain.STATUSES,
    CacheDomain.TYPES,
    CacheDomain.PRIORITIES,
    CacheDomain.SORT_OPTIONS,
    CacheDomain.ROLES,
})


def report_key(start_date: str, end_date: str) -> str:
    """Report key: the inclusive date range"""
    return f"{start_date.strip()}..{end_date.strip()}"


def build_ttl_table(settings: Optional[PortalSettings] = None) -> Dict[CacheDomain, int]:
    """
    TTL in seconds for every domain.

    Defaults: 60s for comments and other providers' assignments, 120s for
    notifications, 600s for reference metadata, 300s for everything else.
    """
    settings = settings or get_portal_settings()

    table = {}
    for domain in CacheDomain:
        if domain in ACTIVITY_DOMAINS:
            table[domain] = settings.ACTIVITY_TTL_SECONDS
        elif domain == CacheDomain.NOTIFICATIONS:
            table[domain] = settings.NOTIFICATIONS_TTL_SECONDS
        elif domain in METADATA_DOMAINS:
            table[domain] = settings.METADATA_TTL_SECONDS
        else:
            table[domain] = settings.CACHE_TTL_SECONDS
    return table


class CacheService:
    """
    Session-scoped set of domain stores.

    Example:
        cache = CacheService(settings, clock=ManualClock())
        cache.store(CacheDomain.DASHBOARD_STATS).set(stats)
        cache.complaint_detail.set("42", complaint)
        cache.keyed(CacheDomain.COMMENTS).set("42", comments)
    """

    def __init__(
        self,
        settings: Optional[PortalSettings] = None,
        clock: Optional[Clock] = None
    ):
        self.clock = clock or SystemClock()
        self.ttls = build_ttl_table(settings)

        self._stores: Dict[CacheDomain, DomainCacheStore] = {
            domain: DomainCacheStore(domain.value, self.ttls[domain], self.clock)
            for domain in CacheDomain
            if domain not in KEYED_DOMAINS
        }
        self._keyed: Dict[CacheDomain, KeyedCacheStore] = {
            domain: KeyedCacheStore(domain.value, self.ttls[domain], self.clock)
            for domain in CacheDomain
            if domain in KEYED_DOMAINS
        }

    def store(self, domain: CacheDomain) -> DomainCacheStore:
        """Single-slot store for a domain"""
        if domain in KEYED_DOMAINS:
            raise KeyError(f"{domain.value} is keyed; use keyed()")
        return self._stores[domain]

    def keyed(self, domain: CacheDomain) -> KeyedCacheStore:
        """Per-key store for a keyed domain"""
        if domain not in KEYED_DOMAINS:
            raise KeyError(f"{domain.value} is a single slot; use store()")
        return self._keyed[domain]

    @property
    def complaint_detail(self) -> KeyedCacheStore:
        return self._keyed[CacheDomain.COMPLAINT_DETAIL]

    @property
    def comments(self) -> KeyedCacheStore:
        return self._keyed[CacheDomain.COMMENTS]

    @property
    def reports(self) -> KeyedCacheStore:
        return self._keyed[CacheDomain.REPORTS]

    def __getitem__(self, domain: CacheDomain) -> DomainCacheStore:
        return self.store(domain)

    def get(self, domain: CacheDomain) -> Any:
        return self.store(domain).get()

    def is_stale(self, domain: CacheDomain) -> bool:
        return self.store(domain).is_stale()

    def invalidate(self, domain: CacheDomain, key: Optional[str] = None) -> None:
        """
        Mark a domain stale. For keyed domains, `key` selects one entry and
        omitting it invalidates every key.
        """
        if domain in KEYED_DOMAINS:
            if key is None:
                self._keyed[domain].invalidate_all()
            else:
                self._keyed[domain].invalidate(key)
        else:
            self._stores[domain].invalidate()

        logger.debug(
            f"Invalidated {domain.value}" + (f"[{key}]" if key else ""),
            extra={"category": LogCategory.CACHE}
        )

    def invalidate_all(self) -> None:
        for store in self._stores.values():
            store.invalidate()
        for keyed in self._keyed.values():
            keyed.invalidate_all()

    def clear(self) -> None:
        """Drop every value, e.g. at logout"""
        for store in self._stores.values():
            store.clear()
        for keyed in self._keyed.values():
            keyed.clear()
        logger.info("Cache cleared", extra={"category": LogCategory.CACHE})

    def get_stats(self) -> Dict[str, Any]:
        stats = {domain.value: store.stats.to_dict() for domain, store in self._stores.items()}
        for domain, keyed in self._keyed.items():
            stats[domain.value] = keyed.stats.to_dict()
        return stats
