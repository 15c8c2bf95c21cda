"""
Domain Cache Stores with TTL
In-memory, per-domain slots with freshness tracking.

Each store owns one category of cached data (dashboard stats, complaint list,
reference metadata, ...). Writes replace the whole entry object in a single
assignment, so a reader never sees a half-updated value. There is no eviction
and no capacity bound; entries live for the client session.
"""
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

from ..core.clock import Clock, SystemClock
from ..core.logging_framework import LogCategory

logger = logging.getLogger(__name__)

V = TypeVar('V')

TTL = Union[float, int, timedelta]


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """
    Cached value plus the instant it was fetched.

    `fetched_at is None` means never populated or invalidated; such an entry is
    stale regardless of TTL. Invalidation keeps the value so it can still be
    shown while a refetch is in flight.
    """
    value: Optional[V] = None
    fetched_at: Optional[float] = None

    def age(self, now: float) -> Optional[float]:
        if self.fetched_at is None:
            return None
        return now - self.fetched_at

    def is_stale(self, now: float, ttl_seconds: float) -> bool:
        if self.fetched_at is None:
            return True
        return now - self.fetched_at >= ttl_seconds


EMPTY_ENTRY: CacheEntry = CacheEntry()


@dataclass
class CacheStats:
    """Freshness check counters"""
    hits: int = 0
    misses: int = 0
    writes: int = 0
    invalidations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "writes": self.writes,
            "invalidations": self.invalidations,
            "hit_rate": round(self.hit_rate, 4),
        }


def _ttl_seconds(ttl: TTL) -> float:
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if seconds <= 0:
        raise ValueError("TTL must be positive")
    return seconds


class DomainCacheStore(Generic[V]):
    """
    Single-slot cache for one domain.

    Example:
        store = DomainCacheStore[DashboardStats]("stats", ttl=timedelta(minutes=5))
        store.is_stale()   # True, nothing fetched yet
        store.set(stats)
        store.is_stale()   # False until five minutes pass
    """

    def __init__(self, name: str, ttl: TTL, clock: Optional[Clock] = None):
        self.name = name
        self.ttl_seconds = _ttl_seconds(ttl)
        self.clock = clock or SystemClock()
        self._entry: CacheEntry[V] = EMPTY_ENTRY
        self._stats = CacheStats()

    @property
    def entry(self) -> CacheEntry[V]:
        return self._entry

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def set(self, value: V) -> None:
        """Replace the value and stamp it with the current time"""
        self._entry = CacheEntry(value=value, fetched_at=self.clock.now())
        self._stats.writes += 1

    def get(self) -> Optional[V]:
        """Stored value, or None if never set. Stale values are still returned."""
        return self._entry.value

    def is_stale(self) -> bool:
        stale = self._entry.is_stale(self.clock.now(), self.ttl_seconds)
        if stale:
            self._stats.misses += 1
            logger.debug(f"Cache MISS: {self.name}", extra={"category": LogCategory.CACHE})
        else:
            self._stats.hits += 1
            logger.debug(f"Cache HIT: {self.name}", extra={"category": LogCategory.CACHE})
        return stale

    def invalidate(self) -> None:
        """Mark stale, keeping the current value"""
        if self._entry.fetched_at is not None:
            self._entry = CacheEntry(value=self._entry.value, fetched_at=None)
        self._stats.invalidations += 1

    def age(self) -> Optional[float]:
        """Seconds since the last write, None when stale by invalidation or never set"""
        return self._entry.age(self.clock.now())

    def clear(self) -> None:
        """Drop the value as well as its timestamp"""
        self._entry = EMPTY_ENTRY

    def __repr__(self) -> str:
        return f"DomainCacheStore(name={self.name!r}, ttl={self.ttl_seconds}s, fetched_at={self._entry.fetched_at})"


class KeyedCacheStore(Generic[V]):
    """
    Per-key cache for one domain (e.g. complaint detail by id).

    Each key has its own timestamp. A key that was never set is stale.
    """

    def __init__(self, name: str, ttl: TTL, clock: Optional[Clock] = None):
        self.name = name
        self.ttl_seconds = _ttl_seconds(ttl)
        self.clock = clock or SystemClock()
        self._entries: Dict[str, CacheEntry[V]] = {}
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def entry(self, key: str) -> CacheEntry[V]:
        return self._entries.get(key, EMPTY_ENTRY)

    def set(self, key: str, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, fetched_at=self.clock.now())
        self._stats.writes += 1

    def get(self, key: str) -> Optional[V]:
        return self.entry(key).value

    def is_stale(self, key: str) -> bool:
        stale = self.entry(key).is_stale(self.clock.now(), self.ttl_seconds)
        if stale:
            self._stats.misses += 1
            logger.debug(f"Cache MISS: {self.name}[{key}]", extra={"category": LogCategory.CACHE})
        else:
            self._stats.hits += 1
            logger.debug(f"Cache HIT: {self.name}[{key}]", extra={"category": LogCategory.CACHE})
        return stale

    def invalidate(self, key: str) -> None:
        current = self._entries.get(key)
        if current is not None and current.fetched_at is not None:
            self._entries[key] = CacheEntry(value=current.value, fetched_at=None)
        self._stats.invalidations += 1

    def invalidate_all(self) -> None:
        for key, current in list(self._entries.items()):
            if current.fetched_at is not None:
                self._entries[key] = CacheEntry(value=current.value, fetched_at=None)
        self._stats.invalidations += 1

    def age(self, key: str) -> Optional[float]:
        return self.entry(key).age(self.clock.now())

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def clear(self) -> None:
        self._entries = {}

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"KeyedCacheStore(name={self.name!r}, ttl={self.ttl_seconds}s, keys={len(self._entries)})"
