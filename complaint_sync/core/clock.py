"""
Clock abstraction
Injectable time source so freshness checks are deterministic under test.
"""
import time
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Union


class Clock(ABC):
    """Source of the current instant"""

    @abstractmethod
    def now(self) -> float:
        """Current time in epoch seconds"""
        pass

    def utcnow(self) -> datetime:
        """Current time as an aware UTC datetime"""
        return datetime.fromtimestamp(self.now(), tz=timezone.utc)


class SystemClock(Clock):
    """Wall-clock time"""

    def now(self) -> float:
        return time.time()


class ManualClock(Clock):
    """
    Clock that only moves when told to.

    Example:
        clock = ManualClock(start=1_700_000_000)
        store = DomainCacheStore("stats", ttl=timedelta(minutes=5), clock=clock)
        store.set(stats)
        clock.advance(timedelta(minutes=5))
        assert store.is_stale()
    """

    def __init__(self, start: float = 1_700_000_000.0):
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def advance(self, delta: Union[float, timedelta]) -> None:
        if isinstance(delta, timedelta):
            delta = delta.total_seconds()
        self._now += float(delta)

    def set(self, value: float) -> None:
        self._now = float(value)
