"""
Event Bus
Carries mutation events from the mutation service to cache invalidation.
"""
import asyncio
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Deque, Dict, List, Optional, Type, Union

from ..core.logging_framework import LogCategory
from .domain_events import DomainEvent

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], Union[None, Awaitable[None]]]


@dataclass
class EventRecord:
    """Outcome of one publish call"""
    event: DomainEvent
    published_at: datetime
    handlers_called: int = 0
    handlers_succeeded: int = 0
    handlers_failed: int = 0
    errors: List[str] = field(default_factory=list)


class EventBus:
    """
    In-process bus keyed by event class.

    A handler registered for a class also receives its subclasses. Handlers
    run inside `publish` in subscription order, so every subscriber has seen
    the event once `publish` returns. A handler that raises is logged and
    counted; the remaining handlers still run.
    """

    def __init__(self, max_history: int = 1000):
        self._handlers: Dict[Type[DomainEvent], List[Handler]] = {}
        self._history: Deque[EventRecord] = deque(maxlen=max_history)

    def subscribe(self, event_type: Type[DomainEvent], handler: Handler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def _handlers_for(self, event: DomainEvent) -> List[Handler]:
        matched = []
        for event_class in type(event).__mro__:
            matched.extend(self._handlers.get(event_class, ()))
        return matched

    async def publish(self, event: DomainEvent) -> EventRecord:
        record = EventRecord(event=event, published_at=datetime.now(timezone.utc))

        for handler in self._handlers_for(event):
            record.handlers_called += 1
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
                record.handlers_succeeded += 1
            except Exception as e:
                record.handlers_failed += 1
                record.errors.append(f"{type(e).__name__}: {e}")
                logger.error(
                    f"Handler {getattr(handler, '__name__', handler)!r} failed for {event.event_type}: {e}",
                    extra={"category": LogCategory.INVALIDATION}
                )

        self._history.append(record)
        return record

    def get_history(
        self,
        event_type: Optional[Type[DomainEvent]] = None,
        limit: int = 100
    ) -> List[EventRecord]:
        """Published events, most recent first"""
        records = [
            r for r in reversed(self._history)
            if event_type is None or isinstance(r.event, event_type)
        ]
        return records[:limit]
