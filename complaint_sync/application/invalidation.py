"""
Invalidation Coordinator
Marks cached domains stale after a mutation.

It only resets freshness timestamps; values stay in place and nothing is
refetched here. The next fetch-orchestrator pass over any screen that reads an
invalidated domain performs the network call.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from ..cache import CacheDomain, CacheService, complaint_key
from ..core.logging_framework import LogCategory
from ..events import (
    EventBus,
    ComplaintCreatedEvent,
    ComplaintUpdatedEvent,
    ComplaintDeletedEvent,
    ComplaintAssignedEvent,
    CommentEvent,
    UserUpdatedEvent,
    ComplaintTypeAddedEvent,
    NotificationEvent,
    SettingsUpdatedEvent,
)

logger = logging.getLogger(__name__)


# Domains whose content depends on the set of complaints or their state
COMPLAINT_DEPENDENTS = (
    CacheDomain.COMPLAINTS,
    CacheDomain.DASHBOARD_STATS,
    CacheDomain.SEARCH_RESULTS,
    CacheDomain.OPEN_COMPLAINTS,
    CacheDomain.PENDING_COMPLAINTS,
    CacheDomain.RESOLVED_COMPLAINTS,
    CacheDomain.REFUSED_COMPLAINTS,
    CacheDomain.ASSIGNED_COMPLAINTS,
    # Keyed by date range; every range is invalidated
    CacheDomain.REPORTS,
)

USER_DEPENDENTS = (
    CacheDomain.USERS,
    CacheDomain.PROVIDERS,
    CacheDomain.DASHBOARD_STATS,
)

Target = Tuple[CacheDomain, Optional[str]]


class InvalidationCoordinator:
    """
    One operation per mutation type.

    Example:
        coordinator = InvalidationCoordinator(cache)
        coordinator.complaint_updated("42")
        # every complaint list, detail["42"], dashboard stats and reports are stale
    """

    def __init__(self, cache: CacheService):
        self.cache = cache

    def _invalidate(self, reason: str, targets: Iterable[Target]) -> List[Target]:
        targets = list(targets)
        for domain, key in targets:
            self.cache.invalidate(domain, key)

        logger.info(
            f"Invalidated {len(targets)} cache entries after {reason}",
            extra={
                "category": LogCategory.INVALIDATION,
                "extra_data": {
                    "reason": reason,
                    "targets": [f"{d.value}[{k}]" if k else d.value for d, k in targets]
                }
            }
        )
        return targets

    def _complaint_targets(self, complaint_id: Optional[str]) -> List[Target]:
        targets: List[Target] = [(domain, None) for domain in COMPLAINT_DEPENDENTS]
        if complaint_id:
            targets.append((CacheDomain.COMPLAINT_DETAIL, complaint_key(complaint_id)))
        return targets

    # ==================== Complaints ====================

    def complaint_created(self) -> List[Target]:
        """A new complaint changes the list, the counters and any search result"""
        return self._invalidate("complaint_created", self._complaint_targets(None))

    def complaint_updated(self, complaint_id: str) -> List[Target]:
        return self._invalidate("complaint_updated", self._complaint_targets(complaint_id))

    def complaint_deleted(self, complaint_id: str) -> List[Target]:
        return self._invalidate("complaint_deleted", self._complaint_targets(complaint_id))

    def complaint_assigned(self, complaint_id: str) -> List[Target]:
        return self._invalidate("complaint_assigned", self._complaint_targets(complaint_id))

    # ==================== Comments ====================

    def comments_changed(self, complaint_id: str) -> List[Target]:
        """Only the commented complaint's thread goes stale"""
        key = complaint_key(complaint_id)
        return self._invalidate(f"comments_changed[{key}]", [(CacheDomain.COMMENTS, key)])

    # ==================== Users & metadata ====================

    def user_updated(self, user_id: str) -> List[Target]:
        """Role changes move users between the provider list and the admin head-count"""
        return self._invalidate(f"user_updated[{user_id}]", [(d, None) for d in USER_DEPENDENTS])

    def type_added(self) -> List[Target]:
        return self._invalidate("type_added", [(CacheDomain.TYPES, None)])

    def notifications_changed(self) -> List[Target]:
        return self._invalidate("notifications_changed", [(CacheDomain.NOTIFICATIONS, None)])

    def settings_updated(self) -> List[Target]:
        return self._invalidate("settings_updated", [(CacheDomain.SETTINGS, None)])

    def invalidate_all(self) -> None:
        self.cache.invalidate_all()
        logger.info("Invalidated every cache entry", extra={"category": LogCategory.INVALIDATION})

    # ==================== Event wiring ====================

    def attach(self, event_bus: EventBus) -> None:
        """Subscribe to the domain events that imply stale data"""
        event_bus.subscribe(ComplaintCreatedEvent, self._on_complaint_created)
        event_bus.subscribe(ComplaintUpdatedEvent, self._on_complaint_updated)
        event_bus.subscribe(ComplaintDeletedEvent, self._on_complaint_deleted)
        event_bus.subscribe(ComplaintAssignedEvent, self._on_complaint_assigned)
        event_bus.subscribe(UserUpdatedEvent, self._on_user_updated)
        event_bus.subscribe(ComplaintTypeAddedEvent, self._on_type_added)
        event_bus.subscribe(NotificationEvent, self._on_notifications_changed)
        event_bus.subscribe(CommentEvent, self._on_comments_changed)
        event_bus.subscribe(SettingsUpdatedEvent, self._on_settings_updated)

    def _on_complaint_created(self, event: ComplaintCreatedEvent) -> None:
        self.complaint_created()

    def _on_complaint_updated(self, event: ComplaintUpdatedEvent) -> None:
        self.complaint_updated(event.complaint_id)

    def _on_complaint_deleted(self, event: ComplaintDeletedEvent) -> None:
        self.complaint_deleted(event.complaint_id)

    def _on_complaint_assigned(self, event: ComplaintAssignedEvent) -> None:
        self.complaint_assigned(event.complaint_id)

    def _on_user_updated(self, event: UserUpdatedEvent) -> None:
        self.user_updated(event.user_id)

    def _on_type_added(self, event: ComplaintTypeAddedEvent) -> None:
        self.type_added()

    def _on_notifications_changed(self, event: NotificationEvent) -> None:
        self.notifications_changed()

    def _on_comments_changed(self, event: CommentEvent) -> None:
        self.comments_changed(event.complaint_id)

    def _on_settings_updated(self, event: SettingsUpdatedEvent) -> None:
        self.settings_updated()
