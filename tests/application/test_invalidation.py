"""
Tests for the Invalidation Coordinator
"""
import pytest


def _fill(cache):
    """Populate every single-slot domain and two complaint details"""
    from complaint_sync.cache import CacheDomain, KEYED_DOMAINS

    for domain in CacheDomain:
        if domain not in KEYED_DOMAINS:
            cache[domain].set(f"{domain.value}-value")
    cache.complaint_detail.set("42", "detail-42")
    cache.complaint_detail.set("43", "detail-43")
    cache.comments.set("42", "comments-42")
    cache.comments.set("43", "comments-43")
    cache.reports.set("2024-03-01..2024-03-31", "report-march")


COMPLAINT_LISTS = {
    "complaints",
    "dashboard_stats",
    "search_results",
    "open_complaints",
    "pending_complaints",
    "resolved_complaints",
    "refused_complaints",
    "assigned_complaints",
}


def _stale_domains(cache):
    from complaint_sync.cache import CacheDomain, KEYED_DOMAINS

    return {
        domain for domain in CacheDomain
        if domain not in KEYED_DOMAINS and cache[domain].entry.fetched_at is None
    }


class TestComplaintInvalidation:
    """Complaint mutations mark list, stats, search and the detail stale"""

    def test_complaint_updated(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        InvalidationCoordinator(cache).complaint_updated("CMP-42")

        assert {d.value for d in _stale_domains(cache)} == COMPLAINT_LISTS
        assert cache.complaint_detail.is_stale("42")
        assert not cache.complaint_detail.is_stale("43")
        assert cache.reports.is_stale("2024-03-01..2024-03-31")
        assert not cache.comments.is_stale("42")

    def test_values_survive_invalidation(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        InvalidationCoordinator(cache).complaint_deleted("42")

        assert cache.get(CacheDomain.COMPLAINTS) == "complaints-value"
        assert cache.complaint_detail.get("42") == "detail-42"

    def test_complaint_created_has_no_detail(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        targets = InvalidationCoordinator(cache).complaint_created()

        assert (CacheDomain.COMPLAINT_DETAIL, None) not in targets
        assert not cache.complaint_detail.is_stale("42")
        assert CacheDomain.DASHBOARD_STATS in _stale_domains(cache)

    def test_complaint_assigned(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        targets = InvalidationCoordinator(cache).complaint_assigned("43")

        assert (CacheDomain.COMPLAINT_DETAIL, "43") in targets
        assert cache.complaint_detail.is_stale("43")

    def test_metadata_untouched(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        InvalidationCoordinator(cache).complaint_updated("42")

        for domain in (CacheDomain.STATUSES, CacheDomain.TYPES, CacheDomain.USERS, CacheDomain.NOTIFICATIONS):
            assert not cache.is_stale(domain)


class TestOtherInvalidation:
    """User, type, notification, comment and settings mutations"""

    def test_user_updated(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        InvalidationCoordinator(cache).user_updated("7")

        assert _stale_domains(cache) == {
            CacheDomain.USERS, CacheDomain.PROVIDERS, CacheDomain.DASHBOARD_STATS
        }

    def test_type_added(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        InvalidationCoordinator(cache).type_added()

        assert _stale_domains(cache) == {CacheDomain.TYPES}

    def test_notifications_changed(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        InvalidationCoordinator(cache).notifications_changed()

        assert _stale_domains(cache) == {CacheDomain.NOTIFICATIONS}

    def test_comments_changed(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        targets = InvalidationCoordinator(cache).comments_changed("CMP-42")

        assert targets == [(CacheDomain.COMMENTS, "42")]
        assert cache.comments.is_stale("42")
        assert not cache.comments.is_stale("43")
        assert _stale_domains(cache) == set()

    def test_settings_updated(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain

        _fill(cache)
        InvalidationCoordinator(cache).settings_updated()

        assert _stale_domains(cache) == {CacheDomain.SETTINGS}

    def test_invalidate_all(self, cache):
        from complaint_sync.application import InvalidationCoordinator
        from complaint_sync.cache import CacheDomain, KEYED_DOMAINS

        _fill(cache)
        InvalidationCoordinator(cache).invalidate_all()

        assert _stale_domains(cache) == set(CacheDomain) - KEYED_DOMAINS
        assert cache.complaint_detail.is_stale("43")
        assert cache.comments.is_stale("43")
        assert cache.reports.is_stale("2024-03-01..2024-03-31")

    def test_does_not_fetch(self, cache, mock_api):
        from complaint_sync.application import InvalidationCoordinator

        InvalidationCoordinator(cache).complaint_updated("42")

        assert mock_api.calls() == []


class TestEventWiring:
    """Coordinator reacting to published domain events"""

    @pytest.mark.asyncio
    async def test_events_map_to_operations(self, cache, event_bus):
        from complaint_sync.cache import CacheDomain
        from complaint_sync.events import (
            ComplaintUpdatedEvent, UserUpdatedEvent, NotificationDeletedEvent
        )

        _fill(cache)
        await event_bus.publish(ComplaintUpdatedEvent(complaint_id="42"))
        await event_bus.publish(UserUpdatedEvent(user_id="7", role_id=1))
        await event_bus.publish(NotificationDeletedEvent(notification_id="9"))

        assert {d.value for d in _stale_domains(cache)} == COMPLAINT_LISTS | {
            "users", "providers", "notifications"
        }
        assert cache.complaint_detail.is_stale("42")

    @pytest.mark.asyncio
    async def test_type_added_event(self, cache, event_bus):
        from complaint_sync.cache import CacheDomain
        from complaint_sync.events import ComplaintTypeAddedEvent

        _fill(cache)
        record = await event_bus.publish(ComplaintTypeAddedEvent(type_name="Billing"))

        assert record.handlers_succeeded == 1
        assert _stale_domains(cache) == {CacheDomain.TYPES}

    @pytest.mark.asyncio
    async def test_comment_and_settings_events(self, cache, event_bus):
        from complaint_sync.cache import CacheDomain
        from complaint_sync.events import CommentDeletedEvent, SettingsUpdatedEvent

        _fill(cache)
        await event_bus.publish(CommentDeletedEvent(complaint_id="43", author_id="1"))
        await event_bus.publish(SettingsUpdatedEvent(changed_fields=["email_notifications"]))

        assert cache.comments.is_stale("43")
        assert not cache.comments.is_stale("42")
        assert _stale_domains(cache) == {CacheDomain.SETTINGS}
