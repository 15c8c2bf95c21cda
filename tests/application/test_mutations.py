"""
Tests for the Mutation Service

Verifies that successful writes publish events (and so invalidate caches)
while failed writes raise to the caller and leave every cache untouched.
"""
import pytest
from unittest.mock import AsyncMock


def _warm(cache):
    from complaint_sync.cache import CacheDomain, KEYED_DOMAINS

    for domain in CacheDomain:
        if domain not in KEYED_DOMAINS:
            cache[domain].set([])
    cache.complaint_detail.set("42", "detail")
    cache.comments.set("42", ())


def _nothing_stale(cache):
    from complaint_sync.cache import CacheDomain, KEYED_DOMAINS

    slots_fresh = all(
        cache[domain].entry.fetched_at is not None
        for domain in CacheDomain if domain not in KEYED_DOMAINS
    )
    return (
        slots_fresh
        and cache.complaint_detail.entry("42").fetched_at is not None
        and cache.comments.entry("42").fetched_at is not None
    )


class TestSuccessfulMutations:
    """Tests for event publication after a write"""

    @pytest.mark.asyncio
    async def test_update_publishes_event(self, mutations, mock_api, event_bus):
        from complaint_sync.events import ComplaintUpdatedEvent

        response = await mutations.update_complaint("CMP-42", {"priority_id": 3, "description": "x"})

        assert response["status"] is True
        assert mock_api.calls("update_complaint")[0]["args"]["complaint_id"] == "42"

        [record] = event_bus.get_history(ComplaintUpdatedEvent)
        assert record.event.complaint_id == "42"
        assert record.event.changed_fields == ["description", "priority_id"]

    @pytest.mark.asyncio
    async def test_update_invalidates(self, mutations, cache):
        from complaint_sync.cache import CacheDomain

        _warm(cache)
        await mutations.update_complaint("42", {"description": "x"})

        assert cache.is_stale(CacheDomain.COMPLAINTS)
        assert cache.complaint_detail.is_stale("42")

    @pytest.mark.asyncio
    async def test_create_counts_attachments(self, mutations, mock_api, event_bus):
        from complaint_sync.domain.ports import UploadFile
        from complaint_sync.events import ComplaintCreatedEvent

        files = [UploadFile("a.jpg", b"\xff\xd8", "image/jpeg"), UploadFile("b.png", b"\x89PNG", "image/png")]
        await mutations.create_complaint({"description": "Late again", "type_id": 1}, files)

        [record] = event_bus.get_history(ComplaintCreatedEvent)
        assert record.event.attachment_count == 2
        assert mock_api.calls("create_complaint")[0]["args"]["files"] == files

    @pytest.mark.asyncio
    async def test_assign(self, mutations, mock_api, event_bus):
        from complaint_sync.events import ComplaintAssignedEvent

        await mutations.assign_complaint("CMP-43", 3, remarks="Please call the client")

        args = mock_api.calls("assign_complaint")[0]["args"]
        assert args == {"complaint_id": "43", "handler_id": "3", "remarks": "Please call the client"}
        assert event_bus.get_history(ComplaintAssignedEvent)[0].event.handler_id == "3"

    @pytest.mark.asyncio
    async def test_update_user(self, mutations, cache):
        from complaint_sync.cache import CacheDomain

        _warm(cache)
        await mutations.update_user("7", role_id=1)

        assert cache.is_stale(CacheDomain.PROVIDERS)
        assert not cache.is_stale(CacheDomain.COMPLAINTS)

    @pytest.mark.asyncio
    async def test_add_type_strips_name(self, mutations, mock_api):
        await mutations.add_type("  Billing  ")

        assert mock_api.calls("add_type")[0]["args"]["name"] == "Billing"

    @pytest.mark.asyncio
    async def test_notifications(self, mutations, cache):
        from complaint_sync.cache import CacheDomain

        _warm(cache)
        await mutations.add_notification("Maintenance", "Portal offline at 22:00")
        assert cache.is_stale(CacheDomain.NOTIFICATIONS)

        cache[CacheDomain.NOTIFICATIONS].set([])
        await mutations.delete_notification(9)
        assert cache.is_stale(CacheDomain.NOTIFICATIONS)

    @pytest.mark.asyncio
    async def test_add_comment(self, mutations, mock_api, cache, event_bus):
        from complaint_sync.cache import CacheDomain
        from complaint_sync.events import CommentAddedEvent

        _warm(cache)
        await mutations.add_comment("CMP-42", 2, "  Called the client  ")

        args = mock_api.calls("add_comment")[0]["args"]
        assert args == {"complaint_id": "42", "author_id": "2", "message": "Called the client"}
        assert event_bus.get_history(CommentAddedEvent)[0].event.complaint_id == "42"
        assert cache.comments.is_stale("42")
        assert not cache.is_stale(CacheDomain.COMPLAINTS)

    @pytest.mark.asyncio
    async def test_update_and_delete_comment(self, mutations, mock_api, cache):
        _warm(cache)
        await mutations.update_comment("42", "2", "Called twice")
        assert cache.comments.is_stale("42")

        cache.comments.set("42", ())
        await mutations.delete_comment("42", "2")

        assert cache.comments.is_stale("42")
        assert mock_api.calls("delete_comment")[0]["args"] == {"complaint_id": "42", "author_id": "2"}

    @pytest.mark.asyncio
    async def test_update_settings_sends_flags(self, mutations, mock_api, cache, event_bus):
        from complaint_sync.cache import CacheDomain
        from complaint_sync.events import SettingsUpdatedEvent

        _warm(cache)
        await mutations.update_settings(sms_notifications=True)

        assert mock_api.calls("update_settings")[0]["args"]["values"] == {"sms_notifications": 1}
        assert event_bus.get_history(SettingsUpdatedEvent)[0].event.changed_fields == ["sms_notifications"]
        assert cache.is_stale(CacheDomain.SETTINGS)
        assert not cache.is_stale(CacheDomain.NOTIFICATIONS)

        await mutations.update_settings(email_notifications=False, sms_notifications=False)
        assert mock_api.calls("update_settings")[1]["args"]["values"] == {
            "email_notifications": 0, "sms_notifications": 0
        }


class TestFailedMutations:
    """Tests for error propagation"""

    @pytest.mark.asyncio
    async def test_transport_error_raised(self, mutations, mock_api, cache, event_bus):
        from complaint_sync.core.errors import MutationError, TransportError

        _warm(cache)
        cause = TransportError("update-complaint", status_code=500)
        mock_api.fail("update_complaint", cause)

        with pytest.raises(MutationError) as exc_info:
            await mutations.update_complaint("42", {"description": "x"})

        assert exc_info.value.operation == "update_complaint"
        assert exc_info.value.cause is cause
        assert exc_info.value.details["status_code"] == 500
        assert _nothing_stale(cache)
        assert event_bus.get_history() == []

    @pytest.mark.asyncio
    async def test_rejected_body_raised(self, mutations, mock_api, cache):
        from complaint_sync.core.errors import ErrorCode, MutationRejectedError

        _warm(cache)
        mock_api.set_response("update_user", {"status": False, "message": "Email already taken"})

        with pytest.raises(MutationRejectedError) as exc_info:
            await mutations.update_user("7", email="dup@example.com")

        assert exc_info.value.message == "Email already taken"
        assert exc_info.value.code == ErrorCode.MUTATION_REJECTED
        assert _nothing_stale(cache)

    @pytest.mark.asyncio
    async def test_success_false_rejected(self, mutations, mock_api):
        from complaint_sync.core.errors import MutationRejectedError

        mock_api.set_response("delete_complaint", {"success": False})

        with pytest.raises(MutationRejectedError, match="rejected"):
            await mutations.delete_complaint("42")

    @pytest.mark.asyncio
    async def test_update_user_requires_a_change(self, mutations, mock_api):
        from complaint_sync.core.errors import MutationError

        with pytest.raises(MutationError):
            await mutations.update_user("7")

        assert mock_api.call_count("update_user") == 0

    @pytest.mark.asyncio
    async def test_blank_type_rejected_locally(self, mutations, mock_api):
        from complaint_sync.core.errors import MutationError

        with pytest.raises(MutationError):
            await mutations.add_type("   ")

        assert mock_api.call_count("add_type") == 0

    @pytest.mark.asyncio
    async def test_blank_comment_rejected_locally(self, mutations, mock_api):
        from complaint_sync.core.errors import MutationError

        with pytest.raises(MutationError):
            await mutations.add_comment("42", "2", "  ")
        with pytest.raises(MutationError):
            await mutations.update_comment("42", "2", "")

        assert mock_api.call_count("add_comment") == 0
        assert mock_api.call_count("update_comment") == 0

    @pytest.mark.asyncio
    async def test_update_settings_requires_a_change(self, mutations, mock_api):
        from complaint_sync.core.errors import MutationError

        with pytest.raises(MutationError):
            await mutations.update_settings()

        assert mock_api.call_count("update_settings") == 0

    @pytest.mark.asyncio
    async def test_failed_comment_keeps_thread_fresh(self, mutations, mock_api, cache):
        from complaint_sync.core.errors import MutationError, TransportError

        _warm(cache)
        mock_api.fail("add_comment", TransportError("add-complaint-comment", status_code=500))

        with pytest.raises(MutationError):
            await mutations.add_comment("42", "2", "hello")

        assert _nothing_stale(cache)

    @pytest.mark.asyncio
    async def test_non_transport_errors_propagate_unchanged(self, event_bus):
        from complaint_sync.application import MutationService

        api = AsyncMock()
        api.delete_notification.side_effect = RuntimeError("bug")
        service = MutationService(api, event_bus)

        with pytest.raises(RuntimeError):
            await service.delete_notification("9")

        assert event_bus.get_history() == []

    @pytest.mark.asyncio
    async def test_empty_body_counts_as_success(self, event_bus):
        from complaint_sync.application import MutationService
        from complaint_sync.events import NotificationCreatedEvent

        api = AsyncMock()
        api.add_notification.return_value = None
        service = MutationService(api, event_bus)

        assert await service.add_notification("t", "b") is None
        api.add_notification.assert_awaited_once_with("t", "b")
        assert len(event_bus.get_history(NotificationCreatedEvent)) == 1
