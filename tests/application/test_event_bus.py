"""
Tests for the Event Bus
"""
import pytest


class TestEventBus:
    """Tests for subscription and publication"""

    @pytest.mark.asyncio
    async def test_base_class_subscription_receives_subclasses(self):
        from complaint_sync.events import EventBus, ComplaintEvent, ComplaintDeletedEvent

        bus = EventBus()
        received = []
        bus.subscribe(ComplaintEvent, received.append)

        await bus.publish(ComplaintDeletedEvent(complaint_id="42"))

        assert [e.complaint_id for e in received] == ["42"]

    @pytest.mark.asyncio
    async def test_sync_and_async_handlers_in_order(self):
        from complaint_sync.events import EventBus, ComplaintCreatedEvent

        bus = EventBus()
        order = []

        async def second(event):
            order.append("second")

        bus.subscribe(ComplaintCreatedEvent, lambda e: order.append("first"))
        bus.subscribe(ComplaintCreatedEvent, second)

        record = await bus.publish(ComplaintCreatedEvent())

        assert order == ["first", "second"]
        assert record.handlers_succeeded == 2

    @pytest.mark.asyncio
    async def test_failing_handler_isolated(self):
        from complaint_sync.events import EventBus, NotificationCreatedEvent

        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        bus.subscribe(NotificationCreatedEvent, broken)
        bus.subscribe(NotificationCreatedEvent, seen.append)

        record = await bus.publish(NotificationCreatedEvent(title="t"))

        assert len(seen) == 1
        assert record.handlers_called == 2
        assert record.handlers_failed == 1
        assert record.errors == ["RuntimeError: boom"]

    @pytest.mark.asyncio
    async def test_unsubscribed_event_still_recorded(self):
        from complaint_sync.events import EventBus, SettingsUpdatedEvent

        bus = EventBus()
        record = await bus.publish(SettingsUpdatedEvent(changed_fields=["sms_notifications"]))

        assert record.handlers_called == 0
        assert bus.get_history() == [record]

    @pytest.mark.asyncio
    async def test_history_bounded_and_filtered(self):
        from complaint_sync.events import EventBus, UserUpdatedEvent, ComplaintTypeAddedEvent

        bus = EventBus(max_history=2)

        await bus.publish(UserUpdatedEvent(user_id="1"))
        await bus.publish(ComplaintTypeAddedEvent(type_name="A"))
        await bus.publish(ComplaintTypeAddedEvent(type_name="B"))

        assert [r.event.type_name for r in bus.get_history()] == ["B", "A"]
        assert bus.get_history(UserUpdatedEvent) == []
        assert len(bus.get_history(limit=1)) == 1

    def test_event_to_dict(self):
        from complaint_sync.events import ComplaintAssignedEvent, CommentAddedEvent

        event = ComplaintAssignedEvent(complaint_id="42", handler_id="3")
        data = event.to_dict()

        assert data["event_type"] == "ComplaintAssignedEvent"
        assert data["data"] == {"complaint_id": "42", "handler_id": "3"}

        comment = CommentAddedEvent(complaint_id="42", author_id="2")
        assert comment.to_dict()["data"] == {"complaint_id": "42", "author_id": "2"}
