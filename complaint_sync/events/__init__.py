"""
Event System
Domain events published after successful mutations, and the bus that carries them.
"""
from .domain_events import (
    DomainEvent,
    ComplaintEvent,
    ComplaintCreatedEvent,
    ComplaintUpdatedEvent,
    ComplaintDeletedEvent,
    ComplaintAssignedEvent,
    CommentEvent,
    CommentAddedEvent,
    CommentUpdatedEvent,
    CommentDeletedEvent,
    UserUpdatedEvent,
    ComplaintTypeAddedEvent,
    NotificationEvent,
    NotificationCreatedEvent,
    NotificationDeletedEvent,
    SettingsUpdatedEvent,
)
from .event_bus import EventBus, EventRecord

__all__ = [
    "DomainEvent",
    "ComplaintEvent",
    "ComplaintCreatedEvent",
    "ComplaintUpdatedEvent",
    "ComplaintDeletedEvent",
    "ComplaintAssignedEvent",
    "CommentEvent",
    "CommentAddedEvent",
    "CommentUpdatedEvent",
    "CommentDeletedEvent",
    "UserUpdatedEvent",
    "ComplaintTypeAddedEvent",
    "NotificationEvent",
    "NotificationCreatedEvent",
    "NotificationDeletedEvent",
    "SettingsUpdatedEvent",
    "EventBus",
    "EventRecord",
]
