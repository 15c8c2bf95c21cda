"""
Domain Events
Raised by the mutation service after a backend write succeeds.

Subscribers (the invalidation coordinator, UI refreshers) react without the
mutating code knowing about them.
"""
from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid


@dataclass
class DomainEvent:
    """
    Base class for all domain events.

    Domain events represent something that already happened on the backend.
    """

    # Event metadata
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Context
    correlation_id: Optional[str] = None

    # Additional data
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.event_type:
            self.event_type = self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary"""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat(),
            "correlation_id": self.correlation_id,
            "metadata": self.metadata,
            "data": self._get_data()
        }

    def _get_data(self) -> Dict[str, Any]:
        """Get event-specific data. Override in subclasses."""
        return {}


# ==================== Complaint Events ====================

@dataclass
class ComplaintEvent(DomainEvent):
    """Base class for complaint-related events"""
    complaint_id: Optional[str] = None

    def _get_data(self) -> Dict[str, Any]:
        return {"complaint_id": self.complaint_id}


@dataclass
class ComplaintCreatedEvent(ComplaintEvent):
    """Raised when a complaint is submitted. The backend may not return its id."""
    attachment_count: int = 0

    def _get_data(self) -> Dict[str, Any]:
        data = super()._get_data()
        data["attachment_count"] = self.attachment_count
        return data


@dataclass
class ComplaintUpdatedEvent(ComplaintEvent):
    """Raised when a complaint is edited"""
    changed_fields: List[str] = field(default_factory=list)

    def _get_data(self) -> Dict[str, Any]:
        data = super()._get_data()
        data["changed_fields"] = self.changed_fields
        return data


@dataclass
class ComplaintDeletedEvent(ComplaintEvent):
    """Raised when a complaint is deleted"""
    pass


@dataclass
class ComplaintAssignedEvent(ComplaintEvent):
    """Raised when a complaint is handed to a worker"""
    handler_id: str = ""

    def _get_data(self) -> Dict[str, Any]:
        data = super()._get_data()
        data["handler_id"] = self.handler_id
        return data


# ==================== Comment Events ====================

@dataclass
class CommentEvent(DomainEvent):
    """Base class for comment changes; comments are addressed by complaint and author"""
    complaint_id: Optional[str] = None
    author_id: str = ""

    def _get_data(self) -> Dict[str, Any]:
        return {"complaint_id": self.complaint_id, "author_id": self.author_id}


@dataclass
class CommentAddedEvent(CommentEvent):
    pass


@dataclass
class CommentUpdatedEvent(CommentEvent):
    pass


@dataclass
class CommentDeletedEvent(CommentEvent):
    pass


# ==================== User Events ====================

@dataclass
class UserUpdatedEvent(DomainEvent):
    """Raised when a user's email or role changes"""
    user_id: str = ""
    role_id: Optional[int] = None

    def _get_data(self) -> Dict[str, Any]:
        return {"user_id": self.user_id, "role_id": self.role_id}


# ==================== Reference Data Events ====================

@dataclass
class ComplaintTypeAddedEvent(DomainEvent):
    """Raised when a new complaint type is created"""
    type_name: str = ""

    def _get_data(self) -> Dict[str, Any]:
        return {"type_name": self.type_name}


# ==================== Notification Events ====================

@dataclass
class NotificationEvent(DomainEvent):
    """Base class for notification changes"""
    notification_id: Optional[str] = None

    def _get_data(self) -> Dict[str, Any]:
        return {"notification_id": self.notification_id}


@dataclass
class NotificationCreatedEvent(NotificationEvent):
    title: str = ""

    def _get_data(self) -> Dict[str, Any]:
        data = super()._get_data()
        data["title"] = self.title
        return data


@dataclass
class NotificationDeletedEvent(NotificationEvent):
    pass


# ==================== Settings Events ====================

@dataclass
class SettingsUpdatedEvent(DomainEvent):
    """Raised when the user's notification preferences change"""
    changed_fields: List[str] = field(default_factory=list)

    def _get_data(self) -> Dict[str, Any]:
        return {"changed_fields": self.changed_fields}
