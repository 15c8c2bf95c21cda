"""
Notification Entity - Message shown in the notifications panel
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any


class NotificationChannel(str, Enum):
    EMAIL = "email"
    SMS = "sms"
    IN_APP = "in-app"


@dataclass(frozen=True)
class Notification:
    """A notification, optionally tied to a complaint"""

    id: str
    message: str = ""
    title: str = ""
    complaint_id: Optional[str] = None
    created_at: Optional[datetime] = None
    is_read: bool = False
    channel: NotificationChannel = NotificationChannel.IN_APP

    def __post_init__(self):
        if not self.id:
            raise ValueError("Notification must have an id")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "message": self.message,
            "title": self.title,
            "complaint_id": self.complaint_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "is_read": self.is_read,
            "channel": self.channel.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Notification":
        return cls(
            id=str(data["id"]),
            message=data.get("message", ""),
            title=data.get("title", ""),
            complaint_id=data.get("complaint_id"),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else None,
            is_read=bool(data.get("is_read", False)),
            channel=NotificationChannel(data.get("channel", "in-app")),
        )
