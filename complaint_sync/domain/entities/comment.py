"""
Comment Entity - A note left on a complaint by a provider or admin
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Dict, Any


@dataclass(frozen=True)
class Comment:
    """
    Comment on a complaint.

    The backend addresses a comment by (complaint, author) when updating or
    deleting it, so `author_id` is kept in its numeric text form.
    """

    id: str
    complaint_id: str
    author_id: str = ""
    author_name: str = "Unknown"
    author_role: str = "provider"
    message: str = ""
    is_internal: bool = False
    mentions: Tuple[str, ...] = ()
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Comment must have an id")
        object.__setattr__(self, "mentions", tuple(self.mentions))

    def is_edited(self) -> bool:
        return self.updated_at is not None and self.updated_at != self.created_at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "complaint_id": self.complaint_id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "author_role": self.author_role,
            "message": self.message,
            "is_internal": self.is_internal,
            "mentions": list(self.mentions),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        return cls(
            id=str(data["id"]),
            complaint_id=str(data["complaint_id"]),
            author_id=data.get("author_id", ""),
            author_name=data.get("author_name", "Unknown"),
            author_role=data.get("author_role", "provider"),
            message=data.get("message", ""),
            is_internal=bool(data.get("is_internal", False)),
            mentions=tuple(data.get("mentions", [])),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at") else None,
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else None,
        )
