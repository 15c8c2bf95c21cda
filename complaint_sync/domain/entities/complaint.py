"""
Complaint Entity - Core business entity representing a portal complaint

Pure Python dataclasses. Backend payloads never reach this module directly;
the response normalizer maps them into these types first.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Dict, Any

from .attachment import Attachment


class ComplaintStatus(str, Enum):
    """Complaint status enumeration, ordered by lifecycle position"""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    CLOSED = "Closed"
    REFUSED = "Refused"

    @property
    def rank(self) -> int:
        return _STATUS_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, ComplaintStatus):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, ComplaintStatus):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, ComplaintStatus):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, ComplaintStatus):
            return NotImplemented
        return self.rank >= other.rank

    @property
    def is_terminal(self) -> bool:
        return self in (ComplaintStatus.CLOSED, ComplaintStatus.REFUSED)


_STATUS_RANK = {
    ComplaintStatus.OPEN: 0,
    ComplaintStatus.IN_PROGRESS: 1,
    ComplaintStatus.CLOSED: 2,
    ComplaintStatus.REFUSED: 3,
}


class ProblemType(str, Enum):
    """Complaint category"""
    LATE_ARRIVAL = "Late arrival"
    BEHAVIOR = "Behavior"
    MISSED_SERVICE = "Missed service"
    OTHER = "Other"


class Priority(str, Enum):
    """Complaint priority enumeration"""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


@dataclass(frozen=True)
class TimelineEntry:
    """One step of a complaint's handling history"""

    status_label: str
    status_code: str = ""
    description: str = ""  # Handler remarks
    handled_by: str = ""
    occurred_at: Optional[datetime] = None
    is_completed: bool = False
    is_refused: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status_label": self.status_label,
            "status_code": self.status_code,
            "description": self.description,
            "handled_by": self.handled_by,
            "occurred_at": self.occurred_at.isoformat() if self.occurred_at else None,
            "is_completed": self.is_completed,
            "is_refused": self.is_refused,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimelineEntry":
        return cls(
            status_label=data["status_label"],
            status_code=data.get("status_code", ""),
            description=data.get("description", ""),
            handled_by=data.get("handled_by", ""),
            occurred_at=datetime.fromisoformat(data["occurred_at"]) if data.get("occurred_at") else None,
            is_completed=bool(data.get("is_completed", False)),
            is_refused=bool(data.get("is_refused", False)),
        )


@dataclass(frozen=True)
class Complaint:
    """
    Complaint entity in canonical form.

    Status is always derived from the last element of the backend history,
    so `timeline[-1]` (when present) and `status` agree.

    Frozen, with tuple collections, so a cached complaint can be shared by
    every screen that reads it.
    """

    # Identity
    id: str
    display_code: str = ""  # e.g. "CMP-42"

    # Core Attributes
    requester: str = "Unknown"
    problem_type: ProblemType = ProblemType.OTHER
    type_label: str = ""  # Raw backend type name, kept for custom types
    description: str = ""
    status: ComplaintStatus = ComplaintStatus.OPEN
    priority: Priority = Priority.MEDIUM

    # Timestamps (timezone-aware UTC)
    submitted_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    assignee: Optional[str] = None

    # Content
    attachments: Tuple[Attachment, ...] = ()
    timeline: Tuple[TimelineEntry, ...] = ()

    def __post_init__(self):
        """Validate entity invariants after initialization"""
        if not self.id:
            raise ValueError("Complaint must have an id")
        if not self.display_code:
            object.__setattr__(self, "display_code", f"CMP-{self.id}")
        object.__setattr__(self, "attachments", tuple(self.attachments))
        object.__setattr__(self, "timeline", tuple(self.timeline))

    def is_resolved(self) -> bool:
        """Closed or refused complaints need no further handling"""
        return self.status.is_terminal

    def is_assigned(self) -> bool:
        return bool(self.assignee)

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to a plain dictionary"""
        return {
            "id": self.id,
            "display_code": self.display_code,
            "requester": self.requester,
            "problem_type": self.problem_type.value,
            "type_label": self.type_label,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority.value,
            "submitted_at": self.submitted_at.isoformat() if self.submitted_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "assignee": self.assignee,
            "attachments": [a.to_dict() for a in self.attachments],
            "timeline": [t.to_dict() for t in self.timeline],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Complaint":
        """Create entity from its `to_dict` form"""
        return cls(
            id=str(data["id"]),
            display_code=data["display_code"],
            requester=data.get("requester", "Unknown"),
            problem_type=ProblemType(data.get("problem_type", "Other")),
            type_label=data.get("type_label", ""),
            description=data.get("description", ""),
            status=ComplaintStatus(data.get("status", "Open")),
            priority=Priority(data.get("priority", "Medium")),
            submitted_at=datetime.fromisoformat(data["submitted_at"]) if data.get("submitted_at") else None,
            updated_at=datetime.fromisoformat(data["updated_at"]) if data.get("updated_at") else None,
            assignee=data.get("assignee"),
            attachments=tuple(Attachment.from_dict(a) for a in data.get("attachments", [])),
            timeline=tuple(TimelineEntry.from_dict(t) for t in data.get("timeline", [])),
        )


def complaint_key(complaint_id: Any) -> str:
    """Complaint key: the numeric id without the "CMP-" display prefix"""
    if isinstance(complaint_id, float) and complaint_id.is_integer():
        complaint_id = int(complaint_id)
    text = str(complaint_id).strip()
    if text.upper().startswith("CMP-"):
        text = text[4:]
    return text
