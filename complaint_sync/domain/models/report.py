"""
Domain models for the complaint report screen
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class ComplaintReport:
    """
    Complaint analytics for one date range.

    Times are in hours. Breakdown mappings are read-only views.
    """
    start_date: str
    end_date: str
    total_complaints: int = 0
    resolved: int = 0
    average_response_hours: float = 0.0
    average_resolution_hours: float = 0.0
    by_status: Mapping[str, int] = field(default_factory=dict, hash=False)
    by_category: Mapping[str, int] = field(default_factory=dict, hash=False)
    by_priority: Mapping[str, int] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        if self.total_complaints < 0 or self.resolved < 0:
            raise ValueError("report counts must not be negative")
        for name in ("by_status", "by_category", "by_priority"):
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @property
    def resolution_rate(self) -> float:
        if self.total_complaints == 0:
            return 0.0
        return self.resolved / self.total_complaints

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_date": self.start_date,
            "end_date": self.end_date,
            "total_complaints": self.total_complaints,
            "resolved": self.resolved,
            "average_response_hours": self.average_response_hours,
            "average_resolution_hours": self.average_resolution_hours,
            "by_status": dict(self.by_status),
            "by_category": dict(self.by_category),
            "by_priority": dict(self.by_priority),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComplaintReport":
        return cls(
            start_date=data["start_date"],
            end_date=data["end_date"],
            total_complaints=int(data.get("total_complaints", 0)),
            resolved=int(data.get("resolved", 0)),
            average_response_hours=float(data.get("average_response_hours", 0.0)),
            average_resolution_hours=float(data.get("average_resolution_hours", 0.0)),
            by_status=dict(data.get("by_status") or {}),
            by_category=dict(data.get("by_category") or {}),
            by_priority=dict(data.get("by_priority") or {}),
        )
