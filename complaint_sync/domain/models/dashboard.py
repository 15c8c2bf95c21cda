"""
Domain models for dashboard statistics
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class DashboardStats:
    """Headline complaint counters shown on both dashboards"""
    open: int = 0
    pending: int = 0
    resolved: int = 0
    refused: int = 0

    # Untouched backend payload, for counters not modeled here (e.g. admin head-counts)
    raw: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        for name in ("open", "pending", "resolved", "refused"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} count must not be negative")
        object.__setattr__(self, "raw", MappingProxyType(dict(self.raw)))

    @property
    def total(self) -> int:
        return self.open + self.pending + self.resolved + self.refused

    def extra(self, key: str, default: Any = None) -> Any:
        """Read an unmodeled counter from the raw payload"""
        return self.raw.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "open": self.open,
            "pending": self.pending,
            "resolved": self.resolved,
            "refused": self.refused,
            "raw": dict(self.raw),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DashboardStats":
        return cls(
            open=int(data.get("open", 0)),
            pending=int(data.get("pending", 0)),
            resolved=int(data.get("resolved", 0)),
            refused=int(data.get("refused", 0)),
            raw=dict(data.get("raw") or {}),
        )
