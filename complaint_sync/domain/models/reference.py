"""
Reference metadata: statuses, types, priorities, sort options, roles,
workers, clients and providers all share one shape.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ReferenceOption:
    """Selectable option from a lookup list"""
    name: str
    id: Optional[int] = None
    code: str = ""

    @property
    def value(self) -> str:
        """Form value: the id when the backend gave one, else the code or name"""
        if self.id is not None:
            return str(self.id)
        return self.code or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "code": self.code}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReferenceOption":
        raw_id = data.get("id")
        return cls(
            name=data["name"],
            id=int(raw_id) if raw_id is not None else None,
            code=data.get("code", ""),
        )
