"""
Attachment Entity - A file uploaded with a complaint
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class Attachment:
    """File attached to a complaint. Only metadata and a URL are kept."""

    id: str
    name: str = ""
    url: str = ""
    file_type: str = "image"
    size: int = 0  # bytes
    uploaded_by: str = ""
    uploaded_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Attachment must have an id")

    @property
    def extension(self) -> str:
        return self.name.lower().rsplit(".", 1)[-1] if "." in self.name else ""

    def is_image(self) -> bool:
        return self.file_type == "image" or self.extension in ("png", "jpg", "jpeg", "gif", "webp")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "file_type": self.file_type,
            "size": self.size,
            "uploaded_by": self.uploaded_by,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attachment":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            url=data.get("url", ""),
            file_type=data.get("file_type", "image"),
            size=int(data.get("size", 0)),
            uploaded_by=data.get("uploaded_by", ""),
            uploaded_at=datetime.fromisoformat(data["uploaded_at"]) if data.get("uploaded_at") else None,
        )
