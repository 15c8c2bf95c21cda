"""
User Entity - Portal staff account (service provider or administrator)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any


class UserRole(str, Enum):
    """Staff roles"""
    PROVIDER = "provider"
    ADMIN = "admin"


# Backend role ids
ADMIN_ROLE_ID = 1
PROVIDER_ROLE_ID = 2


@dataclass(frozen=True)
class User:
    """Portal user as listed on the user management screen"""

    id: str
    email: str = ""
    name: str = ""
    role: UserRole = UserRole.PROVIDER
    role_id: Optional[int] = None  # Only used when writing back to update-list-user

    def __post_init__(self):
        if not self.id:
            raise ValueError("User must have an id")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "role_id": self.role_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        role_id = data.get("role_id")
        return cls(
            id=str(data["id"]),
            email=data.get("email", ""),
            name=data.get("name", ""),
            role=UserRole(data.get("role", "provider")),
            role_id=int(role_id) if role_id is not None else None,
        )
