"""
Per-user notification preferences
"""
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class UserSettings:
    """Notification channels the signed-in user has enabled"""
    email_notifications: bool = False
    sms_notifications: bool = False

    def to_params(self) -> Dict[str, int]:
        """Write form: the backend expects 1/0 flags"""
        return {
            "email_notifications": int(self.email_notifications),
            "sms_notifications": int(self.sms_notifications),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email_notifications": self.email_notifications,
            "sms_notifications": self.sms_notifications,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserSettings":
        return cls(
            email_notifications=bool(data.get("email_notifications", False)),
            sms_notifications=bool(data.get("sms_notifications", False)),
        )
