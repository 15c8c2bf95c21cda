"""Domain Entities - Core business entities"""

from .complaint import Complaint, ComplaintStatus, ProblemType, Priority, TimelineEntry, complaint_key
from .attachment import Attachment
from .comment import Comment
from .user import User, UserRole, ADMIN_ROLE_ID, PROVIDER_ROLE_ID
from .notification import Notification, NotificationChannel

__all__ = [
    "Complaint",
    "ComplaintStatus",
    "ProblemType",
    "Priority",
    "TimelineEntry",
    "complaint_key",
    "Attachment",
    "Comment",
    "User",
    "UserRole",
    "ADMIN_ROLE_ID",
    "PROVIDER_ROLE_ID",
    "Notification",
    "NotificationChannel",
]
