"""
Port for the complaint portal backend
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from ..entities.complaint import ComplaintStatus
from ..models.search import ComplaintFilters


# Raw, weakly typed backend payload. The normalizer owns its interpretation.
RawPayload = Any

FormFields = Dict[str, Union[str, int]]


@dataclass
class UploadFile:
    """File sent with a multipart complaint create/update"""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class ComplaintApiPort(ABC):
    """
    Interface to the portal HTTP API.

    Every method returns the decoded response body untouched. Implementations
    raise TransportError for network failures, timeouts and non-2xx responses.
    """

    # ==================== Complaints ====================

    @abstractmethod
    async def list_complaints(self, title: Optional[str] = None) -> RawPayload:
        """
        List complaints

        Args:
            title: Optional free-text filter

        Returns:
            Raw list payload (any envelope)
        """
        pass

    @abstractmethod
    async def search_complaints(self, filters: ComplaintFilters) -> RawPayload:
        """Advanced search with status/type/priority/date filters"""
        pass

    @abstractmethod
    async def list_complaints_by_status(self, status: ComplaintStatus) -> RawPayload:
        """Every complaint currently in one status bucket"""
        pass

    @abstractmethod
    async def list_assigned_complaints(self) -> RawPayload:
        """Complaints assigned to providers other than the signed-in user"""
        pass

    @abstractmethod
    async def get_complaint(self, complaint_id: str) -> RawPayload:
        """
        Fetch one complaint

        Args:
            complaint_id: Numeric id or display code ("CMP-42")

        Returns:
            `{"complaint": <raw record or None>}`
        """
        pass

    @abstractmethod
    async def create_complaint(
        self,
        fields: FormFields,
        files: Optional[List[UploadFile]] = None
    ) -> RawPayload:
        """Create a complaint (multipart)"""
        pass

    @abstractmethod
    async def update_complaint(
        self,
        complaint_id: str,
        fields: FormFields,
        files: Optional[List[UploadFile]] = None
    ) -> RawPayload:
        """Update a complaint (multipart)"""
        pass

    @abstractmethod
    async def delete_complaint(self, complaint_id: str) -> RawPayload:
        pass

    @abstractmethod
    async def assign_complaint(
        self,
        complaint_id: str,
        handler_id: str,
        remarks: Optional[str] = None
    ) -> RawPayload:
        """Hand a complaint to a worker, keeping its status open"""
        pass

    # ==================== Reference data ====================

    @abstractmethod
    async def list_statuses(self) -> RawPayload:
        pass

    @abstractmethod
    async def list_types(self) -> RawPayload:
        pass

    @abstractmethod
    async def add_type(self, name: str) -> RawPayload:
        pass

    @abstractmethod
    async def list_priorities(self) -> RawPayload:
        pass

    @abstractmethod
    async def list_sort_options(self) -> RawPayload:
        pass

    @abstractmethod
    async def list_workers(self, title: Optional[str] = None) -> RawPayload:
        """Assignable direct support workers"""
        pass

    @abstractmethod
    async def list_clients(self, title: Optional[str] = None) -> RawPayload:
        pass

    @abstractmethod
    async def list_providers(self) -> RawPayload:
        pass

    @abstractmethod
    async def list_roles(self) -> RawPayload:
        pass

    # ==================== Users ====================

    @abstractmethod
    async def list_users(self, name: Optional[str] = None) -> RawPayload:
        pass

    @abstractmethod
    async def update_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        role_id: Optional[int] = None
    ) -> RawPayload:
        """Only email and role can be changed through this endpoint"""
        pass

    # ==================== Dashboard & notifications ====================

    @abstractmethod
    async def get_dashboard_stats(self) -> RawPayload:
        pass

    @abstractmethod
    async def list_notifications(self, title: Optional[str] = None) -> RawPayload:
        pass

    @abstractmethod
    async def add_notification(self, title: str, body: str) -> RawPayload:
        pass

    @abstractmethod
    async def delete_notification(self, notification_id: str) -> RawPayload:
        pass

    # ==================== Comments ====================

    @abstractmethod
    async def list_comments(self) -> RawPayload:
        """Every comment visible to the signed-in user"""
        pass

    @abstractmethod
    async def add_comment(self, complaint_id: str, author_id: str, message: str) -> RawPayload:
        pass

    @abstractmethod
    async def update_comment(self, complaint_id: str, author_id: str, message: str) -> RawPayload:
        """The backend identifies a comment by (complaint, author)"""
        pass

    @abstractmethod
    async def delete_comment(self, complaint_id: str, author_id: str) -> RawPayload:
        pass

    # ==================== Reports & settings ====================

    @abstractmethod
    async def get_report(self, start_date: str, end_date: str) -> RawPayload:
        """
        Complaint report for an inclusive date range

        Args:
            start_date: YYYY-MM-DD
            end_date: YYYY-MM-DD
        """
        pass

    @abstractmethod
    async def get_settings(self) -> RawPayload:
        pass

    @abstractmethod
    async def update_settings(self, values: Dict[str, int]) -> RawPayload:
        """Notification flags as 1/0"""
        pass
