"""
Mutation Service
Create/update/delete operations against the portal API.

On success the matching domain event is published, which lets the
invalidation coordinator mark the affected caches stale. On failure a
MutationError reaches the caller and nothing is invalidated: the user must
learn that the change did not persist.
"""
import logging
from collections.abc import Mapping
from typing import Any, Awaitable, Dict, List, Optional

from ..cache import complaint_key
from ..core.errors import MutationError, MutationRejectedError, TransportError
from ..core.logging_framework import LogCategory
from ..domain.ports import ComplaintApiPort, FormFields, UploadFile
from ..events import (
    EventBus,
    DomainEvent,
    ComplaintCreatedEvent,
    ComplaintUpdatedEvent,
    ComplaintDeletedEvent,
    ComplaintAssignedEvent,
    CommentAddedEvent,
    CommentUpdatedEvent,
    CommentDeletedEvent,
    UserUpdatedEvent,
    ComplaintTypeAddedEvent,
    NotificationCreatedEvent,
    NotificationDeletedEvent,
    SettingsUpdatedEvent,
)

logger = logging.getLogger(__name__)


def _backend_message(response: Any) -> Optional[str]:
    if isinstance(response, Mapping):
        message = response.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


def _is_rejection(response: Any) -> bool:
    """A 2xx body that still reports failure, e.g. {"status": false, "message": "..."}"""
    if not isinstance(response, Mapping):
        return False
    status = response.get("status")
    success = response.get("success")
    return status is False or success is False


class MutationService:
    """
    Write operations with post-success event publication.

    Example:
        mutations = MutationService(api, event_bus)
        await mutations.update_complaint("42", {"description": "..."})
        # ComplaintUpdatedEvent published; complaint 42 caches are now stale
    """

    def __init__(self, api: ComplaintApiPort, event_bus: EventBus):
        self.api = api
        self.event_bus = event_bus

    async def _execute(self, operation: str, call: Awaitable[Any], event: DomainEvent) -> Any:
        """
        Await the backend call, check its body, then publish `event`.

        Raises:
            MutationError: transport failure or a rejected body
        """
        try:
            response = await call
        except TransportError as e:
            logger.error(
                f"{operation} failed: {e.message}",
                extra={"category": LogCategory.MUTATION, "extra_data": e.details}
            )
            raise MutationError(
                operation,
                message=f"{operation} failed: {e.message}",
                details={"status_code": e.status_code},
                cause=e
            ) from e

        if _is_rejection(response):
            message = _backend_message(response)
            logger.error(
                f"{operation} rejected by server: {message or 'no message'}",
                extra={"category": LogCategory.MUTATION}
            )
            raise MutationRejectedError(operation, backend_message=message)

        await self.event_bus.publish(event)

        logger.info(f"{operation} succeeded", extra={"category": LogCategory.MUTATION})
        return response

    # ==================== Complaints ====================

    async def create_complaint(
        self,
        fields: FormFields,
        files: Optional[List[UploadFile]] = None
    ) -> Any:
        files = files or []
        return await self._execute(
            "create_complaint",
            self.api.create_complaint(fields, files),
            ComplaintCreatedEvent(attachment_count=len(files))
        )

    async def update_complaint(
        self,
        complaint_id: str,
        fields: FormFields,
        files: Optional[List[UploadFile]] = None
    ) -> Any:
        key = complaint_key(complaint_id)
        return await self._execute(
            "update_complaint",
            self.api.update_complaint(key, fields, files or []),
            ComplaintUpdatedEvent(complaint_id=key, changed_fields=sorted(fields))
        )

    async def delete_complaint(self, complaint_id: str) -> Any:
        key = complaint_key(complaint_id)
        return await self._execute(
            "delete_complaint",
            self.api.delete_complaint(key),
            ComplaintDeletedEvent(complaint_id=key)
        )

    async def assign_complaint(
        self,
        complaint_id: str,
        handler_id: str,
        remarks: Optional[str] = None
    ) -> Any:
        key = complaint_key(complaint_id)
        return await self._execute(
            "assign_complaint",
            self.api.assign_complaint(key, str(handler_id), remarks),
            ComplaintAssignedEvent(complaint_id=key, handler_id=str(handler_id))
        )

    # ==================== Users & metadata ====================

    async def update_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        role_id: Optional[int] = None
    ) -> Any:
        if email is None and role_id is None:
            raise MutationError("update_user", message="Nothing to update: pass email or role_id")
        return await self._execute(
            "update_user",
            self.api.update_user(str(user_id), email=email, role_id=role_id),
            UserUpdatedEvent(user_id=str(user_id), role_id=role_id)
        )

    async def add_type(self, name: str) -> Any:
        name = name.strip()
        if not name:
            raise MutationError("add_type", message="Type name must not be empty")
        return await self._execute(
            "add_type",
            self.api.add_type(name),
            ComplaintTypeAddedEvent(type_name=name)
        )

    # ==================== Notifications ====================

    async def add_notification(self, title: str, body: str) -> Any:
        return await self._execute(
            "add_notification",
            self.api.add_notification(title, body),
            NotificationCreatedEvent(title=title)
        )

    async def delete_notification(self, notification_id: str) -> Any:
        return await self._execute(
            "delete_notification",
            self.api.delete_notification(str(notification_id)),
            NotificationDeletedEvent(notification_id=str(notification_id))
        )

    # ==================== Comments ====================

    @staticmethod
    def _comment_message(operation: str, message: str) -> str:
        message = message.strip()
        if not message:
            raise MutationError(operation, message="Comment must not be empty")
        return message

    async def add_comment(self, complaint_id: str, author_id: str, message: str) -> Any:
        key = complaint_key(complaint_id)
        message = self._comment_message("add_comment", message)
        return await self._execute(
            "add_comment",
            self.api.add_comment(key, str(author_id), message),
            CommentAddedEvent(complaint_id=key, author_id=str(author_id))
        )

    async def update_comment(self, complaint_id: str, author_id: str, message: str) -> Any:
        key = complaint_key(complaint_id)
        message = self._comment_message("update_comment", message)
        return await self._execute(
            "update_comment",
            self.api.update_comment(key, str(author_id), message),
            CommentUpdatedEvent(complaint_id=key, author_id=str(author_id))
        )

    async def delete_comment(self, complaint_id: str, author_id: str) -> Any:
        key = complaint_key(complaint_id)
        return await self._execute(
            "delete_comment",
            self.api.delete_comment(key, str(author_id)),
            CommentDeletedEvent(complaint_id=key, author_id=str(author_id))
        )

    # ==================== Settings ====================

    async def update_settings(
        self,
        email_notifications: Optional[bool] = None,
        sms_notifications: Optional[bool] = None
    ) -> Any:
        """Send only the flags that were passed, as 1/0"""
        values: Dict[str, int] = {}
        if email_notifications is not None:
            values["email_notifications"] = int(bool(email_notifications))
        if sms_notifications is not None:
            values["sms_notifications"] = int(bool(sms_notifications))
        if not values:
            raise MutationError(
                "update_settings",
                message="Nothing to update: pass email_notifications or sms_notifications"
            )
        return await self._execute(
            "update_settings",
            self.api.update_settings(values),
            SettingsUpdatedEvent(changed_fields=sorted(values))
        )
