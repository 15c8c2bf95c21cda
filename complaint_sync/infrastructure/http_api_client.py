"""
HTTP adapter for the complaint portal API

Implements ComplaintApiPort with httpx. Every call retries a fixed number of
times with exponential backoff (`min(base * 2**attempt, max_delay)`) on
network errors, timeouts and 5xx responses; reads and writes have separate
retry budgets. Anything still failing surfaces as TransportError.
"""
import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

import httpx

from ..core.config import PortalSettings, get_portal_settings
from ..core.errors import ErrorCode, TransportError, TransportTimeoutError
from ..core.logging_framework import LogCategory
from ..domain.entities import ComplaintStatus, complaint_key
from ..domain.models import ComplaintFilters
from ..domain.ports import ComplaintApiPort, FormFields, RawPayload, UploadFile
from ..services.response_normalizer import resolve_envelope

logger = logging.getLogger(__name__)


# Status id sent with an assignment so the complaint stays open
ASSIGNMENT_STATUS_ID = 1

STATUS_LIST_ENDPOINTS = {
    ComplaintStatus.OPEN: "all-open-complaints",
    ComplaintStatus.IN_PROGRESS: "all-pending-complaints",
    ComplaintStatus.CLOSED: "all-resolved-complaints",
    ComplaintStatus.REFUSED: "all-refused-complaints",
}


class HttpComplaintApi(ComplaintApiPort):
    """
    httpx-based portal client.

    Example:
        api = HttpComplaintApi(settings)
        raw = await api.list_complaints()
        await api.close()

    Pass `transport=httpx.MockTransport(handler)` to run against canned
    responses.
    """

    def __init__(
        self,
        settings: Optional[PortalSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.settings = settings or get_portal_settings()

        headers = {
            "Accept": "application/json",
            "X-Requested-With": "XMLHttpRequest",
        }
        if self.settings.API_TOKEN:
            headers["Authorization"] = f"Bearer {self.settings.API_TOKEN}"

        self.http_client = httpx.AsyncClient(
            base_url=self.settings.API_BASE_URL + "/",
            timeout=self.settings.REQUEST_TIMEOUT_SECONDS,
            headers=headers,
            transport=transport,
        )

    async def close(self):
        """Close HTTP client"""
        await self.http_client.aclose()

    async def __aenter__(self) -> "HttpComplaintApi":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ==================== Transport ====================

    def _backoff_delay(self, attempt: int) -> float:
        delay = self.settings.RETRY_BASE_DELAY_SECONDS * (2 ** attempt)
        return min(delay, self.settings.RETRY_MAX_DELAY_SECONDS)

    async def _request(
        self,
        method: str,
        endpoint: str,
        max_retries: int,
        **kwargs
    ) -> RawPayload:
        """
        Send one request with retries.

        Raises:
            TransportError: after the last attempt fails
        """
        last_error: Optional[TransportError] = None

        for attempt in range(max_retries + 1):
            try:
                response = await self.http_client.request(method, endpoint, **kwargs)
            except httpx.TimeoutException:
                last_error = TransportTimeoutError(endpoint, self.settings.REQUEST_TIMEOUT_SECONDS)
            except httpx.HTTPError as e:
                last_error = TransportError(endpoint, message=f"{endpoint}: {type(e).__name__}: {e}", cause=e)
            else:
                if response.status_code < 400:
                    return self._decode(endpoint, response)

                last_error = TransportError(
                    endpoint,
                    message=self._error_message(endpoint, response),
                    status_code=response.status_code,
                    code=ErrorCode.UNAUTHORIZED if response.status_code == 401 else ErrorCode.UPSTREAM_STATUS,
                )
                if response.status_code < 500:
                    # Client errors do not improve on retry
                    break

            if attempt < max_retries:
                delay = self._backoff_delay(attempt)
                logger.warning(
                    f"{method} {endpoint} failed (attempt {attempt + 1}/{max_retries + 1}), "
                    f"retrying in {delay}s: {last_error.message}",
                    extra={"category": LogCategory.EXTERNAL_API}
                )
                await asyncio.sleep(delay)

        logger.warning(
            f"{method} {endpoint} failed: {last_error.message}",
            extra={"category": LogCategory.EXTERNAL_API, "extra_data": last_error.details}
        )
        raise last_error

    @staticmethod
    def _decode(endpoint: str, response: httpx.Response) -> RawPayload:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                endpoint,
                message=f"{endpoint} returned a non-JSON body",
                status_code=response.status_code,
                code=ErrorCode.INVALID_RESPONSE,
                cause=e,
            ) from e

    @staticmethod
    def _error_message(endpoint: str, response: httpx.Response) -> str:
        """Prefer the backend's own `message` field"""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, Mapping) and isinstance(body.get("message"), str) and body["message"].strip():
            return body["message"].strip()
        return f"{endpoint} returned HTTP {response.status_code}"

    async def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> RawPayload:
        return await self._request(
            "GET", endpoint, self.settings.QUERY_MAX_RETRIES,
            params={k: v for k, v in (params or {}).items() if v is not None}
        )

    async def _post(self, endpoint: str, json: Optional[Dict[str, Any]] = None) -> RawPayload:
        return await self._request("POST", endpoint, self.settings.MUTATION_MAX_RETRIES, json=json or {})

    async def _post_multipart(
        self,
        endpoint: str,
        fields: FormFields,
        files: Optional[List[UploadFile]]
    ) -> RawPayload:
        data = {k: str(v) for k, v in fields.items() if v is not None}
        upload = [("file", (f.filename, f.content, f.content_type)) for f in (files or [])]
        return await self._request(
            "POST", endpoint, self.settings.MUTATION_MAX_RETRIES,
            data=data,
            files=upload or None,
        )

    # ==================== Complaints ====================

    async def list_complaints(self, title: Optional[str] = None) -> RawPayload:
        return await self._get("all-complaints", {"title": title} if title else None)

    async def search_complaints(self, filters: ComplaintFilters) -> RawPayload:
        # Search is a read even though the backend exposes it as POST
        return await self._request(
            "POST", "advance-search-complaints", self.settings.QUERY_MAX_RETRIES,
            json=filters.to_params()
        )

    async def list_complaints_by_status(self, status: ComplaintStatus) -> RawPayload:
        return await self._get(STATUS_LIST_ENDPOINTS[status])

    async def list_assigned_complaints(self) -> RawPayload:
        return await self._get("assigned-to-other-complaints")

    async def get_complaint(self, complaint_id: str) -> RawPayload:
        """No single-complaint endpoint exists; select from the full list"""
        wanted = complaint_key(complaint_id)

        for record in resolve_envelope(await self._get("all-complaints"), ("complaints",)):
            if not isinstance(record, Mapping) or record.get("id") is None:
                continue
            if complaint_key(record["id"]) == wanted:
                return {"complaint": record}
        return {"complaint": None}

    async def create_complaint(
        self,
        fields: FormFields,
        files: Optional[List[UploadFile]] = None
    ) -> RawPayload:
        return await self._post_multipart("add-complaint", fields, files)

    async def update_complaint(
        self,
        complaint_id: str,
        fields: FormFields,
        files: Optional[List[UploadFile]] = None
    ) -> RawPayload:
        return await self._post_multipart(
            "update-complaint", {**fields, "complaint_id": complaint_id}, files
        )

    async def delete_complaint(self, complaint_id: str) -> RawPayload:
        return await self._post("delete-complaint", {"complaint_id": complaint_id})

    async def assign_complaint(
        self,
        complaint_id: str,
        handler_id: str,
        remarks: Optional[str] = None
    ) -> RawPayload:
        return await self._post("process-complaint", {
            "complaint_id": complaint_id,
            "current_handler_id": handler_id,
            "status_id": ASSIGNMENT_STATUS_ID,
            "remarks": remarks or f"Complaint assigned to handler {handler_id}",
        })

    # ==================== Reference data ====================

    async def list_statuses(self) -> RawPayload:
        return await self._get("all-statuses")

    async def list_types(self) -> RawPayload:
        return await self._get("all-types")

    async def add_type(self, name: str) -> RawPayload:
        return await self._post("add-type", {"name": name})

    async def list_priorities(self) -> RawPayload:
        return await self._get("all-priorities")

    async def list_sort_options(self) -> RawPayload:
        return await self._get("sort_by")

    async def list_workers(self, title: Optional[str] = None) -> RawPayload:
        return await self._get("all-dsws", {"title": title} if title else None)

    async def list_clients(self, title: Optional[str] = None) -> RawPayload:
        return await self._get("all-clients", {"title": title} if title else None)

    async def list_providers(self) -> RawPayload:
        return await self._get("all-providers")

    async def list_roles(self) -> RawPayload:
        return await self._get("all-roles")

    # ==================== Users ====================

    async def list_users(self, name: Optional[str] = None) -> RawPayload:
        return await self._get("all-users", {"name": name} if name else None)

    async def update_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        role_id: Optional[int] = None
    ) -> RawPayload:
        body: Dict[str, Any] = {"user_id": user_id}
        if email is not None:
            body["email"] = email
        if role_id is not None:
            body["role_id"] = role_id
        return await self._post("update-list-user", body)

    # ==================== Dashboard & notifications ====================

    async def get_dashboard_stats(self) -> RawPayload:
        return await self._get("dashboard_states")

    async def list_notifications(self, title: Optional[str] = None) -> RawPayload:
        return await self._get("all-notifications", {"title": title} if title else None)

    async def add_notification(self, title: str, body: str) -> RawPayload:
        return await self._post("store-notification", {"title": title, "body": body})

    async def delete_notification(self, notification_id: str) -> RawPayload:
        return await self._post("delete-notification", {"notification_id": notification_id})

    # ==================== Comments ====================

    async def list_comments(self) -> RawPayload:
        # A read exposed as POST
        return await self._request("POST", "get-user-comments", self.settings.QUERY_MAX_RETRIES, json={})

    async def add_comment(self, complaint_id: str, author_id: str, message: str) -> RawPayload:
        return await self._post_multipart("add-complaint-comment", {
            "complaint_id": complaint_id,
            "comment_by": author_id,
            "comment": message,
        }, None)

    async def update_comment(self, complaint_id: str, author_id: str, message: str) -> RawPayload:
        return await self._post_multipart("update-complaint-comment", {
            "complaint_id": complaint_id,
            "comment_by": author_id,
            "comment": message,
        }, None)

    async def delete_comment(self, complaint_id: str, author_id: str) -> RawPayload:
        return await self._post_multipart("delete-complaint-comment", {
            "complaint_id": complaint_id,
            "comment_by": author_id,
        }, None)

    # ==================== Reports & settings ====================

    async def get_report(self, start_date: str, end_date: str) -> RawPayload:
        return await self._request(
            "POST", "report-complaints", self.settings.QUERY_MAX_RETRIES,
            json={
                "starting_date": f"{start_date} 00:00:00",
                "end_date": f"{end_date} 23:59:59",
            }
        )

    async def get_settings(self) -> RawPayload:
        return await self._get("settings")

    async def update_settings(self, values: Dict[str, int]) -> RawPayload:
        return await self._post("update-setting", dict(values))
