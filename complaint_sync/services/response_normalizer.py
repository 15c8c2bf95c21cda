"""
Response Normalizer
Maps inconsistent backend payloads into canonical domain entities.

The portal backend wraps results in different envelopes depending on the
endpoint (`{"complaints": [...]}`, `{"payload": [...]}`, `{"data": [...]}` or a
bare array) and names the same attribute differently across records. Every
function here is pure. Shape problems never raise: an unusable envelope yields
an empty list, an unparseable date degrades to the clock's current instant.

Each record is first classified into a tagged variant:

    RawRecord           backend mapping, mapped through the field chains
    CanonicalRecord     already an entity (or its `to_dict()` form), passed through
    UnrecognizedRecord  anything else, dropped from list results

so re-feeding normalized output is a no-op.
"""
import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from ..core.clock import Clock, SystemClock
from ..core.logging_framework import LogCategory
from ..domain.entities import (
    Attachment,
    Comment,
    Complaint,
    ComplaintStatus,
    Notification,
    NotificationChannel,
    Priority,
    ProblemType,
    TimelineEntry,
    User,
    UserRole,
    ADMIN_ROLE_ID,
    complaint_key,
)
from ..domain.models import ComplaintReport, DashboardStats, ReferenceOption, UserSettings

logger = logging.getLogger(__name__)


_MISSING = object()

# Generic envelope fields tried after the endpoint-specific ones
GENERIC_ENVELOPE_FIELDS = ("payload", "data")


# ==================== Envelope resolution ====================

def _is_indexed_object(value: Any) -> bool:
    """A list serialized as an object: {"0": {...}, "1": {...}}"""
    return (
        isinstance(value, Mapping)
        and bool(value)
        and all(isinstance(k, str) and k.isdigit() for k in value)
    )


def resolve_envelope(
    payload: Any,
    named_fields: Sequence[str] = (),
    indexed_objects: bool = False
) -> List[Any]:
    """
    Locate the record array inside a response body.

    Tries each named field, then `payload`, then `data`, then the top-level
    value itself. The first candidate that is a list wins; if none is, the
    result is an empty list.

    Args:
        payload: Decoded response body of unknown shape
        named_fields: Endpoint-specific envelope names, most specific first
        indexed_objects: Also accept an object keyed "0", "1", ... as a list,
            in key order

    Returns:
        The record list (a new list object), possibly empty
    """
    if isinstance(payload, Mapping):
        for key in (*named_fields, *GENERIC_ENVELOPE_FIELDS):
            value = payload.get(key)
            if isinstance(value, (list, tuple)):
                return list(value)
            if indexed_objects and _is_indexed_object(value):
                return [value[k] for k in sorted(value, key=int)]
        if indexed_objects and _is_indexed_object(payload):
            return [payload[k] for k in sorted(payload, key=int)]
        return []

    if isinstance(payload, (list, tuple)):
        return list(payload)

    return []


def _resolve_object(payload: Any, named_fields: Sequence[str]) -> Any:
    """Single-object variant: first mapping found in the envelope, else the payload itself"""
    if isinstance(payload, Mapping):
        for key in (*named_fields, *GENERIC_ENVELOPE_FIELDS):
            value = payload.get(key)
            if isinstance(value, Mapping):
                return value
    return payload


def _unwrap_single(payload: Any, named_fields: Sequence[str]) -> Any:
    """
    Single-record envelope: the value under the first present envelope field,
    else the payload itself. A list yields its first element.
    """
    candidate = payload
    if isinstance(payload, Mapping):
        for key in (*named_fields, *GENERIC_ENVELOPE_FIELDS):
            if key in payload:
                candidate = payload[key]
                break

    if isinstance(candidate, (list, tuple)):
        return candidate[0] if candidate else None
    return candidate


# ==================== Field chains ====================

def _lookup(record: Any, path: str) -> Any:
    """Follow a dotted path through nested mappings"""
    current = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _is_blank(value: Any) -> bool:
    if value is _MISSING or value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


class FieldChain:
    """
    Ordered fallback chain for one attribute.

    Candidates are dotted paths tried in order; None, missing and blank string
    values fall through to the next candidate.

    Example:
        REQUESTER = FieldChain("Complainant", "caretaker_name", default="Unknown")
        REQUESTER.resolve({"caretaker_name": "Ana"})  # "Ana"
    """

    def __init__(self, *paths: str, default: Any = None):
        if not paths:
            raise ValueError("FieldChain needs at least one path")
        self.paths: Tuple[str, ...] = paths
        self.default = default

    def resolve(self, record: Any) -> Any:
        for path in self.paths:
            value = _lookup(record, path)
            if not _is_blank(value):
                return value
        return self.default

    def resolve_str(self, record: Any) -> str:
        value = self.resolve(record)
        return "" if value is None else str(value).strip()

    def __repr__(self) -> str:
        return f"FieldChain({', '.join(self.paths)}, default={self.default!r})"


# Complaint
COMPLAINT_ID = FieldChain("id", "complaint_id")
REQUESTER = FieldChain("Complainant", "complainant", "caretaker_name", "client_name", default="Unknown")
DESCRIPTION = FieldChain("description", default="")
TYPE_NAME = FieldChain("type.name", "type.code", "type_name", default="Other")
PRIORITY_LABEL = FieldChain("priority.label", "priority.name", "priority_label", default="Medium")
CREATED_AT = FieldChain("created_at", "createdAt")
UPDATED_AT = FieldChain("updated_at", "updatedAt")
HISTORY_STATUS = FieldChain("status.label", "status.name", "status.code", "status_id", "status")
HISTORY_STATUS_CODE = FieldChain("status.code", default="")
HANDLER_REMARKS = FieldChain("Handler Remarks", "remarks", default="")
HANDLED_BY = FieldChain("Case Handle By", "handled_by", default="")
HISTORY_CREATED_AT = FieldChain("created_at", "updated_at")
HISTORY_UPDATED_AT = FieldChain("updated_at", "created_at")

# Attachment
FILE_ID = FieldChain("id", "file_id", default="")
FILE_NAME = FieldChain("file_name", "name", default="")
FILE_URL = FieldChain("url", "file_url", "path", default="")
FILE_TYPE = FieldChain("type", "file_type", default="image")
FILE_SIZE = FieldChain("size", "file_size", default=0)
FILE_UPLOADED_AT = FieldChain("created_at", "uploaded_at")

# User
USER_ID = FieldChain("id", "user_id")
USER_EMAIL = FieldChain("email", default="")
USER_NAME = FieldChain("name", "full_name", "username", default="")
USER_ROLE = FieldChain("role.name", "role.label", "role.code", "role", "role_name", default="")
USER_ROLE_ID = FieldChain("role_id", "role.id")

# Stats
STAT_OPEN = FieldChain("open_complaints", "open", default=0)
STAT_PENDING = FieldChain("pending_followups", "pending", default=0)
STAT_RESOLVED = FieldChain("resolved_this_month", "resolved", default=0)
STAT_REFUSED = FieldChain("refused_complaints", "refused", default=0)

# Notification
NOTIFICATION_ID = FieldChain("id", "notification_id")
NOTIFICATION_BODY = FieldChain("body", "message")
NOTIFICATION_TITLE = FieldChain("title", default="")
NOTIFICATION_COMPLAINT = FieldChain("complaint_id")
NOTIFICATION_CREATED_AT = FieldChain("created_at", "createdAt")
NOTIFICATION_READ = FieldChain("is_read", "read_at", default=False)
NOTIFICATION_CHANNEL = FieldChain("type", "channel", default="in-app")

# Comment
COMMENT_ID = FieldChain("id", "comment_id")
COMMENT_COMPLAINT = FieldChain("complaint_id", "complaintId")
COMMENT_AUTHOR_ID = FieldChain("comment_by", "user_id")
COMMENT_AUTHOR_NAME = FieldChain("user_name", "name", "comment_by", default="Unknown")
COMMENT_AUTHOR_ROLE = FieldChain("role", default="provider")
COMMENT_MESSAGE = FieldChain("comment", "message", default="")
COMMENT_INTERNAL = FieldChain("is_internal", "isInternal", default=False)
COMMENT_CREATED_AT = FieldChain("created_at", "createdAt")
COMMENT_UPDATED_AT = FieldChain("updated_at", "updatedAt")

# Report
REPORT_TOTAL = FieldChain("total_complaints", "totalComplaints", "total", default=0)
REPORT_RESOLVED = FieldChain("resolved", "resolved_complaints", "complaints_by_status.Closed", default=0)
REPORT_RESPONSE = FieldChain("average_response_time", "averageResponseTime", "avg_response", default=0)
REPORT_RESOLUTION = FieldChain("average_resolution_time", "averageResolutionTime", "avg_resolution", default=0)
REPORT_BY_STATUS = FieldChain("complaints_by_status", "complaintsByStatus", "by_status")
REPORT_BY_CATEGORY = FieldChain("complaints_by_category", "complaintsByCategory", "by_type", "by_category")
REPORT_BY_PRIORITY = FieldChain("complaints_by_priority", "complaintsByPriority", "by_priority")

# Settings
SETTING_EMAIL = FieldChain("email_notifications", "emailNotifications", default=False)
SETTING_SMS = FieldChain("sms_notifications", "smsNotifications", default=False)

# Reference option
OPTION_ID =FieldChain("id", "status_id", "type_id", "priority_id", "role_id")
OPTION_NAME = FieldChain("name", "label", "first_name", "username", "title", "code", default="")
OPTION_CODE = FieldChain("code", "slug", default="")


# ==================== Tagged record variants ====================

@dataclass(frozen=True)
class RawRecord:
    """Backend mapping that still needs field mapping"""
    data: Mapping


@dataclass(frozen=True)
class CanonicalRecord:
    """Value that already is (or serializes exactly to) a canonical entity"""
    entity: Any


@dataclass(frozen=True)
class UnrecognizedRecord:
    """Value of a shape the normalizer cannot use"""
    value: Any
    reason: str


ParsedRecord = Union[RawRecord, CanonicalRecord, UnrecognizedRecord]


def classify_record(raw: Any, entity_type: Type) -> ParsedRecord:
    """
    Classify one record for the given entity type.

    A mapping counts as canonical only if it is exactly the `to_dict()` form
    of an entity; anything close but not identical is treated as raw.
    """
    if isinstance(raw, entity_type):
        return CanonicalRecord(raw)

    if not isinstance(raw, Mapping):
        return UnrecognizedRecord(raw, f"expected a mapping, got {type(raw).__name__}")

    try:
        entity = entity_type.from_dict(raw)
    except (KeyError, ValueError, TypeError, AttributeError, OverflowError):
        # OverflowError: JSON numbers like 1e400 decode to inf
        return RawRecord(raw)

    if entity.to_dict() == dict(raw):
        return CanonicalRecord(entity)
    return RawRecord(raw)


# ==================== Scalar helpers ====================

def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a backend timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (with `Z`, an offset, or naive which is read as
    UTC), epoch seconds or milliseconds, and datetime objects. Returns None for
    anything unparseable.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        seconds = value / 1000 if value > 100_000_000_000 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _first_datetime(*candidates: Any) -> Optional[datetime]:
    for candidate in candidates:
        parsed = parse_datetime(candidate)
        if parsed is not None:
            return parsed
    return None


def _coerce_count(value: Any) -> int:
    """Non-negative int, or 0 when the value is not a number"""
    if isinstance(value, bool):
        return 0
    try:
        count = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(count, 0)


def _coerce_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def id_text(value: Any) -> str:
    """Backend id as text; integral floats (42.0) lose their fraction"""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _flag(value: Any) -> bool:
    """Backend boolean sent as true/false, 1/0 or "1"/"0" """
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return value is True or (isinstance(value, (int, float)) and value == 1)


def _coerce_hours(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        hours = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(hours) or hours < 0:
        return 0.0
    return hours


def _hours_between(start: datetime, end: datetime) -> float:
    return max((end - start).total_seconds() / 3600, 0.0)


def _average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


def _breakdown(value: Any) -> Dict[str, int]:
    """Label -> count mapping with unusable counts zeroed"""
    if not isinstance(value, Mapping):
        return {}
    return {str(label): _coerce_count(count) for label, count in value.items()}


# ==================== Status / enum mapping ====================

STATUS_ID_MAP = {
    1: ComplaintStatus.OPEN,
    2: ComplaintStatus.IN_PROGRESS,
    3: ComplaintStatus.CLOSED,
    4: ComplaintStatus.REFUSED,
}

# Checked in order; the first bucket with a matching substring wins
_STATUS_BUCKETS = (
    (("open",), ComplaintStatus.OPEN),
    (("progress", "pending"), ComplaintStatus.IN_PROGRESS),
    (("closed", "resolved"), ComplaintStatus.CLOSED),
    (("refused", "rejected"), ComplaintStatus.REFUSED),
)


def map_status(value: Any) -> ComplaintStatus:
    """
    Map backend status text (or a numeric status id) to a canonical status.

    Empty or unmatched input maps to OPEN.
    """
    if isinstance(value, ComplaintStatus):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return STATUS_ID_MAP.get(value, ComplaintStatus.OPEN)
    if not isinstance(value, str):
        return ComplaintStatus.OPEN

    text = value.strip().lower()
    if text.isdigit():
        return STATUS_ID_MAP.get(int(text), ComplaintStatus.OPEN)

    for needles, status in _STATUS_BUCKETS:
        if any(needle in text for needle in needles):
            return status
    return ComplaintStatus.OPEN


def map_priority(value: Any) -> Priority:
    text = str(value or "").strip().lower()
    if "urgent" in text or "critical" in text or "very high" in text:
        return Priority.URGENT
    if "high" in text:
        return Priority.HIGH
    if "low" in text:
        return Priority.LOW
    return Priority.MEDIUM


def map_problem_type(value: Any) -> ProblemType:
    text = str(value or "").strip().lower()
    if "late" in text:
        return ProblemType.LATE_ARRIVAL
    if "behav" in text:
        return ProblemType.BEHAVIOR
    if "missed" in text:
        return ProblemType.MISSED_SERVICE
    return ProblemType.OTHER


def map_role(role_text: str, role_id: Optional[int]) -> UserRole:
    if "admin" in role_text.lower():
        return UserRole.ADMIN
    if not role_text and role_id == ADMIN_ROLE_ID:
        return UserRole.ADMIN
    return UserRole.PROVIDER


# ==================== Normalizer ====================

class ResponseNormalizer:
    """
    Converts raw payloads into canonical entities.

    Holds only a clock, used as the last resort for missing timestamps and ids.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()

    # -------- shared plumbing --------

    def _normalize_list(
        self,
        payload: Any,
        named_fields: Sequence[str],
        entity_type: Type,
        mapper,
        indexed_objects: bool = False
    ) -> Tuple[Any, ...]:
        # Tuples, so a cached list cannot be changed in place by a reader
        results = []
        for record in resolve_envelope(payload, named_fields, indexed_objects):
            entity = self._normalize_record(record, entity_type, mapper)
            if entity is not None:
                results.append(entity)
        return tuple(results)

    def _normalize_record(self, record: Any, entity_type: Type, mapper) -> Optional[Any]:
        parsed = classify_record(record, entity_type)

        if isinstance(parsed, CanonicalRecord):
            return parsed.entity

        if isinstance(parsed, RawRecord):
            try:
                return mapper(parsed.data)
            except (ValueError, TypeError, OverflowError) as e:
                # Entity invariants (e.g. missing id) rejected the mapped record
                logger.debug(
                    f"Dropping {entity_type.__name__} record: {e}",
                    extra={"category": LogCategory.NORMALIZE}
                )
                return None

        logger.debug(
            f"Dropping unrecognized {entity_type.__name__} record: {parsed.reason}",
            extra={"category": LogCategory.NORMALIZE}
        )
        return None

    def _fallback_id(self) -> str:
        return str(int(self.clock.now() * 1000))

    # -------- complaints --------

    def normalize_complaints(self, payload: Any) -> Tuple[Complaint, ...]:
        """Complaint list from any list envelope"""
        return self._normalize_list(payload, ("complaints",), Complaint, self._map_complaint)

    def normalize_complaint(self, payload: Any) -> Optional[Complaint]:
        """
        Single complaint from `{"complaint": ...}`, `{"payload": ...}`,
        `{"data": ...}` or a bare record. None when the payload holds no record.
        """
        candidate = _unwrap_single(payload, ("complaint",))
        if candidate is None:
            return None
        return self._normalize_record(candidate, Complaint, self._map_complaint)

    def normalize_assigned_complaints(self, payload: Any) -> Tuple[Complaint, ...]:
        """Complaints assigned to other providers; this endpoint may send an indexed object"""
        return self._normalize_list(
            payload, ("complaints",), Complaint, self._map_complaint, indexed_objects=True
        )

    def _map_complaint(self, item: Mapping) -> Complaint:
        history = item.get("history")
        if not isinstance(history, (list, tuple)):
            history = []
        history = [h for h in history if isinstance(h, Mapping)]
        first = history[0] if history else {}
        last = history[-1] if history else {}

        raw_id = COMPLAINT_ID.resolve(item)
        complaint_id = id_text(raw_id) if raw_id is not None else self._fallback_id()

        status = map_status(HISTORY_STATUS.resolve(last)) if history else ComplaintStatus.OPEN

        type_name = TYPE_NAME.resolve_str(item) or "Other"
        if type_name == "Late Arrival":
            type_name = "Late arrival"

        submitted_at = _first_datetime(
            CREATED_AT.resolve(item),
            HISTORY_CREATED_AT.resolve(first),
        ) or self.clock.utcnow()
        updated_at = _first_datetime(
            UPDATED_AT.resolve(item),
            HISTORY_UPDATED_AT.resolve(last),
        ) or submitted_at

        assignee = HANDLED_BY.resolve_str(last) or None

        files = item.get("files")
        if not isinstance(files, (list, tuple)):
            files = []

        return Complaint(
            id=complaint_id,
            display_code=f"CMP-{complaint_id}",
            requester=REQUESTER.resolve_str(item) or "Unknown",
            problem_type=map_problem_type(type_name),
            type_label=type_name,
            description=DESCRIPTION.resolve_str(item),
            status=status,
            priority=map_priority(PRIORITY_LABEL.resolve(item)),
            submitted_at=submitted_at,
            updated_at=updated_at,
            assignee=assignee,
            attachments=tuple(
                self._map_attachment(f, index) for index, f in enumerate(files) if isinstance(f, Mapping)
            ),
            timeline=tuple(self._map_timeline_entry(h) for h in history),
        )

    def _map_attachment(self, item: Mapping, index: int) -> Attachment:
        file_id = FILE_ID.resolve_str(item) or f"file-{index}"
        return Attachment(
            id=file_id,
            name=FILE_NAME.resolve_str(item),
            url=FILE_URL.resolve_str(item),
            file_type=FILE_TYPE.resolve_str(item) or "image",
            size=_coerce_count(FILE_SIZE.resolve(item)),
            uploaded_at=parse_datetime(FILE_UPLOADED_AT.resolve(item)),
        )

    def _map_timeline_entry(self, item: Mapping) -> TimelineEntry:
        code = HISTORY_STATUS_CODE.resolve_str(item).lower()
        label = HISTORY_STATUS.resolve(item)
        if isinstance(label, int) and not isinstance(label, bool):
            label = STATUS_ID_MAP.get(label, ComplaintStatus.OPEN).value
        elif not isinstance(label, str):
            label = "Unknown"
        return TimelineEntry(
            status_label=label,
            status_code=code,
            description=HANDLER_REMARKS.resolve_str(item),
            handled_by=HANDLED_BY.resolve_str(item),
            occurred_at=parse_datetime(HISTORY_CREATED_AT.resolve(item)) or self.clock.utcnow(),
            is_completed=code == "closed",
            is_refused=code == "refused",
        )

    # -------- users --------

    def normalize_users(self, payload: Any) -> Tuple[User, ...]:
        return self._normalize_list(payload, ("users",), User, self._map_user)

    def normalize_user(self, payload: Any) -> Optional[User]:
        candidate = _unwrap_single(payload, ("user",))
        if candidate is None:
            return None
        return self._normalize_record(candidate, User, self._map_user)

    def _map_user(self, item: Mapping) -> User:
        raw_id = USER_ID.resolve(item)
        role_id = _coerce_optional_int(USER_ROLE_ID.resolve(item))
        role_text = USER_ROLE.resolve(item)
        if not isinstance(role_text, str):
            role_text = ""

        return User(
            id=id_text(raw_id) if raw_id is not None else "",
            email=USER_EMAIL.resolve_str(item),
            name=USER_NAME.resolve_str(item),
            role=map_role(role_text, role_id),
            role_id=role_id,
        )

    # -------- dashboard --------

    def normalize_stats(self, payload: Any) -> DashboardStats:
        """
        Dashboard counters from `states`, `payload`, `data` or a bare object.

        Always returns a value; missing counters are zero.
        """
        if isinstance(payload, DashboardStats):
            return payload

        inner = _resolve_object(payload, ("states",))
        if not isinstance(inner, Mapping):
            logger.debug(
                f"Stats payload of type {type(payload).__name__} has no counters",
                extra={"category": LogCategory.NORMALIZE}
            )
            return DashboardStats()

        parsed = classify_record(inner, DashboardStats)
        if isinstance(parsed, CanonicalRecord):
            return parsed.entity

        return DashboardStats(
            open=_coerce_count(STAT_OPEN.resolve(inner)),
            pending=_coerce_count(STAT_PENDING.resolve(inner)),
            resolved=_coerce_count(STAT_RESOLVED.resolve(inner)),
            refused=_coerce_count(STAT_REFUSED.resolve(inner)),
            raw=dict(inner),
        )

    # -------- notifications --------

    def normalize_notifications(self, payload: Any) -> Tuple[Notification, ...]:
        return self._normalize_list(
            payload, ("complaints", "notifications"), Notification, self._map_notification
        )

    def _map_notification(self, item: Mapping) -> Notification:
        raw_id = NOTIFICATION_ID.resolve(item)
        title = NOTIFICATION_TITLE.resolve_str(item)
        complaint_id = NOTIFICATION_COMPLAINT.resolve(item)

        channel_text = NOTIFICATION_CHANNEL.resolve_str(item).lower()
        try:
            channel = NotificationChannel(channel_text)
        except ValueError:
            channel = NotificationChannel.IN_APP

        return Notification(
            id=id_text(raw_id) if raw_id is not None else self._fallback_id(),
            message=NOTIFICATION_BODY.resolve_str(item) or title,
            title=title,
            complaint_id=id_text(complaint_id) if complaint_id is not None else None,
            created_at=parse_datetime(NOTIFICATION_CREATED_AT.resolve(item)) or self.clock.utcnow(),
            is_read=bool(NOTIFICATION_READ.resolve(item)),
            channel=channel,
        )

    # -------- reference metadata --------

    def normalize_reference_options(
        self,
        payload: Any,
        named_fields: Sequence[str] = ()
    ) -> Tuple[ReferenceOption, ...]:
        """
        Lookup list (statuses, types, priorities, roles, workers, ...).

        Args:
            payload: Raw response body
            named_fields: Endpoint-specific envelope names, e.g. ("types",)
        """
        return self._normalize_list(payload, named_fields, ReferenceOption, self._map_reference_option)

    def _map_reference_option(self, item: Mapping) -> ReferenceOption:
        name = OPTION_NAME.resolve_str(item)
        if not name:
            raise ValueError("option has no name")
        return ReferenceOption(
            name=name,
            id=_coerce_optional_int(OPTION_ID.resolve(item)),
            code=OPTION_CODE.resolve_str(item),
        )

    # -------- comments --------

    def normalize_comments(
        self,
        payload: Any,
        complaint_id: Optional[Any] = None
    ) -> Tuple[Comment, ...]:
        """
        Comment list, optionally narrowed to one complaint.

        The backend serves every comment the user can see from one endpoint,
        so per-complaint lists are filtered here. Comments with no complaint id
        never match a filter.
        """
        comments = self._normalize_list(payload, ("comments",), Comment, self._map_comment)
        if complaint_id is None:
            return comments
        wanted = complaint_key(complaint_id)
        return tuple(c for c in comments if c.complaint_id == wanted)

    def _map_comment(self, item: Mapping) -> Comment:
        complaint = COMMENT_COMPLAINT.resolve(item)
        complaint_id = complaint_key(complaint) if complaint is not None else ""

        # comment_by may carry a display name instead of a user id
        author_number = _coerce_optional_int(COMMENT_AUTHOR_ID.resolve(item))
        author_id = str(author_number) if author_number is not None else ""

        raw_id = COMMENT_ID.resolve(item)
        if raw_id is not None:
            comment_id = id_text(raw_id)
        elif complaint_id and author_id:
            comment_id = f"{complaint_id}:{author_id}"
        else:
            comment_id = self._fallback_id()

        mentions = item.get("mentions")
        if not isinstance(mentions, (list, tuple)):
            mentions = ()

        created_at = parse_datetime(COMMENT_CREATED_AT.resolve(item)) or self.clock.utcnow()
        role = COMMENT_AUTHOR_ROLE.resolve(item)

        return Comment(
            id=comment_id,
            complaint_id=complaint_id,
            author_id=author_id,
            author_name=COMMENT_AUTHOR_NAME.resolve_str(item) or "Unknown",
            author_role=role if isinstance(role, str) else "provider",
            message=COMMENT_MESSAGE.resolve_str(item),
            is_internal=_flag(COMMENT_INTERNAL.resolve(item)),
            mentions=tuple(str(m) for m in mentions),
            created_at=created_at,
            updated_at=parse_datetime(COMMENT_UPDATED_AT.resolve(item)) or created_at,
        )

    # -------- reports --------

    def normalize_report(self, payload: Any, start_date: str, end_date: str) -> ComplaintReport:
        """
        Report for a date range (YYYY-MM-DD, inclusive).

        A payload carrying complaint records is aggregated here, counting only
        complaints submitted inside the range. A payload carrying precomputed
        counters is mapped through the report field chains. Always returns a
        value.
        """
        if isinstance(payload, ComplaintReport):
            return payload

        records = resolve_envelope(payload, ("complaints",))
        if records:
            return self._aggregate_report(self.normalize_complaints(records), start_date, end_date)

        inner = _resolve_object(payload, ("report", "reports"))
        if not isinstance(inner, Mapping):
            logger.debug(
                f"Report payload of type {type(payload).__name__} has no counters",
                extra={"category": LogCategory.NORMALIZE}
            )
            return ComplaintReport(start_date=start_date, end_date=end_date)

        parsed = classify_record(inner, ComplaintReport)
        if isinstance(parsed, CanonicalRecord):
            return parsed.entity

        by_status = _breakdown(REPORT_BY_STATUS.resolve(inner))
        return ComplaintReport(
            start_date=start_date,
            end_date=end_date,
            total_complaints=_coerce_count(REPORT_TOTAL.resolve(inner)) or sum(by_status.values()),
            resolved=_coerce_count(REPORT_RESOLVED.resolve(inner)),
            average_response_hours=_coerce_hours(REPORT_RESPONSE.resolve(inner)),
            average_resolution_hours=_coerce_hours(REPORT_RESOLUTION.resolve(inner)),
            by_status=by_status,
            by_category=_breakdown(REPORT_BY_CATEGORY.resolve(inner)),
            by_priority=_breakdown(REPORT_BY_PRIORITY.resolve(inner)),
        )

    def _aggregate_report(
        self,
        complaints: Sequence[Complaint],
        start_date: str,
        end_date: str
    ) -> ComplaintReport:
        window_start = parse_datetime(f"{start_date}T00:00:00")
        window_end = parse_datetime(f"{end_date}T23:59:59")

        by_status: Dict[str, int] = {s.value: 0 for s in ComplaintStatus}
        by_priority: Dict[str, int] = {p.value: 0 for p in Priority}
        by_category: Dict[str, int] = {}
        response_hours: List[float] = []
        resolution_hours: List[float] = []
        total = 0

        for complaint in complaints:
            submitted = complaint.submitted_at
            if window_start and submitted and submitted < window_start:
                continue
            if window_end and submitted and submitted > window_end:
                continue

            total += 1
            by_status[complaint.status.value] += 1
            by_priority[complaint.priority.value] += 1
            category = complaint.type_label or complaint.problem_type.value
            by_category[category] = by_category.get(category, 0) + 1

            if submitted and len(complaint.timeline) > 1:
                response_hours.append(_hours_between(submitted, complaint.timeline[1].occurred_at))
            if submitted and complaint.updated_at and complaint.status.is_terminal:
                resolution_hours.append(_hours_between(submitted, complaint.updated_at))

        return ComplaintReport(
            start_date=start_date,
            end_date=end_date,
            total_complaints=total,
            resolved=by_status[ComplaintStatus.CLOSED.value],
            average_response_hours=_average(response_hours),
            average_resolution_hours=_average(resolution_hours),
            by_status=by_status,
            by_category=by_category,
            by_priority=by_priority,
        )

    # -------- settings --------

    def normalize_settings(self, payload: Any) -> UserSettings:
        """Notification preferences; flags arrive as booleans or 1/0"""
        if isinstance(payload, UserSettings):
            return payload

        inner = _resolve_object(payload, ("setting", "settings"))
        if not isinstance(inner, Mapping):
            return UserSettings()

        return UserSettings(
            email_notifications=_flag(SETTING_EMAIL.resolve(inner)),
            sms_notifications=_flag(SETTING_SMS.resolve(inner)),
        )
