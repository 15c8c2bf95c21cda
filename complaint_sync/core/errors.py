"""
Application Exception Hierarchy
Consistent error types for the synchronization layer.

Shape problems in backend payloads are never raised; they normalize to empty
results. Transport failures are raised by the API adapter and recovered by the
fetch orchestrator. Mutation failures always reach the caller.
"""
from typing import Optional, Dict, Any
from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
import traceback
import uuid


class ErrorCode(str, Enum):
    """Standardized error codes"""
    # General errors (1xxx)
    INTERNAL_ERROR = "ERR_1000"
    VALIDATION_ERROR = "ERR_1001"
    NOT_FOUND = "ERR_1002"
    CONFIGURATION_ERROR = "ERR_1006"

    # Authentication errors (2xxx)
    UNAUTHORIZED = "ERR_2000"

    # Mutation errors (5xxx)
    MUTATION_FAILED = "ERR_5000"
    MUTATION_REJECTED = "ERR_5001"

    # External service errors (6xxx)
    EXTERNAL_SERVICE_ERROR = "ERR_6000"
    TRANSPORT_TIMEOUT = "ERR_6001"
    UPSTREAM_STATUS = "ERR_6002"
    INVALID_RESPONSE = "ERR_6003"


@dataclass
class ErrorContext:
    """Additional context for errors"""
    request_id: str = field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


class AppError(Exception):
    """
    Base application exception.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        context: Optional[ErrorContext] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause
        self.context = context or ErrorContext()

        # Capture stack trace
        self._stack_trace = traceback.format_exc() if cause else None

    def to_dict(self, include_trace: bool = False) -> Dict[str, Any]:
        """Convert exception to a serializable dictionary"""
        result = {
            "success": False,
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details
            },
            "meta": {
                "request_id": self.context.request_id,
                "timestamp": self.context.timestamp.isoformat()
            }
        }

        if include_trace and self._stack_trace:
            result["error"]["trace"] = self._stack_trace

        return result

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class ConfigurationError(AppError):
    """Invalid or missing configuration"""

    def __init__(self, message: str = "Invalid configuration", **kwargs):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, **kwargs)


# ==================== Transport Errors ====================

class TransportError(AppError):
    """Network failure, timeout or non-2xx response from the portal API"""

    def __init__(
        self,
        operation: str,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        **kwargs
    ):
        if message is None:
            message = f"Request failed: {operation}"

        details = kwargs.pop("details", {})
        details["operation"] = operation
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(message, code, details=details, **kwargs)
        self.operation = operation
        self.status_code = status_code

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401


class TransportTimeoutError(TransportError):
    """Request did not complete within the configured timeout"""

    def __init__(self, operation: str, timeout: float, **kwargs):
        super().__init__(
            operation,
            message=f"{operation} timed out after {timeout}s",
            code=ErrorCode.TRANSPORT_TIMEOUT,
            **kwargs
        )


# ==================== Mutation Errors ====================

class MutationError(AppError):
    """A create/update/delete did not persist"""

    def __init__(
        self,
        operation: str,
        message: Optional[str] = None,
        code: ErrorCode = ErrorCode.MUTATION_FAILED,
        **kwargs
    ):
        if message is None:
            message = f"Mutation failed: {operation}"

        details = kwargs.pop("details", {})
        details["operation"] = operation

        super().__init__(message, code, details=details, **kwargs)
        self.operation = operation


class MutationRejectedError(MutationError):
    """The backend answered 2xx but reported the mutation as unsuccessful"""

    def __init__(self, operation: str, backend_message: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if backend_message:
            details["backend_message"] = backend_message

        super().__init__(
            operation,
            message=backend_message or f"{operation} was rejected by the server",
            code=ErrorCode.MUTATION_REJECTED,
            details=details,
            **kwargs
        )
