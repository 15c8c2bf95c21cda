"""Core - configuration, errors, logging and time source"""

from .clock import Clock, SystemClock, ManualClock
from .config import PortalSettings, get_portal_settings
from .errors import (
    ErrorCode,
    ErrorContext,
    AppError,
    ConfigurationError,
    TransportError,
    TransportTimeoutError,
    MutationError,
    MutationRejectedError,
)
from .logging_framework import LogCategory, StructuredFormatter, setup_logging

__all__ = [
    "Clock",
    "SystemClock",
    "ManualClock",
    "PortalSettings",
    "get_portal_settings",
    "ErrorCode",
    "ErrorContext",
    "AppError",
    "ConfigurationError",
    "TransportError",
    "TransportTimeoutError",
    "MutationError",
    "MutationRejectedError",
    "LogCategory",
    "StructuredFormatter",
    "setup_logging",
]
