"""
Logging Framework
JSON or human-readable output for the synchronization layer, driven by settings.

Modules log through `logging.getLogger(__name__)`. Records may carry a
`category` (see LogCategory) and an `extra_data` dict via the `extra` argument:

    logger.warning(
        "Fetch failed for stats",
        extra={"category": LogCategory.FETCH, "extra_data": {"domain": "stats"}}
    )
"""
import sys
import json
import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .config import PortalSettings, get_portal_settings


ROOT_LOGGER_NAME = "complaint_sync"


class LogCategory(str, Enum):
    """Log categories for filtering and routing"""
    CACHE = "cache"
    FETCH = "fetch"
    NORMALIZE = "normalize"
    INVALIDATION = "invalidation"
    MUTATION = "mutation"
    EXTERNAL_API = "external_api"


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter, one object per line"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno
        }

        if hasattr(record, "category"):
            category = record.category
            log_data["category"] = category.value if isinstance(category, Enum) else category
        if hasattr(record, "duration_ms"):
            log_data["duration_ms"] = record.duration_ms
        if hasattr(record, "extra_data"):
            log_data["data"] = record.extra_data

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info)
            }

        return json.dumps(log_data, ensure_ascii=False, default=str)


class DevelopFormatter(logging.Formatter):
    """Human-readable formatter for local runs"""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        base = f"[{timestamp}] {record.levelname:8} {record.name}: {record.getMessage()}"

        if hasattr(record, "category"):
            category = record.category
            base = f"{base} [{category.value if isinstance(category, Enum) else category}]"

        if getattr(record, "extra_data", None):
            base = f"{base}\n    -> {json.dumps(record.extra_data, ensure_ascii=False, default=str)}"

        if record.exc_info:
            base = f"{base}\n{''.join(traceback.format_exception(*record.exc_info))}"

        return base


def setup_logging(settings: Optional[PortalSettings] = None) -> logging.Logger:
    """
    Configure the package logger from settings.

    Replaces any handler previously installed by this function, so calling it
    twice does not duplicate output.
    """
    settings = settings or get_portal_settings()

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = getattr(logging, settings.LOG_LEVEL)
    logger.setLevel(level)

    logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if settings.LOG_JSON:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopFormatter())

    logger.addHandler(handler)
    logger.propagate = False

    return logger
