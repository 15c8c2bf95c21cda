"""
Mock Services for Testing

Provides lightweight mock implementations that don't require
the portal backend or network access.
"""
from .mock_complaint_api import (
    MockComplaintApi,
    COMPLAINT_42,
    COMPLAINT_43,
    DASHBOARD_STATES,
    COMMENTS,
    REPORT,
)

__all__ = [
    "MockComplaintApi",
    "COMPLAINT_42",
    "COMPLAINT_43",
    "DASHBOARD_STATES",
    "COMMENTS",
    "REPORT",
]
