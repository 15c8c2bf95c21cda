"""Domain models - value types returned by the normalizer and API filters"""

from .dashboard import DashboardStats
from .reference import ReferenceOption
from .report import ComplaintReport
from .search import ComplaintFilters
from .settings import UserSettings

__all__ = [
    "DashboardStats",
    "ReferenceOption",
    "ComplaintReport",
    "ComplaintFilters",
    "UserSettings",
]
