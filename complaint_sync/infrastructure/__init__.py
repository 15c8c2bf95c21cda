"""Infrastructure - HTTP adapter and component wiring"""

from .http_api_client import HttpComplaintApi
from .dependencies import SyncClient, build_sync_client

__all__ = [
    "HttpComplaintApi",
    "SyncClient",
    "build_sync_client",
]
