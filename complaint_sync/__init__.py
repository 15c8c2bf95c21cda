"""
complaint_sync - client-side data synchronization for the complaint portal

Canonical domain model, response normalizer, per-domain TTL caches, a
staleness-aware fetch orchestrator and mutation-driven invalidation.
"""
from .application import (
    FetchOrchestrator,
    FetchReport,
    InvalidationCoordinator,
    LoadState,
    MutationService,
    Screen,
)
from .cache import CacheDomain, CacheService
from .infrastructure import HttpComplaintApi, SyncClient, build_sync_client
from .services import ResponseNormalizer

__version__ = "0.1.0"

__all__ = [
    "FetchOrchestrator",
    "FetchReport",
    "InvalidationCoordinator",
    "LoadState",
    "MutationService",
    "Screen",
    "CacheDomain",
    "CacheService",
    "HttpComplaintApi",
    "SyncClient",
    "build_sync_client",
    "ResponseNormalizer",
]
