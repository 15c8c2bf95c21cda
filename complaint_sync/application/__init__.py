"""
Application Layer - orchestration of fetches, invalidation and mutations
"""
from .fetch_orchestrator import (
    FetchOrchestrator,
    FetchReport,
    LoadState,
    Screen,
    SCREEN_DOMAINS,
    STATUS_LIST_DOMAINS,
)
from .invalidation import InvalidationCoordinator
from .mutations import MutationService

__all__ = [
    "FetchOrchestrator",
    "FetchReport",
    "LoadState",
    "Screen",
    "SCREEN_DOMAINS",
    "STATUS_LIST_DOMAINS",
    "InvalidationCoordinator",
    "MutationService",
]
