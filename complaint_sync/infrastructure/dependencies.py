"""
Dependency wiring for the synchronization layer

Builds one fully connected set of components per client session. Nothing here
is a module-level singleton: call `build_sync_client()` again (e.g. after
logout) to get fresh, empty caches.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from ..application import FetchOrchestrator, InvalidationCoordinator, MutationService
from ..cache import CacheService
from ..core.clock import Clock, SystemClock
from ..core.config import PortalSettings, get_portal_settings
from ..core.logging_framework import setup_logging
from ..domain.ports import ComplaintApiPort
from ..events import EventBus
from ..services import ResponseNormalizer
from .http_api_client import HttpComplaintApi

logger = logging.getLogger(__name__)


@dataclass
class SyncClient:
    """Components sharing one cache, one event bus and one API client"""
    settings: PortalSettings
    api: ComplaintApiPort
    cache: CacheService
    event_bus: EventBus
    normalizer: ResponseNormalizer
    orchestrator: FetchOrchestrator
    invalidation: InvalidationCoordinator
    mutations: MutationService

    async def close(self) -> None:
        """Drop cached data and release the HTTP client"""
        self.cache.clear()
        if isinstance(self.api, HttpComplaintApi):
            await self.api.close()

    async def __aenter__(self) -> "SyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


def build_sync_client(
    settings: Optional[PortalSettings] = None,
    api: Optional[ComplaintApiPort] = None,
    clock: Optional[Clock] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    configure_logging: bool = False
) -> SyncClient:
    """
    Create and connect every component.

    Args:
        settings: Defaults to the cached environment settings
        api: Backend port; defaults to HttpComplaintApi
        clock: Time source for cache freshness; defaults to SystemClock
        transport: Optional httpx transport for the default API client
        configure_logging: Install the package log handler from settings

    Returns:
        SyncClient with the invalidation coordinator subscribed to the bus
    """
    settings = settings or get_portal_settings()
    if configure_logging:
        setup_logging(settings)

    clock = clock or SystemClock()
    api = api or HttpComplaintApi(settings, transport=transport)

    cache = CacheService(settings, clock=clock)
    event_bus = EventBus()
    normalizer = ResponseNormalizer(clock)

    invalidation = InvalidationCoordinator(cache)
    invalidation.attach(event_bus)

    orchestrator = FetchOrchestrator(
        api,
        cache,
        normalizer,
        discard_superseded=settings.DISCARD_SUPERSEDED_RESPONSES
    )

    logger.debug(
        f"Sync client built for {settings.API_BASE_URL} "
        f"(discard_superseded={settings.DISCARD_SUPERSEDED_RESPONSES})"
    )

    return SyncClient(
        settings=settings,
        api=api,
        cache=cache,
        event_bus=event_bus,
        normalizer=normalizer,
        orchestrator=orchestrator,
        invalidation=invalidation,
        mutations=MutationService(api, event_bus),
    )
