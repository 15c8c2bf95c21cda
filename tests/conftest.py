"""
Pytest Configuration and Shared Fixtures

Provides common fixtures for testing the synchronization layer without
a portal backend or network access.
"""
import os
import sys
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Keep a developer's .env or shell settings out of the tests
for _name in (
    "API_BASE_URL", "API_TOKEN", "CACHE_TTL_SECONDS", "ACTIVITY_TTL_SECONDS", "LOG_LEVEL", "LOG_JSON",
):
    os.environ.pop(_name, None)


# ==================== Core Fixtures ====================

@pytest.fixture
def settings():
    """Settings with zero retry delay, isolated from the environment"""
    from complaint_sync.core.config import PortalSettings
    return PortalSettings(
        _env_file=None,
        API_BASE_URL="http://portal.test/api",
        RETRY_BASE_DELAY_SECONDS=0.0,
        RETRY_MAX_DELAY_SECONDS=0.0,
    )


@pytest.fixture
def clock():
    """Manual clock starting at a fixed instant"""
    from complaint_sync.core.clock import ManualClock
    return ManualClock(start=1_700_000_000.0)


@pytest.fixture
def cache(settings, clock):
    """Empty cache service on the manual clock"""
    from complaint_sync.cache import CacheService
    return CacheService(settings, clock=clock)


@pytest.fixture
def normalizer(clock):
    from complaint_sync.services import ResponseNormalizer
    return ResponseNormalizer(clock)


# ==================== Mock Service Fixtures ====================

@pytest.fixture
def mock_api():
    """Provide mock portal API"""
    from tests.mocks import MockComplaintApi
    api = MockComplaintApi()
    yield api
    api.reset()


# ==================== Component Fixtures ====================

@pytest.fixture
def event_bus(cache):
    """Event bus with the invalidation coordinator attached"""
    from complaint_sync.events import EventBus
    from complaint_sync.application import InvalidationCoordinator
    bus = EventBus()
    InvalidationCoordinator(cache).attach(bus)
    return bus


@pytest.fixture
def orchestrator(mock_api, cache, normalizer):
    from complaint_sync.application import FetchOrchestrator
    return FetchOrchestrator(mock_api, cache, normalizer)


@pytest.fixture
def mutations(mock_api, event_bus):
    from complaint_sync.application import MutationService
    return MutationService(mock_api, event_bus)


@pytest.fixture
def state_log(orchestrator):
    """Every LoadState transition of the orchestrator, in order"""
    states = []
    orchestrator.add_state_listener(states.append)
    return states
