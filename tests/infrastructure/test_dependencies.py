"""
Tests for component wiring
"""
import pytest
import httpx


class TestBuildSyncClient:
    """End-to-end behavior of a wired client"""

    @pytest.mark.asyncio
    async def test_mutation_invalidates_through_bus(self, settings, mock_api, clock):
        from complaint_sync.application import Screen
        from complaint_sync.infrastructure import build_sync_client

        client = build_sync_client(settings, api=mock_api, clock=clock)

        await client.orchestrator.load_screen(Screen.PROVIDER_DASHBOARD)
        await client.mutations.create_complaint({"description": "Missed pickup"})
        await client.orchestrator.load_screen(Screen.PROVIDER_DASHBOARD)

        assert mock_api.call_count("list_complaints") == 2
        assert mock_api.call_count("list_statuses") == 1

    @pytest.mark.asyncio
    async def test_discard_setting_passed_through(self, mock_api, clock):
        from complaint_sync.core.config import PortalSettings
        from complaint_sync.infrastructure import build_sync_client

        settings = PortalSettings(_env_file=None, DISCARD_SUPERSEDED_RESPONSES=True)
        client = build_sync_client(settings, api=mock_api, clock=clock)

        assert client.orchestrator.discard_superseded is True
        assert client.cache.clock is clock
        assert client.normalizer.clock is clock

    @pytest.mark.asyncio
    async def test_sessions_do_not_share_state(self, settings, mock_api, clock):
        from complaint_sync.cache import CacheDomain
        from complaint_sync.infrastructure import build_sync_client

        first = build_sync_client(settings, api=mock_api, clock=clock)
        second = build_sync_client(settings, api=mock_api, clock=clock)

        await first.orchestrator.load([CacheDomain.USERS])

        assert second.cache.get(CacheDomain.USERS) is None
        assert second.event_bus is not first.event_bus

    @pytest.mark.asyncio
    async def test_close_clears_cache_and_http_client(self, settings, clock):
        from complaint_sync.cache import CacheDomain
        from complaint_sync.infrastructure import HttpComplaintApi, build_sync_client

        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"roles": [{"id": 1, "name": "Admin"}]}))

        async with build_sync_client(settings, clock=clock, transport=transport) as client:
            assert isinstance(client.api, HttpComplaintApi)
            report = await client.orchestrator.load([CacheDomain.ROLES])
            assert report[CacheDomain.ROLES][0].name == "Admin"

        assert client.cache.get(CacheDomain.ROLES) is None
        assert client.api.http_client.is_closed
