"""Tests for routing an httpx client through the worker."""

import httpx
import pytest

from conftest import API_URL, APP_URL
from src.fallback.synthesizer import FallbackSynthesizer
from src.transport import OfflineCacheTransport


class TestOfflineCacheTransport:
    """Test suite for OfflineCacheTransport."""

    @pytest.fixture
    def passthrough_calls(self):
        return []

    @pytest.fixture
    def transport(self, worker, passthrough_calls):
        def passthrough(request):
            passthrough_calls.append((request.method, str(request.url), request.content))
            return httpx.Response(201, json={"saved": True})

        return OfflineCacheTransport(worker, passthrough=httpx.MockTransport(passthrough))

    @pytest.mark.asyncio
    async def test_get_served_by_worker(self, transport, routes):
        """Test GET requests are answered through the worker."""
        routes.fail(API_URL)

        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get(API_URL)

        assert response.status_code == 200
        assert response.json() == FallbackSynthesizer.offline_payload()

    @pytest.mark.asyncio
    async def test_non_get_passes_through_unmodified(self, transport, routes, passthrough_calls):
        """Test non-GET requests go to the pass-through transport untouched."""
        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.put(API_URL, content=b'{"record": {"studyTasks": []}}')

        assert response.status_code == 201
        assert passthrough_calls == [("PUT", API_URL, b'{"record": {"studyTasks": []}}')]
        assert routes.calls == []

    @pytest.mark.asyncio
    async def test_document_destination_from_header(self, transport, routes):
        """Test Sec-Fetch-Dest marks navigations for the offline page."""
        routes.fail(APP_URL)

        async with httpx.AsyncClient(transport=transport) as client:
            response = await client.get(APP_URL, headers={"Sec-Fetch-Dest": "document"})

        assert response.status_code == 200
        assert "Try Again" in response.text
