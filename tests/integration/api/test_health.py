"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient

from api.routes.health import VERSION
from infrastructure.realtime.change_feed import ChangeFeed


class TestHealthEndpoint:
    @pytest.mark.asyncio
    async def test_liveness_needs_no_auth_or_store(self, client: AsyncClient) -> None:
        """GET /health answers without touching the database."""
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == VERSION
        assert data["database"] is None
        assert data["live_subscriptions"] is None
        assert data["timestamp"]

    @pytest.mark.asyncio
    async def test_carries_security_headers_and_request_id(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.headers["x-content-type-options"] == "nosniff"
        assert "x-request-id" in response.headers


class TestDetailedHealthEndpoint:
    @pytest.mark.asyncio
    async def test_reports_database_and_subscriptions(
        self, authenticated_client: AsyncClient, change_feed: ChangeFeed
    ) -> None:
        """Database is reachable and open subscriptions are counted."""
        async with change_feed.subscribe(["user:someone"]):
            response = await authenticated_client.get("/health/detailed")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["live_subscriptions"] == 1
