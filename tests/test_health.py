"""Tests for health check API endpoints."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from httpx import AsyncClient

from tickerboard.core.config import Settings


class TestHealthEndpoint:
    """Tests for GET /health."""

    def test_health_returns_200(self, client: TestClient):
        """GET /health returns 200 OK."""
        response = client.get("/health")
        assert response.status_code == status.HTTP_200_OK

    def test_health_reports_healthy_with_defaults(self, client: TestClient):
        """The default upstream passes the allow-list."""
        data = client.get("/health").json()
        assert data["status"] == "healthy"
        assert data["checks"]["upstream_configured"] is True
        assert data["checks"]["remote_relay"] is False

    def test_health_returns_version(self, client: TestClient):
        """GET /health returns the app version."""
        data = client.get("/health").json()
        assert data["version"] == "1.0.0"
        assert "timestamp" in data

    def test_health_degraded_on_foreign_upstream(self, client: TestClient):
        """An upstream outside the allowed domain is reported, not fatal."""
        mismatched = Settings(upstream_base_url="https://example.org", allowed_domain="statusinvest.com.br")
        with patch("tickerboard.api.routes.health.settings", mismatched):
            data = client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["checks"]["upstream_configured"] is False


class TestLivenessEndpoint:
    """Tests for GET /health/live."""

    def test_live_returns_alive_status(self, client: TestClient):
        """GET /health/live returns alive status."""
        response = client.get("/health/live")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "alive"

    @pytest.mark.asyncio
    async def test_live_without_lifespan(self, async_client: AsyncClient):
        """Liveness answers even before startup has run."""
        response = await async_client.get("/health/live")
        assert response.status_code == status.HTTP_200_OK


class TestUnknownRoutes:
    """Tests for unregistered paths."""

    def test_unknown_route_returns_404(self, client: TestClient):
        response = client.get("/api/nope")
        assert response.status_code == status.HTTP_404_NOT_FOUND
