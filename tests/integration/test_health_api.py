"""
Integration tests for health, version and domain endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from prompt_refiner.api.app import create_app
from prompt_refiner.orchestration.orchestrator import PromptOrchestrator
from prompt_refiner.version import API_VERSION


@pytest.mark.integration
class TestHealthEndpoint:
    """Test GET /health."""

    def test_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == API_VERSION
        assert data["cache_available"] is True
        assert data["store_available"] is True
        assert data["uptime_seconds"] >= 0

    @pytest.mark.asyncio
    async def test_degraded_when_cache_down(self, async_client, orchestrator):
        await orchestrator.cache.disconnect()

        response = await async_client.get("/health")

        assert response.json()["status"] == "degraded"
        assert response.json()["cache_available"] is False

    def test_without_collaborators(self, analyzer):
        """No cache and no store is still healthy."""
        app = create_app(orchestrator=PromptOrchestrator(analyzer=analyzer))
        with TestClient(app) as client:
            data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["cache_available"] is False


@pytest.mark.integration
class TestVersionAndDomains:
    """Test GET /api/v1/version and GET /api/v1/domains."""

    def test_version(self, client):
        response = client.get("/api/v1/version")

        assert response.status_code == 200
        data = response.json()
        assert data["api_version"] == API_VERSION
        assert data["pipeline_version"]["fingerprint_version"] == "fp-sha256-2"
        assert data["pipeline_version"]["tokenizer_version"] == "regex-1.0.0"

    def test_domains(self, client):
        response = client.get("/api/v1/domains")

        assert response.status_code == 200
        data = response.json()
        names = {d["domain"] for d in data["domains"]}
        assert names == {"sql", "branding", "cine", "saas", "devops", "general"}
        assert data["weights"]["sql"]["specificity"] == 0.35
