"""
Integration tests for the prompt endpoints.

Tests the /api/v1/prompts routes against an orchestrator wired with an
in-memory cache, an in-memory SQLite store and telemetry.
"""

from unittest.mock import patch

import pytest

from prompt_refiner.exceptions import PipelineTimeoutError


SAVE_BODY = {
    "input": {"raw": "make query fast", "domain": "sql"},
    "metadata": {"name": "Fast query", "domain": "sql", "tags": ["sql", "performance"]},
}


@pytest.mark.integration
class TestProcessEndpoint:
    """Test POST /api/v1/prompts/process."""

    def test_process_success(self, client):
        response = client.post("/api/v1/prompts/process", json={"raw": "make query fast", "domain": "sql"})

        assert response.status_code == 200
        data = response.json()
        assert data["refined"].startswith("Optimize the SQL query for performance.")
        assert data["metadata"]["domain"] == "sql"
        assert data["metadata"]["cache_hit"] is False
        assert data["metadata"]["fingerprint"].startswith("sha256-")
        assert 0.0 <= data["score"]["overall"] <= 1.0
        assert "X-Request-ID" in response.headers

    def test_process_cache_hit(self, client):
        body = {"raw": "make query fast", "domain": "sql"}
        first = client.post("/api/v1/prompts/process", json=body).json()
        second = client.post("/api/v1/prompts/process", json=body).json()

        assert second["metadata"]["cache_hit"] is True
        assert second["refined"] == first["refined"]

    @pytest.mark.parametrize("body", [
        {"raw": "   "},
        {"raw": ""},
        {"raw": "make query fast", "domain": "astrology"},
        {"raw": "make query fast", "tone": "sarcastic"},
        {},
    ])
    def test_process_invalid_input(self, client, body):
        response = client.post("/api/v1/prompts/process", json=body)

        assert response.status_code == 422

    def test_process_timeout(self, client, orchestrator):
        with patch.object(orchestrator, "process", side_effect=PipelineTimeoutError("too slow")):
            response = client.post("/api/v1/prompts/process", json={"raw": "make query fast"})

        assert response.status_code == 504
        assert response.json()["detail"] == "too slow"

    def test_process_unexpected_error(self, client, orchestrator):
        with patch.object(orchestrator, "process", side_effect=RuntimeError("kaput")):
            response = client.post("/api/v1/prompts/process", json={"raw": "make query fast"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Process failed: kaput"


@pytest.mark.integration
class TestEvaluateAndCompareEndpoints:
    """Test POST /evaluate and POST /compare."""

    def test_evaluate(self, client):
        response = client.post(
            "/api/v1/prompts/evaluate",
            json={"prompt": "do thing", "criteria": ["clarity"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["validation"]["is_valid"] is False
        assert data["recommendations"][0]["priority"] == "critical"

    def test_compare(self, client):
        response = client.post(
            "/api/v1/prompts/compare",
            json={"prompts": [
                "make query fast",
                "Optimize the SQL query for performance. Review the execution plan first, "
                "then add indexes on filtered columns and return the expected response time.",
            ]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["winner_index"] == 1
        assert data["winner_id"] == "variant_1"
        assert len(data["comparison"]) == 5

    def test_compare_single_variant(self, client):
        response = client.post("/api/v1/prompts/compare", json={"prompts": ["only one"]})

        assert response.status_code == 422
        assert "At least 2 prompt variants" in response.json()["detail"]


@pytest.mark.integration
class TestStoreEndpoints:
    """Test save, get, search and stats."""

    def test_save_and_get(self, client):
        response = client.post("/api/v1/prompts", json=SAVE_BODY)

        assert response.status_code == 201
        saved = response.json()
        assert saved["name"] == "Fast query"
        assert saved["original"] == "make query fast"

        fetched = client.get(f"/api/v1/prompts/{saved['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["prompt"] == saved["prompt"]

    def test_get_unknown(self, client):
        response = client.get("/api/v1/prompts/does-not-exist")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"]

    def test_search_and_stats(self, client):
        client.post("/api/v1/prompts", json=SAVE_BODY)

        search = client.get("/api/v1/prompts/search", params={"domain": "sql", "tags": ["performance"]})
        stats = client.get("/api/v1/prompts/stats")

        assert search.status_code == 200
        assert search.json()["total"] == 1
        assert 0.0 <= search.json()["results"][0]["relevance"] <= 1.0
        assert stats.status_code == 200
        assert stats.json()["total_prompts"] == 1
        assert stats.json()["domain_distribution"] == {"sql": 1}

    def test_search_invalid_params(self, client):
        response = client.get("/api/v1/prompts/search", params={"limit": 0})

        assert response.status_code == 422

    def test_store_unavailable(self, client, orchestrator):
        orchestrator.store = None

        response = client.get("/api/v1/prompts/stats")

        assert response.status_code == 503
        assert response.json()["detail"].startswith("Prompt store unavailable")


@pytest.mark.integration
@pytest.mark.asyncio
class TestAsyncClient:
    """Exercise the app through the async httpx client."""

    async def test_process(self, async_client):
        response = await async_client.post(
            "/api/v1/prompts/process",
            json={"raw": "hazme un logo bonito para mi marca", "domain": "branding"},
        )

        assert response.status_code == 200
        assert response.json()["metadata"]["domain"] == "branding"
