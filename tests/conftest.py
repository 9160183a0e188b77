"""
Global pytest fixtures and configuration for test suite.

This module provides reusable fixtures for:
- HTTP clients (sync TestClient and async httpx client)
- Orchestrator wired with in-memory collaborators
- Mock settings/configuration
- Sample prompts
"""

import os

# Tests never need a downloaded spaCy model; set before settings are created
os.environ.setdefault("ANALYZER_USE_SPACY", "false")
os.environ.setdefault("LOG_JSON", "false")

from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from prompt_refiner.analysis.analyzer import PromptAnalyzer
from prompt_refiner.api.app import create_app
from prompt_refiner.config import Settings
from prompt_refiner.orchestration.orchestrator import PromptOrchestrator
from prompt_refiner.services import Database, InMemoryCache, SqlPromptStore, StructlogTelemetry


SAMPLE_PROMPTS = {
    "sql_vague": "make query fast",
    "sql_specific": "Create a PostgreSQL users table with id, name, email columns",
    "vague": "do thing",
    "branding_es": "hazme un logo bonito para mi marca",
    "devops": "deploy my app to aws with docker",
    "with_variables": "Write a summary of {{document}} for {{audience}}",
}


@pytest.fixture
def analyzer() -> PromptAnalyzer:
    """Analyzer pinned to the regex tokenizer."""
    return PromptAnalyzer(use_spacy=False)


@pytest.fixture
def database() -> Generator[Database, None, None]:
    """
    In-memory SQLite database with the store tables created.

    Yields:
        Database instance (disposed after the test)
    """
    db = Database(url="sqlite://")
    db.create_all_tables()
    yield db
    db.drop_all_tables()
    db.dispose()


@pytest.fixture
def store(database) -> SqlPromptStore:
    """Prompt store on the in-memory database."""
    return SqlPromptStore(database, create_tables=False)


@pytest.fixture
def telemetry() -> StructlogTelemetry:
    """Telemetry with fresh counters."""
    return StructlogTelemetry(service="prompt-refiner-test")


@pytest.fixture
def orchestrator(analyzer, store, telemetry) -> PromptOrchestrator:
    """
    Orchestrator with in-memory cache, in-memory store and telemetry.

    Returns:
        PromptOrchestrator
    """
    return PromptOrchestrator(
        analyzer=analyzer,
        cache=InMemoryCache(max_entries=100, default_ttl=3600),
        store=store,
        telemetry=telemetry,
    )


@pytest.fixture
def app(orchestrator):
    """FastAPI app bound to the test orchestrator."""
    return create_app(orchestrator=orchestrator)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """
    Synchronous test client.

    Yields:
        TestClient instance
    """
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def async_client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing FastAPI endpoints.

    Yields:
        AsyncClient instance
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def mock_settings() -> Settings:
    """
    Create mock settings for testing with safe defaults.

    Returns:
        Settings instance with test configuration
    """
    return Settings(
        analyzer_use_spacy=False,
        store_db_url="sqlite://",
        log_level="INFO",
        log_json=False,  # Easier to read in tests
    )


@pytest.fixture
def sample_prompts() -> dict:
    """
    Sample prompts keyed by scenario.

    Returns:
        Dict of scenario name to prompt text
    """
    return dict(SAMPLE_PROMPTS)


@pytest.fixture(autouse=True)
def reset_env_vars():
    """
    Reset environment variables before each test.

    This prevents test pollution from env var changes.
    """
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Configuration for pytest-asyncio
def pytest_configure(config):
    """
    Configure pytest with custom markers and settings.
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (API, end-to-end)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests that may take longer to run"
    )
