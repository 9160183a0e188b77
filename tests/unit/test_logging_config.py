"""
Unit tests for logging configuration.
"""

import pytest
import structlog

from prompt_refiner.logging_config import add_pipeline_versions, setup_logging
from prompt_refiner.version import FINGERPRINT_VERSION, RULES_VERSION


@pytest.fixture
def restore_structlog():
    """Put back the session's structlog configuration after the test."""
    saved = structlog.get_config()
    yield
    structlog.configure(**saved)


@pytest.mark.unit
class TestLoggingConfig:
    """Test the structlog processor chain."""

    def test_versions_stamped(self):
        event = add_pipeline_versions(None, "info", {"event": "cache_hit"})

        assert event["rules_version"] == RULES_VERSION
        assert event["fingerprint_version"] == FINGERPRINT_VERSION

    def test_explicit_version_kept(self):
        event = add_pipeline_versions(None, "info", {"event": "x", "rules_version": "rules-0.9.0"})

        assert event["rules_version"] == "rules-0.9.0"

    @pytest.mark.parametrize("json_output,renderer", [
        (True, structlog.processors.JSONRenderer),
        (False, structlog.dev.ConsoleRenderer),
    ])
    def test_renderer_override(self, restore_structlog, json_output, renderer):
        setup_logging("debug", json_output=json_output)
        processors = structlog.get_config()["processors"]

        assert add_pipeline_versions in processors
        assert isinstance(processors[-1], renderer)
