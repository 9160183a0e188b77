"""
Unit tests for structlog telemetry.
"""

import pytest
from structlog.testing import capture_logs

from prompt_refiner.services.telemetry import MetricAggregate


@pytest.mark.unit
class TestStructlogTelemetry:
    """Test counters and log emission."""

    def test_track_counts_and_logs(self, telemetry):
        with capture_logs() as logs:
            telemetry.track("prompt_processed", {"domain": "sql"})
            telemetry.track("prompt_processed")

        assert telemetry.snapshot()["events"] == {"prompt_processed": 2}
        assert logs[0]["event"] == "prompt_processed"
        assert logs[0]["domain"] == "sql"

    def test_error(self, telemetry):
        with capture_logs() as logs:
            telemetry.error("process_failed", ValueError("bad input"), {"domain": "sql"})

        assert telemetry.snapshot()["errors"] == {"process_failed": 1}
        assert logs[0]["log_level"] == "error"
        assert logs[0]["error_type"] == "ValueError"

    def test_metrics_aggregate(self, telemetry):
        telemetry.metric("process_duration_ms", 10)
        telemetry.metric("process_duration_ms", 30, metric_type="histogram")

        metric = telemetry.snapshot()["metrics"]["process_duration_ms"]

        assert metric == {"count": 2, "sum": 40.0, "last": 30.0}

    def test_bad_metric_value_is_dropped(self, telemetry):
        telemetry.metric("broken", "not-a-number")

        assert "broken" not in telemetry.snapshot()["metrics"]

    def test_metrics_keep_running_aggregates_only(self, telemetry):
        """Many samples leave one fixed-size aggregate per metric."""
        for value in range(1000):
            telemetry.metric("process_duration_ms", value)

        aggregate = telemetry._metrics["process_duration_ms"]

        assert isinstance(aggregate, MetricAggregate)
        assert vars(aggregate) == {"count": 1000, "total": 499500.0, "last": 999.0}
        assert telemetry.snapshot()["metrics"]["process_duration_ms"]["sum"] == 499500.0
