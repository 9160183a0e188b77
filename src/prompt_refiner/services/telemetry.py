"""
Structlog-backed telemetry.

Events, errors and metrics are emitted as structured log lines and
counted in process (snapshot()). Calls never raise; a failure inside
telemetry is logged and dropped.
"""

import threading
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class MetricAggregate:
    """Running aggregate of one metric; samples are not kept."""
    count: int = 0
    total: float = 0.0
    last: float = 0.0

    def add(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.last = value


class StructlogTelemetry:
    """Telemetry sink that logs with structlog and keeps counters."""

    def __init__(self, service: str = "prompt-refiner"):
        self.service = service
        self.logger = logger.bind(component="telemetry", service=service)
        self._lock = threading.Lock()
        self._events: Counter = Counter()
        self._errors: Counter = Counter()
        self._metrics: Dict[str, MetricAggregate] = {}

    def track(self, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        try:
            with self._lock:
                self._events[event] += 1
            self.logger.info(event, **(data or {}))
        except Exception as e:
            logger.debug("telemetry_track_failed", telemetry_event=event, error=str(e))

    def error(self, name: str, err: BaseException, context: Optional[Dict[str, Any]] = None) -> None:
        try:
            with self._lock:
                self._errors[name] += 1
            self.logger.error(
                name,
                error=str(err),
                error_type=type(err).__name__,
                **(context or {}),
            )
        except Exception as e:
            logger.debug("telemetry_error_failed", telemetry_event=name, error=str(e))

    def metric(
        self,
        name: str,
        value: float,
        metric_type: str = "counter",
        labels: Optional[Dict[str, str]] = None,
    ) -> None:
        try:
            sample = float(value)
            with self._lock:
                self._metrics.setdefault(name, MetricAggregate()).add(sample)
            self.logger.debug("metric", metric=name, value=value, metric_type=metric_type, labels=labels or {})
        except Exception as e:
            logger.debug("telemetry_metric_failed", metric=name, error=str(e))

    def snapshot(self) -> Dict[str, Any]:
        """Counters and metric aggregates since start."""
        with self._lock:
            return {
                "events": dict(self._events),
                "errors": dict(self._errors),
                "metrics": {
                    name: {"count": agg.count, "sum": agg.total, "last": agg.last}
                    for name, agg in self._metrics.items()
                },
            }
