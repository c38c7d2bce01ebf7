"""Metrics service for tracking API calls.

Plugs into the retry executor as a RetryObserver and keeps one CallMetrics
per completed call. In-memory only.
"""

import logging
from collections import Counter
from typing import Any

from geminiengine.models.events import RetryEvent, RetryEventKind
from geminiengine.models.metrics import CallMetrics

logger = logging.getLogger(__name__)


class MetricsService:
    """
    Aggregates per-call metrics from retry events.

    Usage::

        metrics = MetricsService()
        client = GeminiApiClient(options, observers=[LoggingObserver(), metrics])
    """

    def __init__(self):
        self._metrics: list[CallMetrics] = []
        self._retries_scheduled = 0

    def on_event(self, event: RetryEvent) -> None:
        """RetryObserver hook."""
        if event.kind == RetryEventKind.RETRY_SCHEDULED:
            self._retries_scheduled += 1
        elif event.kind == RetryEventKind.COMPLETED:
            self.record(
                CallMetrics(
                    model=event.model,
                    endpoint=event.endpoint,
                    outcome=event.outcome.value if event.outcome else "unknown",
                    attempts=event.attempt + 1,
                    duration_ms=event.elapsed_ms or 0,
                    http_status=event.http_status,
                    timestamp=event.timestamp,
                )
            )

    def record(self, metrics: CallMetrics) -> None:
        """
        Record a call metrics object.

        Args:
            metrics: The metrics to record
        """
        self._metrics.append(metrics)
        logger.debug(f"📊 [MetricsService] Recorded {metrics.model}:{metrics.endpoint} "
                     f"outcome={metrics.outcome}, attempts={metrics.attempts}, duration={metrics.duration_ms}ms")

    def get_all(self) -> list[CallMetrics]:
        """Get all recorded metrics."""
        return self._metrics.copy()

    def clear(self) -> None:
        """Clear all recorded metrics."""
        self._metrics.clear()
        self._retries_scheduled = 0

    def summary(self) -> dict[str, Any]:
        """Get a summary of recorded metrics."""
        if not self._metrics:
            return {
                "count": 0,
                "total_duration_ms": 0,
                "avg_duration_ms": 0,
                "total_retries": 0,
                "outcomes": {},
            }

        total_duration = sum(m.duration_ms for m in self._metrics)

        return {
            "count": len(self._metrics),
            "total_duration_ms": total_duration,
            "avg_duration_ms": total_duration / len(self._metrics),
            "total_retries": self._retries_scheduled,
            "outcomes": dict(Counter(m.outcome for m in self._metrics)),
        }
