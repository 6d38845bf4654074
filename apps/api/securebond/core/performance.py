"""
In-memory request performance monitor.

Keeps the most recent request metrics in a bounded buffer and derives
rolling statistics for the ops dashboard. State is per-process.
"""

import logging
import threading
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone

from securebond.core.config import settings

logger = logging.getLogger(__name__)

# Requests slower than this count towards slow_requests in stats()
SLOW_THRESHOLD_MS = 1000


@dataclass
class RequestMetric:
    request_id: str
    method: str
    path: str
    status_code: int
    response_time_ms: float
    timestamp: datetime
    user_agent: str | None = None
    ip: str | None = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class PerformanceMonitor:
    """Bounded ring buffer of request metrics."""

    def __init__(self, max_metrics: int = 1000, slow_request_ms: int = 2000):
        self.max_metrics = max_metrics
        self.slow_request_ms = slow_request_ms
        self._metrics: deque[RequestMetric] = deque(maxlen=max_metrics)
        self._lock = threading.Lock()

    def record(self, metric: RequestMetric) -> None:
        with self._lock:
            self._metrics.append(metric)

        if metric.response_time_ms > self.slow_request_ms:
            logger.warning(
                "Slow request %s %s took %.0fms",
                metric.method,
                metric.path,
                metric.response_time_ms,
            )
        if metric.status_code >= 400:
            logger.info(
                "Error response %s %s -> %s",
                metric.method,
                metric.path,
                metric.status_code,
            )

    def recent(self, limit: int = 50) -> list[RequestMetric]:
        """Most recent metrics, newest last."""
        with self._lock:
            snapshot = list(self._metrics)
        if limit <= 0:
            return []
        return snapshot[-limit:]

    def clear(self) -> None:
        with self._lock:
            self._metrics.clear()

    def __len__(self) -> int:
        return len(self._metrics)

    def stats(self, now: datetime | None = None) -> dict:
        """
        Rolling statistics over the last 5 minutes and the last hour.

        Error rate is the percentage of responses with status >= 400,
        rounded to the nearest integer. Averages are 0 for empty windows.
        """
        now = now or datetime.now(timezone.utc)
        five_minutes_ago = now - timedelta(minutes=5)
        one_hour_ago = now - timedelta(hours=1)

        with self._lock:
            snapshot = list(self._metrics)

        last_5m = [m for m in snapshot if m.timestamp > five_minutes_ago]
        last_hour = [m for m in snapshot if m.timestamp > one_hour_ago]

        return {
            "total_requests": len(snapshot),
            "requests_last_5_min": len(last_5m),
            "requests_last_hour": len(last_hour),
            "avg_response_time_5_min": _average_ms(last_5m),
            "avg_response_time_hour": _average_ms(last_hour),
            "error_rate_5_min": _error_rate(last_5m),
            "error_rate_hour": _error_rate(last_hour),
            "slow_requests": sum(
                1 for m in snapshot if m.response_time_ms > SLOW_THRESHOLD_MS
            ),
        }


def _average_ms(metrics: list[RequestMetric]) -> int:
    if not metrics:
        return 0
    return round(sum(m.response_time_ms for m in metrics) / len(metrics))


def _error_rate(metrics: list[RequestMetric]) -> int:
    if not metrics:
        return 0
    errors = sum(1 for m in metrics if m.status_code >= 400)
    return round(errors / len(metrics) * 100)


performance_monitor = PerformanceMonitor(
    max_metrics=settings.PERFORMANCE_MAX_METRICS,
    slow_request_ms=settings.SLOW_REQUEST_MS,
)
