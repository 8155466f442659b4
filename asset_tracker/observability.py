"""In-memory request statistics for the /metrics endpoint."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from time import perf_counter


@dataclass
class RequestMetricsSnapshot:
    request_count: int
    average_ms: float
    max_ms: float
    last_ms: float
    status_classes: dict[str, int] = field(default_factory=dict)


class RequestStats:
    """Latency aggregates and response status classes (2xx, 4xx, ...) since start."""

    def __init__(self):
        self.started_at = datetime.now(timezone.utc)
        self._count = 0
        self._total_ms = 0.0
        self._max_ms = 0.0
        self._last_ms = 0.0
        self._status_classes: Counter[str] = Counter()
        self._lock = Lock()

    def record(self, elapsed_ms: float, status_code: int):
        with self._lock:
            self._count += 1
            self._total_ms += elapsed_ms
            self._last_ms = elapsed_ms
            self._max_ms = max(self._max_ms, elapsed_ms)
            self._status_classes[f"{status_code // 100}xx"] += 1

    def snapshot(self) -> RequestMetricsSnapshot:
        with self._lock:
            average = self._total_ms / self._count if self._count else 0.0
            return RequestMetricsSnapshot(
                request_count=self._count,
                average_ms=round(average, 3),
                max_ms=round(self._max_ms, 3),
                last_ms=round(self._last_ms, 3),
                status_classes=dict(self._status_classes),
            )

    def uptime_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self.started_at).total_seconds()


class RequestTimer:
    def __init__(self):
        self._started = perf_counter()

    def elapsed_ms(self) -> float:
        return (perf_counter() - self._started) * 1000
