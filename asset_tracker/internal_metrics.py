from __future__ import annotations

from dataclasses import dataclass
from threading import Lock


@dataclass
class ProviderMetrics:
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    latency_total_ms: float = 0.0

    def avg_latency_ms(self) -> float:
        upstream_calls = self.cache_misses
        if upstream_calls == 0:
            return 0.0
        return self.latency_total_ms / upstream_calls


class MetricsCollector:
    """Per asset class counters for price lookups, cached or not."""

    def __init__(self):
        self._per_provider: dict[str, ProviderMetrics] = {}
        self._lock = Lock()

    def _get(self, provider: str) -> ProviderMetrics:
        if provider not in self._per_provider:
            self._per_provider[provider] = ProviderMetrics()
        return self._per_provider[provider]

    def record_request(self, provider: str, success: bool, latency_ms: float, cache_hit: bool):
        with self._lock:
            m = self._get(provider)
            m.total_requests += 1
            if success:
                m.successful_requests += 1
            else:
                m.failed_requests += 1
            if cache_hit:
                m.cache_hits += 1
            else:
                m.cache_misses += 1
                m.latency_total_ms += max(latency_ms, 0.0)

    def provider_status(self) -> dict[str, dict[str, float]]:
        with self._lock:
            out: dict[str, dict[str, float]] = {}
            for name, m in self._per_provider.items():
                failure_rate = 0.0 if m.total_requests == 0 else (m.failed_requests / m.total_requests)
                out[name] = {
                    "total_requests": m.total_requests,
                    "successful_requests": m.successful_requests,
                    "failed_requests": m.failed_requests,
                    "cache_hits": m.cache_hits,
                    "cache_misses": m.cache_misses,
                    "failure_rate": round(failure_rate, 4),
                    "average_latency_ms": round(m.avg_latency_ms(), 3),
                }
            return out
