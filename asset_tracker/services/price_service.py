from __future__ import annotations

import time
from typing import Mapping, Optional

from asset_tracker.cache.ttl_cache import TTLCache
from asset_tracker.internal_metrics import MetricsCollector
from asset_tracker.providers.base import PriceAdapter
from asset_tracker.schemas.candle import PriceResult
from asset_tracker.utils.asset_class import AssetClass


class PriceService:
    """Cache policy in front of the per-class adapters.

    Failed results are cached too, so a broken upstream is asked at most once
    per symbol and period within the TTL window.
    """

    def __init__(
        self,
        adapters: Mapping[AssetClass, PriceAdapter],
        cache: TTLCache,
        ttl_seconds: float,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.adapters = dict(adapters)
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.metrics = metrics

    def adapter_for(self, asset_class: AssetClass) -> PriceAdapter:
        adapter = self.adapters.get(asset_class)
        if adapter is None:
            raise ValueError(f"No provider configured for asset class '{asset_class.value}'")
        return adapter

    def get_price(self, asset_class: AssetClass, symbol: str, period: str) -> tuple[PriceResult, bool]:
        adapter = self.adapter_for(asset_class)
        key = f"price:{asset_class.value}:{symbol}:{period}"
        start = time.perf_counter()

        cached = self.cache.get(key)
        if cached is not None:
            self._record(asset_class, cached, start, cache_hit=True)
            return cached, True

        result = adapter.fetch(symbol, period)
        self.cache.set(key, result, self.ttl_seconds)
        self._record(asset_class, result, start, cache_hit=False)
        return result, False

    def _record(self, asset_class: AssetClass, result: PriceResult, start: float, cache_hit: bool):
        if self.metrics is None:
            return
        self.metrics.record_request(
            asset_class.value,
            success=result.ok,
            latency_ms=(time.perf_counter() - start) * 1000,
            cache_hit=cache_hit,
        )
