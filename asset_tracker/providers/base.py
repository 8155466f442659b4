from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from asset_tracker.config.settings import Settings, settings as default_settings
from asset_tracker.schemas.candle import Candle, PriceResult
from asset_tracker.utils.asset_class import AssetClass
from asset_tracker.utils.validators import sanitize_candles

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PriceAdapter(ABC):
    """One upstream provider for one asset class.

    Subclasses implement ``fetch_candles`` and may raise freely; ``fetch`` is
    the boundary that turns every outcome into a ``PriceResult``.
    """

    asset_class: AssetClass
    source: str = "unknown"
    empty_message: str = "No data"

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    @abstractmethod
    def fetch_candles(self, symbol: str, period: str) -> list[Candle]:
        raise NotImplementedError

    def fetch(self, symbol: str, period: str) -> PriceResult:
        try:
            candles = self.fetch_candles(symbol, period)
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            logger.warning(f"{self.source} fetch failed for {symbol} ({period}): {message}")
            return PriceResult.failure(message)

        candles = sanitize_candles(candles)
        if not candles:
            return PriceResult.failure(self.empty_message)
        return PriceResult.from_candles(candles)

    def _retry(self, fn: Callable[[], T]) -> T:
        attempts = max(self.config.retry_attempts, 1)
        delay = self.config.retry_backoff_base_seconds
        last_error: Exception | None = None
        for attempt in range(attempts):
            try:
                return fn()
            except Exception as exc:
                last_error = exc
                if attempt < attempts - 1:
                    time.sleep(delay)
                    delay *= 2
        raise last_error

    def _get_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        """JSON GET, retried with backoff on any request or decode failure."""
        return self._retry(lambda: self._request_json(url, params))

    def _request_json(self, url: str, params: Optional[dict[str, Any]] = None) -> Any:
        target = f"{url}?{urlencode(params)}" if params else url
        request = Request(target, headers={"User-Agent": self.config.user_agent, "Accept": "application/json"})
        with urlopen(request, timeout=self.config.request_timeout_seconds) as response:
            return json.loads(response.read().decode("utf-8"))
