from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

from asset_tracker.providers.base import PriceAdapter
from asset_tracker.schemas.candle import Candle
from asset_tracker.utils.asset_class import AssetClass
from asset_tracker.utils.period_mapper import stock_range_interval
from asset_tracker.utils.validators import normalize_timestamp, to_native_float, to_optional_float


class YahooStockAdapter(PriceAdapter):
    asset_class = AssetClass.STOCKS
    source = "yahoo"
    empty_message = "No stock data"

    def _fetch_chart(self, provider_symbol: str, interval: str, range_value: str) -> Optional[dict[str, Any]]:
        payload = self._get_json(
            f"{self.config.yahoo_base_url}/v8/finance/chart/{quote(provider_symbol, safe='=')}",
            {"interval": interval, "range": range_value},
        )
        results = ((payload or {}).get("chart") or {}).get("result") or []
        return results[0] if results else None

    def fetch_candles(self, symbol: str, period: str) -> list[Candle]:
        range_value, interval = stock_range_interval(period, self.config.stock_period_params)
        result = self._fetch_chart(symbol.upper(), interval=interval, range_value=range_value)
        if not result:
            return []

        timestamps = result.get("timestamp") or []
        bars = ((result.get("indicators") or {}).get("quote") or [{}])[0] or {}
        columns = [bars.get(field) or [] for field in ("open", "high", "low", "close", "volume")]

        candles: list[Candle] = []
        for idx, ts in enumerate(timestamps):
            open_, high, low, close, volume = [column[idx] if idx < len(column) else None for column in columns]
            if any(v is None for v in (open_, high, low, close)):
                continue
            candles.append(
                Candle(
                    timestamp=normalize_timestamp(ts),
                    open=to_native_float(open_, default=-1),
                    high=to_native_float(high, default=-1),
                    low=to_native_float(low, default=-1),
                    close=to_native_float(close, default=-1),
                    volume=max(to_native_float(volume), 0.0),
                )
            )
        return candles

    def fetch_quote(self, symbol: str) -> Optional[dict[str, Any]]:
        """Latest price snapshot for a stock or Yahoo-style forex symbol."""
        result = self._fetch_chart(symbol.upper(), interval="1d", range_value="1d")
        if not result:
            return None
        meta = result.get("meta") or {}
        price = to_optional_float(meta.get("regularMarketPrice"))
        if price is None:
            return None

        previous_close = to_optional_float(
            meta.get("regularMarketPreviousClose") or meta.get("previousClose") or meta.get("chartPreviousClose")
        )
        change = None
        change_percent = None
        if previous_close:
            change = price - previous_close
            change_percent = change / previous_close * 100
        return {
            "symbol": str(meta.get("symbol") or symbol.upper()),
            "name": str(meta.get("shortName") or meta.get("longName") or meta.get("symbol") or symbol.upper()),
            "price": price,
            "previous_close": previous_close,
            "change": change,
            "change_percent": change_percent,
            "currency": str(meta.get("currency") or "USD"),
        }
