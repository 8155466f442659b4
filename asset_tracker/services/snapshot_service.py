from __future__ import annotations

import logging
from typing import Optional, Sequence

from asset_tracker.cache.ttl_cache import TTLCache
from asset_tracker.providers.ticker_adapter import CryptoTickerAdapter
from asset_tracker.providers.yahoo_adapter import YahooStockAdapter
from asset_tracker.schemas.asset import AssetSnapshot
from asset_tracker.services.batch_fetcher import gather_in_threads
from asset_tracker.utils.asset_class import AssetClass, detect_asset_class

logger = logging.getLogger(__name__)


class SnapshotService:
    """Latest price and daily change for an arbitrary mix of symbols.

    Crypto symbols (``BTC-USD``) go to the exchange tickers, which report no
    change; stocks and ``=X`` forex symbols go to Yahoo quotes.
    """

    def __init__(
        self,
        stock_adapter: YahooStockAdapter,
        ticker_adapter: CryptoTickerAdapter,
        cache: TTLCache,
        ttl_seconds: float,
    ):
        self.stock_adapter = stock_adapter
        self.ticker_adapter = ticker_adapter
        self.cache = cache
        self.ttl_seconds = ttl_seconds

    def _snapshot(self, symbol: str) -> Optional[AssetSnapshot]:
        asset_class = detect_asset_class(symbol)
        try:
            if asset_class == AssetClass.CRYPTO:
                ticker = self.ticker_adapter.fetch_ticker(symbol)
                if ticker is None:
                    return None
                price, source = ticker
                return AssetSnapshot(symbol=symbol, name=symbol, price=price, type=asset_class.value, source=source)

            data = self.stock_adapter.fetch_quote(symbol)
            if data is None:
                return None
            return AssetSnapshot(
                symbol=data["symbol"],
                name=data["name"],
                price=data["price"],
                change=data["change"],
                change_percent=data["change_percent"],
                type=asset_class.value,
                source=self.stock_adapter.source,
            )
        except Exception as exc:
            logger.warning(f"Snapshot lookup failed for {symbol}: {exc}")
            return None

    async def get_snapshots(self, symbols: Sequence[str]) -> list[AssetSnapshot]:
        key = f"assets:{','.join(symbols)}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        outcomes = await gather_in_threads(self._snapshot, [(symbol,) for symbol in symbols])
        items = [item for item in outcomes if isinstance(item, AssetSnapshot)]
        self.cache.set(key, items, self.ttl_seconds)
        return items
