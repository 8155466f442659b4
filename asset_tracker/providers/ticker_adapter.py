from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from asset_tracker.providers.base import PriceAdapter
from asset_tracker.schemas.candle import Candle
from asset_tracker.utils.asset_class import AssetClass
from asset_tracker.utils.symbol_normalizer import to_binance_symbol, to_bitget_symbol
from asset_tracker.utils.validators import to_optional_float

logger = logging.getLogger(__name__)


class CryptoTickerAdapter(PriceAdapter):
    """Spot price from Binance, falling back to Bitget.

    There is no series here: a successful lookup becomes a single candle
    stamped with the time of the request.
    """

    asset_class = AssetClass.CRYPTO
    source = "ticker"
    empty_message = "No crypto data"

    def _binance_price(self, symbol: str) -> Optional[float]:
        payload = self._get_json(
            f"{self.config.binance_base_url}/api/v3/ticker/price",
            {"symbol": to_binance_symbol(symbol)},
        )
        return to_optional_float((payload or {}).get("price"))

    def _bitget_price(self, symbol: str) -> Optional[float]:
        payload = self._get_json(
            f"{self.config.bitget_base_url}/api/spot/v1/market/ticker",
            {"symbol": to_bitget_symbol(symbol)},
        )
        if not payload or payload.get("code") != "00000":
            return None
        return to_optional_float((payload.get("data") or {}).get("close"))

    def fetch_ticker(self, symbol: str) -> Optional[tuple[float, str]]:
        """Return ``(price, source)`` from the first exchange that knows the symbol."""
        for source, lookup in (("binance", self._binance_price), ("bitget", self._bitget_price)):
            try:
                price = lookup(symbol)
            except Exception as exc:
                logger.debug(f"{source} ticker lookup failed for {symbol}: {exc}")
                continue
            if price is not None:
                return price, source
        return None

    def fetch_candles(self, symbol: str, period: str) -> list[Candle]:
        ticker = self.fetch_ticker(symbol)
        if ticker is None:
            return []
        price, _ = ticker
        return [
            Candle(
                timestamp=datetime.now(timezone.utc),
                open=price,
                high=price,
                low=price,
                close=price,
            )
        ]
