from __future__ import annotations

from urllib.parse import quote

from asset_tracker.providers.base import PriceAdapter
from asset_tracker.schemas.candle import Candle
from asset_tracker.utils.asset_class import AssetClass
from asset_tracker.utils.period_mapper import crypto_days
from asset_tracker.utils.symbol_normalizer import crypto_base
from asset_tracker.utils.validators import from_epoch_millis, to_native_float


class CoinGeckoAdapter(PriceAdapter):
    """USD-denominated OHLC series from CoinGecko.

    Rows arrive as ``[timestamp_ms, open, high, low, close]``; CoinGecko does
    not report volume on this endpoint so it is left at zero.
    """

    asset_class = AssetClass.CRYPTO
    source = "coingecko"
    empty_message = "No crypto data"

    def coin_id(self, symbol: str) -> str:
        base = crypto_base(symbol)
        return self.config.coingecko_ids.get(base, base.lower())

    def fetch_candles(self, symbol: str, period: str) -> list[Candle]:
        rows = self._get_json(
            f"{self.config.coingecko_base_url}/coins/{quote(self.coin_id(symbol))}/ohlc",
            {"vs_currency": "usd", "days": crypto_days(period)},
        )
        if not isinstance(rows, list):
            return []

        candles: list[Candle] = []
        for row in rows:
            if not isinstance(row, (list, tuple)) or len(row) < 5 or any(v is None for v in row[:5]):
                continue
            candles.append(
                Candle(
                    timestamp=from_epoch_millis(row[0]),
                    open=to_native_float(row[1], default=-1),
                    high=to_native_float(row[2], default=-1),
                    low=to_native_float(row[3], default=-1),
                    close=to_native_float(row[4], default=-1),
                )
            )
        return candles
