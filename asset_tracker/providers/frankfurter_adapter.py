from __future__ import annotations

from datetime import date
from typing import Optional

from asset_tracker.providers.base import PriceAdapter
from asset_tracker.schemas.candle import Candle
from asset_tracker.utils.asset_class import AssetClass
from asset_tracker.utils.period_mapper import forex_date_window
from asset_tracker.utils.symbol_normalizer import split_forex_pair
from asset_tracker.utils.validators import normalize_timestamp, to_optional_float


class FrankfurterForexAdapter(PriceAdapter):
    """Daily reference rates from Frankfurter.

    Only one rate per day is published, so each candle uses it for high, low
    and close, and opens at the previous day's close.
    """

    asset_class = AssetClass.FOREX
    source = "frankfurter"
    empty_message = "No forex rates"

    def __init__(self, config=None, today: Optional[date] = None):
        super().__init__(config)
        self._today = today

    def fetch_candles(self, symbol: str, period: str) -> list[Candle]:
        base, quote_currency = split_forex_pair(symbol)
        start, end = forex_date_window(period, today=self._today)
        payload = self._get_json(
            f"{self.config.frankfurter_base_url}/{start.isoformat()}..{end.isoformat()}",
            {"from": base, "to": quote_currency},
        )
        rates = (payload or {}).get("rates") or {}

        candles: list[Candle] = []
        previous_close: Optional[float] = None
        for day in sorted(rates):
            rate = to_optional_float((rates[day] or {}).get(quote_currency))
            if rate is None:
                continue
            candles.append(
                Candle(
                    timestamp=normalize_timestamp(f"{day}T00:00:00+00:00"),
                    open=previous_close if previous_close is not None else rate,
                    high=rate,
                    low=rate,
                    close=rate,
                )
            )
            previous_close = rate
        return candles
