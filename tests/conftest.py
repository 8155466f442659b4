from datetime import datetime, timedelta, timezone

import pytest

from asset_tracker.providers.base import PriceAdapter
from asset_tracker.schemas.candle import Candle
from asset_tracker.utils.asset_class import AssetClass

START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_candles(closes, start=START, step=timedelta(hours=1)):
    return [
        Candle(timestamp=start + step * idx, open=close, high=close, low=close, close=close)
        for idx, close in enumerate(closes)
    ]


class StaticAdapter(PriceAdapter):
    """Serves canned close series; symbols mapped to an exception raise it."""

    source = "static"
    empty_message = "No data"

    def __init__(self, series, asset_class=AssetClass.CRYPTO):
        super().__init__()
        self.asset_class = asset_class
        self.series = series
        self.calls = []

    def fetch_candles(self, symbol, period):
        self.calls.append((symbol, period))
        value = self.series.get(symbol, [])
        if isinstance(value, Exception):
            raise value
        return make_candles(value)


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
