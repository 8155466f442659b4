from datetime import timedelta, timezone

from asset_tracker.schemas.candle import Candle
from asset_tracker.utils.validators import (
    clamp,
    from_epoch_millis,
    normalize_timestamp,
    sanitize_candles,
    to_native_float,
    to_optional_float,
)
from conftest import START


def test_timestamp_normalization_to_utc():
    ts = normalize_timestamp("2024-01-01T10:00:00+05:30")
    assert ts.tzinfo == timezone.utc
    assert ts.hour == 4


def test_epoch_millis():
    assert from_epoch_millis(1704067200000) == START


def test_numeric_cleaning_nan():
    assert to_native_float(float("nan")) == 0.0
    assert to_optional_float(float("nan")) is None
    assert to_optional_float("1.5") == 1.5
    assert to_optional_float(None) is None


def test_clamp():
    assert clamp(0, 1, 50) == 1
    assert clamp(99, 1, 50) == 50
    assert clamp(7, 1, 50) == 7


def test_sanitize_candles_orders_and_dedupes():
    later = Candle(timestamp=START + timedelta(hours=1), open=2, high=2, low=2, close=2)
    first = Candle(timestamp=START, open=1, high=1, low=1, close=1)
    replacement = Candle(timestamp=START, open=1.5, high=1.5, low=1.5, close=1.5)
    negative = Candle(timestamp=START + timedelta(hours=2), open=-1, high=1, low=1, close=1)

    cleaned = sanitize_candles([later, first, negative, replacement])

    assert [c.close for c in cleaned] == [1.5, 2]
