from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from asset_tracker.schemas.candle import Candle


def to_native_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    try:
        casted = float(value)
        if casted != casted:
            return default
        return casted
    except (TypeError, ValueError):
        return default


def to_optional_float(value: Any) -> float | None:
    if value is None:
        return None
    casted = to_native_float(value, default=float("nan"))
    return None if casted != casted else casted


def normalize_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value, tz=timezone.utc)
    else:
        iso = str(value).replace("Z", "+00:00")
        dt = datetime.fromisoformat(iso)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def from_epoch_millis(value: Any) -> datetime:
    return normalize_timestamp(to_native_float(value) / 1000)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def sanitize_candles(candles: list[Candle]) -> list[Candle]:
    """Order candles chronologically with unique timestamps.

    Candles with a negative price are dropped. When two candles share a
    timestamp the one seen last wins.
    """
    by_timestamp: dict[datetime, Candle] = {}
    for candle in candles:
        if min(candle.open, candle.high, candle.low, candle.close) < 0:
            continue
        by_timestamp[candle.timestamp] = candle
    return [by_timestamp[ts] for ts in sorted(by_timestamp)]
