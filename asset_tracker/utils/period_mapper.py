"""
Translate the API's abstract periods into provider query parameters.
Each provider speaks a different dialect: Yahoo takes a range and bar
interval, CoinGecko a day count, Frankfurter a start/end date window.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Mapping, Optional

PERIODS = ("1h", "1d", "1w")
DEFAULT_PERIOD = "1d"

DEFAULT_STOCK_PERIOD_PARAMS: dict[str, tuple[str, str]] = {
    "1h": ("1d", "5m"),
    "1d": ("5d", "30m"),
    "1w": ("1mo", "1h"),
}

_CRYPTO_DAYS = {"1h": 1, "1d": 1, "1w": 7}
_FOREX_DAYS = {"1d": 2, "1w": 8}


def validate_period(value: str, allowed: tuple[str, ...] = PERIODS) -> str:
    cleaned = value.strip().lower()
    if cleaned not in allowed:
        raise ValueError(f"Invalid period '{value}'. Supported values: {', '.join(allowed)}")
    return cleaned


def stock_range_interval(
    period: str,
    table: Optional[Mapping[str, tuple[str, str]]] = None,
) -> tuple[str, str]:
    params = table or DEFAULT_STOCK_PERIOD_PARAMS
    fallback = params.get("1w", DEFAULT_STOCK_PERIOD_PARAMS["1w"])
    range_value, interval = params.get(period, fallback)
    return range_value, interval


def crypto_days(period: str) -> int:
    return _CRYPTO_DAYS.get(period, 1)


def forex_days(period: str) -> int:
    return _FOREX_DAYS.get(period, 8)


def forex_date_window(period: str, today: Optional[date] = None) -> tuple[date, date]:
    end = today or datetime.now(timezone.utc).date()
    return end - timedelta(days=forex_days(period)), end
