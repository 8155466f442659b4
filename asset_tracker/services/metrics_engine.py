"""
Derived price metrics and the gainers / losers / stable rankings.

Gainers only include symbols that actually went up and losers only those
that went down; a flat series is in neither list.
"""
from __future__ import annotations

from statistics import fmean, pstdev
from typing import Optional, Sequence

from asset_tracker.schemas.asset import AssetQuote, AssetSnapshot, RankedAsset

SNAPSHOT_CATEGORIES = ("all", "gainers", "losers", "stable")
STABLE_CHANGE_PERCENT = 0.1


def percent_change(series: Sequence[float]) -> float:
    if len(series) < 2 or series[0] == 0:
        return 0.0
    return (series[-1] - series[0]) / series[0] * 100


def volatility_pct(series: Sequence[float]) -> float:
    """Coefficient of variation (population stddev over mean) as a percentage."""
    if len(series) < 2:
        return 0.0
    mean = fmean(series)
    if mean == 0:
        return 0.0
    return pstdev(series, mu=mean) / mean * 100


def _ranked(quote: AssetQuote, **metric: float) -> RankedAsset:
    return RankedAsset(symbol=quote.symbol, prices=quote.prices, current_price=quote.current_price, **metric)


def rank_gainers(quotes: Sequence[AssetQuote], limit: int) -> list[RankedAsset]:
    ranked = [_ranked(q, pct_change=percent_change(q.prices)) for q in quotes]
    ranked = [item for item in ranked if item.pct_change > 0]
    return sorted(ranked, key=lambda item: item.pct_change, reverse=True)[:limit]


def rank_losers(quotes: Sequence[AssetQuote], limit: int) -> list[RankedAsset]:
    ranked = [_ranked(q, pct_change=percent_change(q.prices)) for q in quotes]
    ranked = [item for item in ranked if item.pct_change < 0]
    return sorted(ranked, key=lambda item: item.pct_change)[:limit]


def rank_stable(quotes: Sequence[AssetQuote], limit: int, volatility_threshold: float) -> list[RankedAsset]:
    ranked = [_ranked(q, volatility_pct=volatility_pct(q.prices)) for q in quotes]
    ranked = [item for item in ranked if item.volatility_pct < volatility_threshold]
    return sorted(ranked, key=lambda item: item.volatility_pct)[:limit]


def validate_category(category: Optional[str]) -> str:
    if category in (None, ""):
        return "all"
    if category not in SNAPSHOT_CATEGORIES:
        raise ValueError(f"Invalid category '{category}'. Supported values: {', '.join(SNAPSHOT_CATEGORIES)}")
    return category


def filter_snapshots(items: Sequence[AssetSnapshot], category: Optional[str]) -> list[AssetSnapshot]:
    category = validate_category(category)
    if category == "all":
        return list(items)
    if category == "gainers":
        return [item for item in items if item.change_percent is not None and item.change_percent > 0]
    if category == "losers":
        return [item for item in items if item.change_percent is not None and item.change_percent < 0]
    return [
        item for item in items
        if item.change_percent is not None and abs(item.change_percent) < STABLE_CHANGE_PERCENT
    ]


def top_snapshots(items: Sequence[AssetSnapshot], direction: str, limit: int = 5) -> list[AssetSnapshot]:
    if direction not in ("gainers", "losers"):
        raise ValueError(f"Invalid direction '{direction}'")
    selected = filter_snapshots(items, direction)
    return sorted(selected, key=lambda item: item.change_percent, reverse=direction == "gainers")[:limit]
