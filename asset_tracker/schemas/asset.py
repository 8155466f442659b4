from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from asset_tracker.schemas.candle import Candle, PriceResult


class AssetQuote(BaseModel):
    """Close prices of one successfully fetched symbol, oldest first."""

    symbol: str
    prices: List[float]
    current_price: float

    @classmethod
    def from_result(cls, symbol: str, result: PriceResult) -> "AssetQuote":
        if not result.ok:
            raise ValueError(f"cannot build a quote for {symbol} from a failed result: {result.error}")
        return cls(symbol=symbol, prices=result.closes(), current_price=result.current_price)


class RankedAsset(AssetQuote):
    pct_change: Optional[float] = None
    volatility_pct: Optional[float] = None


class PriceResponse(BaseModel):
    asset_class: str
    symbol: str
    period: str
    current_price: float
    candles: List[Candle]
    data_source: str = "live"


class RankedListResponse(BaseModel):
    status: str = "success"
    asset_class: str
    timeframe: str
    fetched_at: datetime
    total_fetched: int
    items: List[RankedAsset]


class AssetSnapshot(BaseModel):
    symbol: str
    name: str
    price: float
    change: Optional[float] = None
    change_percent: Optional[float] = None
    type: str
    source: str


class AssetListResponse(BaseModel):
    status: str = "success"
    fetched_at: datetime
    category: str = "all"
    total_fetched: int
    items: List[AssetSnapshot]
