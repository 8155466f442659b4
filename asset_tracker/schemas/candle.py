from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from asset_tracker.utils.validators import normalize_timestamp


class Candle(BaseModel):
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float = Field(default=0.0, ge=0)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _to_utc(cls, value):
        return normalize_timestamp(value)


class PriceResult(BaseModel):
    """Normalized outcome of one provider lookup.

    A result either carries an ``error`` (and nothing else) or a non-empty,
    strictly chronological candle series whose last close is the
    ``current_price``.
    """

    current_price: Optional[float] = None
    candles: List[Candle] = Field(default_factory=list)
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_consistency(self):
        if self.error is not None:
            if self.candles or self.current_price is not None:
                raise ValueError("failed result must not carry candles or a current price")
            return self
        if not self.candles:
            raise ValueError("successful result requires at least one candle")
        if self.current_price != self.candles[-1].close:
            raise ValueError("current_price must equal the close of the last candle")
        for previous, candle in zip(self.candles, self.candles[1:]):
            if candle.timestamp <= previous.timestamp:
                raise ValueError("candle timestamps must be strictly increasing")
        return self

    @classmethod
    def failure(cls, message: str) -> "PriceResult":
        return cls(error=message)

    @classmethod
    def from_candles(cls, candles: List[Candle]) -> "PriceResult":
        return cls(current_price=candles[-1].close, candles=list(candles))

    @property
    def ok(self) -> bool:
        return self.error is None

    def closes(self) -> list[float]:
        return [candle.close for candle in self.candles]
