from enum import Enum


class AssetClass(str, Enum):
    STOCKS = "stocks"
    CRYPTO = "crypto"
    FOREX = "forex"


_ALIASES = {
    "stock": AssetClass.STOCKS,
    "stocks": AssetClass.STOCKS,
    "equity": AssetClass.STOCKS,
    "crypto": AssetClass.CRYPTO,
    "cryptocurrency": AssetClass.CRYPTO,
    "forex": AssetClass.FOREX,
    "fx": AssetClass.FOREX,
}


def normalize_asset_class(value: str) -> AssetClass:
    cleaned = value.strip().lower()
    if cleaned not in _ALIASES:
        supported = ", ".join(item.value for item in AssetClass)
        raise ValueError(f"Unsupported asset class '{value}'. Supported values: {supported}")
    return _ALIASES[cleaned]


def detect_asset_class(symbol: str) -> AssetClass:
    """Guess the asset class from Yahoo-style symbol text (BTC-USD, EURUSD=X, AAPL)."""
    upper = symbol.upper()
    if upper.endswith("-USD"):
        return AssetClass.CRYPTO
    if "=X" in upper:
        return AssetClass.FOREX
    return AssetClass.STOCKS
