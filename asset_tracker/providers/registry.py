from __future__ import annotations

from typing import Optional

from asset_tracker.config.settings import Settings, settings as default_settings
from asset_tracker.providers.base import PriceAdapter
from asset_tracker.providers.coingecko_adapter import CoinGeckoAdapter
from asset_tracker.providers.frankfurter_adapter import FrankfurterForexAdapter
from asset_tracker.providers.ticker_adapter import CryptoTickerAdapter
from asset_tracker.providers.yahoo_adapter import YahooStockAdapter
from asset_tracker.utils.asset_class import AssetClass

_CRYPTO_ADAPTERS = {
    "coingecko": CoinGeckoAdapter,
    "ticker": CryptoTickerAdapter,
}


def build_adapters(config: Optional[Settings] = None) -> dict[AssetClass, PriceAdapter]:
    config = config or default_settings
    provider = config.crypto_provider.strip().lower()
    if provider not in _CRYPTO_ADAPTERS:
        raise ValueError(f"Unknown crypto provider '{config.crypto_provider}'")
    return {
        AssetClass.STOCKS: YahooStockAdapter(config),
        AssetClass.CRYPTO: _CRYPTO_ADAPTERS[provider](config),
        AssetClass.FOREX: FrankfurterForexAdapter(config),
    }
