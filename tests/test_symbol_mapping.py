import pytest

from asset_tracker.utils.asset_class import AssetClass, detect_asset_class, normalize_asset_class
from asset_tracker.utils.symbol_normalizer import (
    crypto_base,
    normalize_symbol,
    parse_symbol_list,
    split_forex_pair,
    to_binance_symbol,
    to_bitget_symbol,
)


def test_normalize_asset_class():
    assert normalize_asset_class("Stocks") == AssetClass.STOCKS
    assert normalize_asset_class("stock") == AssetClass.STOCKS
    assert normalize_asset_class("crypto") == AssetClass.CRYPTO
    assert normalize_asset_class("fx") == AssetClass.FOREX
    with pytest.raises(ValueError, match="Unsupported asset class"):
        normalize_asset_class("bonds")


def test_detect_asset_class():
    assert detect_asset_class("BTC-USD") == AssetClass.CRYPTO
    assert detect_asset_class("EURUSD=X") == AssetClass.FOREX
    assert detect_asset_class("AAPL") == AssetClass.STOCKS


def test_exchange_symbols():
    assert crypto_base("btc-usd") == "BTC"
    assert crypto_base("ETHUSDT") == "ETH"
    assert to_binance_symbol("BTC-USD") == "BTCUSDT"
    assert to_bitget_symbol("SOL") == "SOLUSDT_SPBL"


def test_split_forex_pair():
    assert split_forex_pair("EURUSD") == ("EUR", "USD")
    assert split_forex_pair("gbp/usd") == ("GBP", "USD")
    assert split_forex_pair("USDJPY=X") == ("USD", "JPY")
    with pytest.raises(ValueError):
        split_forex_pair("EURO")


def test_normalize_symbol():
    assert normalize_symbol(" aapl ") == "AAPL"
    assert parse_symbol_list("btc-usd, TSLA,,eurusd=x") == ["BTC-USD", "TSLA", "EURUSD=X"]
    with pytest.raises(ValueError):
        normalize_symbol("AA PL")
