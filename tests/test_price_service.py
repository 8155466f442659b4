import pytest
from pydantic import ValidationError

from asset_tracker.cache.ttl_cache import TTLCache
from asset_tracker.internal_metrics import MetricsCollector
from asset_tracker.schemas.asset import AssetQuote
from asset_tracker.schemas.candle import PriceResult
from asset_tracker.services.price_service import PriceService
from asset_tracker.utils.asset_class import AssetClass
from conftest import StaticAdapter, make_candles


def build_service(clock, series, metrics=None):
    adapter = StaticAdapter(series)
    service = PriceService({AssetClass.CRYPTO: adapter}, TTLCache(clock=clock), ttl_seconds=60, metrics=metrics)
    return service, adapter


def test_second_fetch_within_ttl_is_served_from_cache(clock):
    service, adapter = build_service(clock, {"BTC": [1, 2, 3]})

    first, first_hit = service.get_price(AssetClass.CRYPTO, "BTC", "1d")
    second, second_hit = service.get_price(AssetClass.CRYPTO, "BTC", "1d")

    assert (first_hit, second_hit) == (False, True)
    assert second == first
    assert len(adapter.calls) == 1

    clock.advance(61)
    _, third_hit = service.get_price(AssetClass.CRYPTO, "BTC", "1d")
    assert third_hit is False
    assert len(adapter.calls) == 2


def test_period_is_part_of_the_cache_key(clock):
    service, adapter = build_service(clock, {"BTC": [1, 2]})
    service.get_price(AssetClass.CRYPTO, "BTC", "1d")
    service.get_price(AssetClass.CRYPTO, "BTC", "1w")
    assert adapter.calls == [("BTC", "1d"), ("BTC", "1w")]


def test_failed_results_are_cached(clock):
    service, adapter = build_service(clock, {"BAD": RuntimeError("upstream 500")})

    result, _ = service.get_price(AssetClass.CRYPTO, "BAD", "1d")
    again, hit = service.get_price(AssetClass.CRYPTO, "BAD", "1d")

    assert result.error == "upstream 500"
    assert hit is True
    assert again.error == "upstream 500"
    assert len(adapter.calls) == 1


def test_metrics_are_recorded(clock):
    metrics = MetricsCollector()
    service, _ = build_service(clock, {"BTC": [1, 2], "BAD": []}, metrics=metrics)
    service.get_price(AssetClass.CRYPTO, "BTC", "1d")
    service.get_price(AssetClass.CRYPTO, "BTC", "1d")
    service.get_price(AssetClass.CRYPTO, "BAD", "1d")

    status = metrics.provider_status()["crypto"]
    assert status["total_requests"] == 3
    assert status["successful_requests"] == 2
    assert status["failed_requests"] == 1
    assert status["cache_hits"] == 1
    assert status["cache_misses"] == 2


def test_unknown_asset_class(clock):
    service, _ = build_service(clock, {})
    with pytest.raises(ValueError):
        service.get_price(AssetClass.FOREX, "EURUSD", "1d")


def test_price_result_invariants():
    ok = PriceResult.from_candles(make_candles([1.0, 2.0]))
    assert ok.current_price == ok.candles[-1].close == 2.0

    failed = PriceResult.failure("No stock data")
    assert failed.candles == []
    assert failed.current_price is None

    with pytest.raises(ValidationError):
        PriceResult(error="boom", candles=make_candles([1.0]), current_price=1.0)
    with pytest.raises(ValidationError):
        PriceResult(current_price=5.0, candles=make_candles([1.0, 2.0]))
    with pytest.raises(ValidationError):
        PriceResult(current_price=2.0, candles=list(reversed(make_candles([2.0, 1.0]))))
    with pytest.raises(ValidationError):
        PriceResult()


def test_asset_quote_requires_successful_result():
    quote = AssetQuote.from_result("BTC", PriceResult.from_candles(make_candles([1.0, 2.0])))
    assert quote.prices == [1.0, 2.0]
    assert quote.current_price == 2.0
    with pytest.raises(ValueError):
        AssetQuote.from_result("BTC", PriceResult.failure("No crypto data"))
