import pytest

from asset_tracker.schemas.asset import AssetQuote, AssetSnapshot
from asset_tracker.services.metrics_engine import (
    filter_snapshots,
    percent_change,
    rank_gainers,
    rank_losers,
    rank_stable,
    top_snapshots,
    volatility_pct,
)


def quote(symbol, prices):
    return AssetQuote(symbol=symbol, prices=prices, current_price=prices[-1])


def snapshot(symbol, change_percent):
    return AssetSnapshot(symbol=symbol, name=symbol, price=1.0, change_percent=change_percent, type="stocks", source="yahoo")


def test_percent_change_guards():
    assert percent_change([]) == 0
    assert percent_change([42]) == 0
    assert percent_change([0, 5]) == 0


def test_percent_change_values():
    assert percent_change([100, 110]) == pytest.approx(10.0)
    assert percent_change([100, 90]) == pytest.approx(-10.0)
    assert percent_change([100, 500, 105]) == pytest.approx(5.0)


def test_volatility_pct():
    assert volatility_pct([7, 7, 7]) == 0
    assert volatility_pct([100, 100, 100, 100]) == 0
    assert volatility_pct([90, 100, 110]) == pytest.approx(8.165, abs=1e-3)
    assert volatility_pct([5]) == 0
    assert volatility_pct([-1, 1]) == 0


def test_rank_gainers_sorts_descending_and_drops_non_positive():
    data = [quote("A", [100, 105]), quote("B", [50, 48]), quote("C", [10, 11]), quote("D", [3, 3])]
    ranked = rank_gainers(data, 10)
    assert [r.symbol for r in ranked] == ["C", "A"]
    assert ranked[0].pct_change == pytest.approx(10.0)
    assert ranked[0].volatility_pct is None


def test_rank_losers_sorts_ascending():
    data = [quote("A", [100, 95]), quote("B", [50, 40]), quote("C", [10, 11])]
    ranked = rank_losers(data, 1)
    assert [r.symbol for r in ranked] == ["B"]
    assert ranked[0].pct_change == pytest.approx(-20.0)


def test_rank_stable_filters_by_threshold():
    data = [
        quote("CALM", [100, 100.5, 100]),
        quote("WILD", [90, 100, 110]),
        quote("FLAT", [20, 20, 20]),
    ]
    ranked = rank_stable(data, 10, volatility_threshold=2.0)
    assert [r.symbol for r in ranked] == ["FLAT", "CALM"]
    assert ranked[0].volatility_pct == 0


def test_rank_gainers_top_k_is_stable():
    data = [quote(f"S{i}", [100, 100 + i]) for i in range(1, 21)]
    assert rank_gainers(rank_gainers(data, 50), 10) == rank_gainers(data, 10)


def test_filter_snapshots_categories():
    items = [snapshot("UP", 1.2), snapshot("DOWN", -0.5), snapshot("FLAT", 0.05), snapshot("NONE", None)]
    assert [i.symbol for i in filter_snapshots(items, "gainers")] == ["UP", "FLAT"]
    assert [i.symbol for i in filter_snapshots(items, "losers")] == ["DOWN"]
    assert [i.symbol for i in filter_snapshots(items, "stable")] == ["FLAT"]
    assert len(filter_snapshots(items, None)) == 4
    with pytest.raises(ValueError):
        filter_snapshots(items, "moonshots")


def test_top_snapshots():
    items = [snapshot(f"S{i}", float(i)) for i in range(-3, 8)]
    assert [i.symbol for i in top_snapshots(items, "gainers")] == ["S7", "S6", "S5", "S4", "S3"]
    assert [i.symbol for i in top_snapshots(items, "losers")] == ["S-3", "S-2", "S-1"]
