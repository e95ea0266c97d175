# tests/test_chart_sync.py
"""Synchronization passes: ordering, all-or-nothing failure, supersession."""

import asyncio

import pytest

from chart.lifecycle import ChartLifecycleManager, ChartState
from chart.sync import NO_DATA_MESSAGE, ChartSynchronizer, PassSuperseded, PreconditionUnmet
from models import IndicatorRequest, TradeRecord
from services.analytics.errors import EmptyResult, FetchFailure
from tests.fakes import END, START, FakeAnalyticsAPI, make_bar


SMA_20 = IndicatorRequest("SMA", 20)
RSI_14 = IndicatorRequest("RSI", 14)


def run(coro):
    return asyncio.run(coro)


def test_price_only_pass(registry):
    api = FakeAnalyticsAPI(prices={"AAPL": [make_bar("2024-01-02", 100, 105, 99, 104)]})
    charts = ChartLifecycleManager(registry.factory, mount=object())
    view = run(ChartSynchronizer(api, charts).synchronize("AAPL", START, END, []))

    assert len(view.price) == 1
    assert view.price[0].close == 104
    assert view.overlays == {}
    assert charts.state == ChartState.DISPLAYING
    surface = registry.live[0]
    assert surface.price == view.price
    assert surface.lines == {}
    assert surface.fitted


def test_price_then_indicators_in_request_order(api, synchronizer, registry):
    api.indicators = {
        "RSI_14": [{"date": "2024-01-02", "value": 55}],
        "SMA_20": [{"Date": "2024-01-02T00:00:00Z", "value": 101}],
    }
    view = run(synchronizer.synchronize("AAPL", START, END, [RSI_14, SMA_20]))

    assert api.calls == [("price", "AAPL"), ("indicator", "RSI_14"), ("indicator", "SMA_20")]
    assert list(view.overlays) == ["RSI_14", "SMA_20"]
    assert registry.live[0].colors == {"RSI_14": "purple", "SMA_20": "blue"}


def test_indicator_failure_discards_everything(api, synchronizer, registry):
    api.indicators = {"SMA_20": [{"date": "2024-01-02", "value": 1}]}
    api.failures = {"RSI_14": "Unknown indicator RSI"}

    with pytest.raises(FetchFailure) as exc:
        run(synchronizer.synchronize("AAPL", START, END, [SMA_20, RSI_14, IndicatorRequest("CCI", 20)]))

    assert str(exc.value) == "Unknown indicator RSI"
    # Stops at the first failure
    assert ("indicator", "CCI_20") not in api.calls
    # Nothing partial was drawn
    assert registry.created == []
    assert registry.live == []


def test_empty_price_range_is_a_failure(api, synchronizer, registry):
    api.prices["AAPL"] = []
    with pytest.raises(EmptyResult) as exc:
        run(synchronizer.synchronize("AAPL", START, END, [SMA_20]))

    assert str(exc.value) == NO_DATA_MESSAGE
    assert api.calls == [("price", "AAPL")]
    assert registry.created == []


def test_price_fetch_failure_propagates(api, synchronizer):
    api.failures = {"price": "Ticker not found"}
    with pytest.raises(FetchFailure, match="Ticker not found"):
        run(synchronizer.synchronize("AAPL", START, END, [SMA_20]))
    assert api.calls == [("price", "AAPL")]


@pytest.mark.parametrize("ticker,start,end", [("", START, END), ("AAPL", "", END), ("AAPL", START, "")])
def test_missing_inputs_make_no_network_call(api, synchronizer, ticker, start, end):
    with pytest.raises(PreconditionUnmet):
        run(synchronizer.synchronize(ticker, start, end, [SMA_20]))
    assert api.calls == []


def test_missing_mount_point_makes_no_network_call(api, registry):
    charts = ChartLifecycleManager(registry.factory)
    with pytest.raises(PreconditionUnmet):
        run(ChartSynchronizer(api, charts).synchronize("AAPL", START, END, []))
    assert api.calls == []
    assert charts.state == ChartState.UNMOUNTED


def test_invalid_request_is_rejected_without_fetching(api, synchronizer):
    with pytest.raises(FetchFailure, match="Invalid indicator request"):
        run(synchronizer.synchronize("AAPL", START, END, [IndicatorRequest("", 0)]))
    assert api.calls == [("price", "AAPL")]


def test_malformed_points_are_dropped_not_fatal(api, synchronizer):
    api.indicators = {"SMA_20": [{"date": "bad-date", "value": 1}, {"Date": "2024-01-02", "value": 2}]}
    view = run(synchronizer.synchronize("AAPL", START, END, [SMA_20]))

    points = view.overlays["SMA_20"].points
    assert len(points) == 1
    assert points[0].value == 2.0


def test_markers_from_trade_records(synchronizer, registry):
    trades = [
        TradeRecord(entry_time="2024-01-02", entry_price=100.0, exit_time="2024-01-03", exit_price=107.0),
        TradeRecord(entry_time="2024-01-03", entry_price=106.0),
    ]
    view = run(synchronizer.synchronize("AAPL", START, END, [], trades))

    assert [m.label for m in view.markers] == ["Buy @ 100.00", "Sell @ 107.00", "Buy @ 106.00"]
    assert registry.live[0].markers == view.markers


def test_no_caching_between_passes(api, synchronizer):
    run(synchronizer.synchronize("AAPL", START, END, [SMA_20]))
    run(synchronizer.synchronize("AAPL", START, END, [SMA_20]))
    assert api.calls.count(("price", "AAPL")) == 2
    assert api.calls.count(("indicator", "SMA_20")) == 2


def test_consecutive_passes_keep_one_live_surface(synchronizer, registry):
    run(synchronizer.synchronize("AAPL", START, END, []))
    first = registry.live[0]
    run(synchronizer.synchronize("MSFT", START, END, []))

    assert first.removed
    assert len(registry.created) == 2
    assert len(registry.live) == 1
    assert registry.live[0].price[0].close == 372
    assert registry.max_live == 1


def test_new_pass_disposes_current_chart_even_if_it_fails(api, synchronizer, registry, charts):
    run(synchronizer.synchronize("AAPL", START, END, []))
    api.failures = {"price": "boom"}

    with pytest.raises(FetchFailure):
        run(synchronizer.synchronize("AAPL", START, END, []))

    assert registry.live == []
    assert charts.state == ChartState.DISPOSED


def test_stale_pass_cannot_overwrite_newer_pass(api, synchronizer, registry):
    async def scenario():
        gate = asyncio.Event()
        api.gates["AAPL"] = gate
        stale = asyncio.create_task(synchronizer.synchronize("AAPL", START, END, []))
        await asyncio.sleep(0)  # stale pass is now waiting on its price fetch

        fresh = await synchronizer.synchronize("MSFT", START, END, [])
        gate.set()
        with pytest.raises(PassSuperseded):
            await stale
        return fresh

    fresh = run(scenario())

    assert fresh.ticker == "MSFT"
    assert len(registry.created) == 1
    assert registry.live[0].price == fresh.price
    assert synchronizer.generation == 2


def test_stale_pass_failure_is_reported_as_superseded(api, synchronizer, registry):
    async def scenario():
        gate = asyncio.Event()
        api.gates["AAPL"] = gate
        api.failures = {"RSI_14": "should not surface"}
        stale = asyncio.create_task(synchronizer.synchronize("AAPL", START, END, [RSI_14]))
        await asyncio.sleep(0)

        await synchronizer.synchronize("MSFT", START, END, [])
        gate.set()
        with pytest.raises(PassSuperseded):
            await stale

    run(scenario())
    assert len(registry.live) == 1


def test_close_makes_in_flight_pass_stale(api, synchronizer, registry, charts):
    async def scenario():
        gate = asyncio.Event()
        api.gates["AAPL"] = gate
        pending = asyncio.create_task(synchronizer.synchronize("AAPL", START, END, [SMA_20, RSI_14]))
        await asyncio.sleep(0)

        synchronizer.close()
        gate.set()
        with pytest.raises(PassSuperseded):
            await pending

    run(scenario())

    # No indicator fetch after teardown
    assert api.calls == [("price", "AAPL")]
    assert registry.created == []
    assert charts.state == ChartState.UNMOUNTED
    assert not charts.has_mount_point


def test_close_releases_displayed_chart(synchronizer, registry, charts):
    run(synchronizer.synchronize("AAPL", START, END, []))
    synchronizer.close()

    assert registry.live == []
    assert not charts.has_mount_point
