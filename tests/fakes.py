# tests/fakes.py
"""In-memory stand-ins for the analytics client and the chart surface."""

import asyncio

from backtest.metrics import BacktestResponse
from chart.surface import ChartSurface
from models import PriceBar
from services.analytics.errors import FetchFailure


START = "2024-01-01"
END = "2024-01-31"


class FakeAnalyticsAPI:
    """
    Stand-in for AnalyticsAPI.

    prices:     {ticker: [PriceBar, ...]}
    indicators: {"SMA_20": [raw point dicts]}
    failures:   {"price" | "SMA_20" | "backtest": message}
    gates:      {ticker: asyncio.Event} - price fetch waits on it
    """

    def __init__(self, prices=None, indicators=None, failures=None, backtest=None):
        self.prices = prices or {}
        self.indicators = indicators or {}
        self.failures = failures or {}
        self.backtest = backtest or BacktestResponse()
        self.gates = {}
        self.calls = []

    async def fetch_price_data(self, ticker, start_date, end_date):
        self.calls.append(("price", ticker))
        if ticker in self.gates:
            await self.gates[ticker].wait()
        if "price" in self.failures:
            raise FetchFailure(self.failures["price"])
        return list(self.prices.get(ticker, []))

    async def fetch_indicator_data(self, ticker, request, start_date, end_date):
        self.calls.append(("indicator", request.key))
        await asyncio.sleep(0)
        if request.key in self.failures:
            raise FetchFailure(self.failures[request.key])
        return list(self.indicators.get(request.key, []))

    async def run_backtest(self, config):
        self.calls.append(("backtest", config.ticker))
        if "backtest" in self.failures:
            raise FetchFailure(self.failures["backtest"])
        return self.backtest

    async def close(self):
        pass


class SurfaceRegistry:
    """Tracks every fake surface so tests can count live ones."""

    def __init__(self, fail_on=None):
        self.created = []
        self.live = []
        self.max_live = 0
        self.fail_on = fail_on

    def factory(self, mount, palette):
        return FakeSurface(self, mount, palette)


class FakeSurface(ChartSurface):
    def __init__(self, registry, mount, palette):
        self.registry = registry
        self.mount = mount
        self.palette = palette
        self.price = []
        self.lines = {}
        self.colors = {}
        self.markers = []
        self.fitted = False
        self._removed = False
        registry.created.append(self)
        registry.live.append(self)
        registry.max_live = max(registry.max_live, len(registry.live))

    def _maybe_fail(self, name):
        if self.registry.fail_on == name:
            raise RuntimeError(f"{name} failed")

    def set_price_data(self, bars):
        self._maybe_fail("set_price_data")
        self.price = list(bars)

    def clear_overlays(self):
        self.lines.clear()
        self.colors.clear()

    def add_line_series(self, key, points, color):
        self._maybe_fail("add_line_series")
        self.lines[key] = list(points)
        self.colors[key] = color

    def set_markers(self, markers):
        self.markers = list(markers)

    def fit_content(self):
        self.fitted = True

    def remove(self):
        if self._removed:
            return
        self._removed = True
        self.registry.live.remove(self)

    @property
    def removed(self):
        return self._removed


def make_bar(date, open_=100.0, high=105.0, low=99.0, close=104.0):
    return PriceBar(date=date, open=open_, high=high, low=low, close=close)

