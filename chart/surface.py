# chart/surface.py - Visual surface interface and NiceGUI implementation.
"""
This module defines the interface the lifecycle manager draws through.
Rendering primitives (candles, lines, zoom) belong to the surface; the
rest of the pipeline only hands it finished series.

To add a new surface:
1. Implement a class that inherits from ChartSurface
2. Pass a factory for it to ChartLifecycleManager
"""

from abc import ABC, abstractmethod
from typing import Any

from nicegui import ui

from models import IndicatorPoint, Marker, MarkerSide, PriceBar
from services.time_centralize_utils import day_to_epoch_seconds
from .theme import CANDLE_DOWN_COLOR, CANDLE_UP_COLOR, MARKER_STYLES, Palette


DEFAULT_HEIGHT = 600


class ChartSurface(ABC):
    """One live chart instance. Unusable once removed."""

    @abstractmethod
    def set_price_data(self, bars: list[PriceBar]) -> None:
        """Replace the candlestick layer."""
        pass

    @abstractmethod
    def clear_overlays(self) -> None:
        """Remove every indicator line."""
        pass

    @abstractmethod
    def add_line_series(self, key: str, points: list[IndicatorPoint], color: str) -> None:
        """Add one indicator overlay."""
        pass

    @abstractmethod
    def set_markers(self, markers: list[Marker]) -> None:
        """Replace the trade markers on the price layer."""
        pass

    @abstractmethod
    def fit_content(self) -> None:
        """Fit all data into the visible frame."""
        pass

    @abstractmethod
    def remove(self) -> None:
        """Release the surface. Safe to call more than once."""
        pass

    @property
    @abstractmethod
    def removed(self) -> bool:
        pass


def _day_ms(day: str) -> int:
    return day_to_epoch_seconds(day) * 1000


def _marker_point(marker: Marker) -> dict[str, Any]:
    """ECharts markPoint item for one trade marker."""
    style = MARKER_STYLES[marker.side]
    below = style.position == "belowBar"
    return {
        "name": marker.label,
        "coord": [_day_ms(marker.time), marker.price],
        "value": marker.label,
        "symbol": "arrow",
        "symbolSize": 12,
        "symbolRotate": 0 if marker.side == MarkerSide.ENTRY else 180,
        "symbolOffset": [0, "100%"] if below else [0, "-100%"],
        "itemStyle": {"color": style.color},
        "label": {
            "show": True,
            "formatter": marker.label,
            "position": "bottom" if below else "top",
            "color": style.color,
            "fontSize": 10,
        },
    }


class EChartSurface(ChartSurface):
    """
    Chart drawn with NiceGUI's ECharts element.

    Usage:
        container = ui.element("div").classes("w-full")
        surface = EChartSurface(container, palette_for("dark"))
        surface.set_price_data(bars)
        surface.fit_content()
        surface.remove()
    """

    def __init__(self, container: ui.element, palette: Palette, height: int = DEFAULT_HEIGHT):
        self._removed = False
        with container:
            self._chart = ui.echart(self._base_options(palette)).style(f"height: {height}px")

    @staticmethod
    def _base_options(palette: Palette) -> dict[str, Any]:
        grid_line = {"lineStyle": {"color": palette.grid}}
        return {
            "animation": False,
            "backgroundColor": palette.background,
            "textStyle": {"color": palette.text},
            "legend": {"textStyle": {"color": palette.text}},
            "tooltip": {"trigger": "axis", "axisPointer": {"type": "cross"}},
            "xAxis": {"type": "time", "splitLine": {"show": True, **grid_line}},
            "yAxis": {"type": "value", "scale": True, "splitLine": grid_line},
            "dataZoom": [{"type": "inside"}, {"type": "slider"}],
            "series": [{
                "name": "Price",
                "type": "candlestick",
                "data": [],
                "itemStyle": {
                    "color": CANDLE_UP_COLOR,
                    "color0": CANDLE_DOWN_COLOR,
                    "borderColor": CANDLE_UP_COLOR,
                    "borderColor0": CANDLE_DOWN_COLOR,
                },
                "markPoint": {"data": []},
            }],
        }

    @property
    def _price_series(self) -> dict[str, Any]:
        return self._chart.options["series"][0]

    @property
    def removed(self) -> bool:
        return self._removed

    def set_price_data(self, bars: list[PriceBar]) -> None:
        # ECharts candlestick order: [time, open, close, low, high]
        self._price_series["data"] = [
            [_day_ms(bar.date), bar.open, bar.close, bar.low, bar.high] for bar in bars
        ]
        self._chart.update()

    def clear_overlays(self) -> None:
        del self._chart.options["series"][1:]
        self._chart.update()

    def add_line_series(self, key: str, points: list[IndicatorPoint], color: str) -> None:
        self._chart.options["series"].append({
            "name": key,
            "type": "line",
            "data": [[p.time * 1000, p.value] for p in points],
            "showSymbol": False,
            "lineStyle": {"width": 1, "color": color},
            "itemStyle": {"color": color},
        })
        self._chart.update()

    def set_markers(self, markers: list[Marker]) -> None:
        self._price_series["markPoint"] = {"data": [_marker_point(m) for m in markers]}
        self._chart.update()

    def fit_content(self) -> None:
        self._chart.options["dataZoom"] = [
            {"type": "inside", "start": 0, "end": 100},
            {"type": "slider", "start": 0, "end": 100},
        ]
        self._chart.update()

    def remove(self) -> None:
        if self._removed:
            return
        self._removed = True
        self._chart.delete()
