# chart/theme.py - Colors for the chart surface.
"""
Color choices. Theme only affects colors, never data.
"""

from dataclasses import dataclass

from models import MarkerSide


INDICATOR_COLORS = {
    "SMA": "blue",
    "EMA": "green",
    "RSI": "purple",
    "ATR": "orange",
    "CCI": "brown",
    "CMF": "cyan",
    "Williams %R": "magenta",
    "Donchian Channels": "pink",
    "Parabolic SAR": "yellow",
    "MACD": "red",
}
DEFAULT_INDICATOR_COLOR = "gray"

CANDLE_UP_COLOR = "#22C55E"
CANDLE_DOWN_COLOR = "#EF4444"


def indicator_color(indicator: str) -> str:
    """Line color for an indicator name; gray for anything unrecognized."""
    return INDICATOR_COLORS.get(indicator, DEFAULT_INDICATOR_COLOR)


@dataclass(frozen=True)
class Palette:
    background: str
    text: str
    grid: str


PALETTES = {
    "light": Palette(background="#FFFFFF", text="#1F2937", grid="#E5E7EB"),
    "dark": Palette(background="#000000", text="#E5E7EB", grid="#374151"),
}


def palette_for(theme: str) -> Palette:
    """Anything other than "dark" renders light."""
    return PALETTES["dark"] if theme == "dark" else PALETTES["light"]


@dataclass(frozen=True)
class MarkerStyle:
    color: str
    position: str  # "belowBar" or "aboveBar"
    shape: str     # "arrowUp" or "arrowDown"


MARKER_STYLES = {
    MarkerSide.ENTRY: MarkerStyle(color="green", position="belowBar", shape="arrowUp"),
    MarkerSide.EXIT: MarkerStyle(color="red", position="aboveBar", shape="arrowDown"),
}
