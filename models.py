# models.py - Pure data classes with NO dependencies.
"""
This module contains all shared data classes used across the application.
Having them in a separate file prevents circular imports.

All classes here should be:
- Pure dataclasses or enums
- Have NO imports from other project modules
- Be importable by any module in the project
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


# =============================================================================
# CONDITIONS
# =============================================================================

@dataclass(frozen=True)
class SelfReferencing:
    """Condition target: compare against another series (e.g. "SMA_50")."""
    reference: str = ""


@dataclass(frozen=True)
class Thresholded:
    """Condition target: compare against a fixed numeric value."""
    value: float | None = None


ConditionTarget = Union[SelfReferencing, Thresholded]


@dataclass(frozen=True)
class Condition:
    """One entry or exit rule."""
    indicator: str
    period: int
    comparison: str  # ">", "<" or "="
    target: ConditionTarget = field(default_factory=Thresholded)


@dataclass(frozen=True)
class IndicatorRequest:
    """A distinct (indicator, period) pair that needs its own series."""
    indicator: str
    period: int

    @property
    def key(self) -> str:
        """Overlay key, e.g. "SMA_20"."""
        return f"{self.indicator}_{self.period}"


# =============================================================================
# SERIES
# =============================================================================

@dataclass(frozen=True)
class PriceBar:
    """Single daily OHLC bar. date is a YYYY-MM-DD string."""
    date: str
    open: float
    high: float
    low: float
    close: float


@dataclass(frozen=True)
class IndicatorPoint:
    """Single indicator value. time is integer epoch seconds (UTC)."""
    time: int
    value: float


@dataclass(frozen=True)
class TradeRecord:
    """One trade returned by the backtest service. Exit fields are None while open."""
    entry_time: str
    entry_price: float
    size: float = 0.0
    pnl: float = 0.0
    return_pct: float = 0.0
    duration_bars: int = 0
    exit_time: str | None = None
    exit_price: float | None = None
    entry_bar: int | None = None
    exit_bar: int | None = None

    @property
    def is_open(self) -> bool:
        return self.exit_time is None or self.exit_price is None


# =============================================================================
# CHART
# =============================================================================

class MarkerSide(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"


@dataclass(frozen=True)
class Marker:
    """Trade annotation on the price series. time is a YYYY-MM-DD day key."""
    time: str
    side: MarkerSide
    price: float
    label: str


@dataclass
class IndicatorOverlay:
    """Line overlay for one indicator request."""
    request: IndicatorRequest
    points: list[IndicatorPoint] = field(default_factory=list)


@dataclass
class ChartView:
    """Composed chart state: price series, named overlays and trade markers."""
    ticker: str
    price: list[PriceBar] = field(default_factory=list)
    overlays: dict[str, IndicatorOverlay] = field(default_factory=dict)  # {"SMA_20": overlay}
    markers: list[Marker] = field(default_factory=list)
