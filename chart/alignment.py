# chart/alignment.py - Put every series on one chart time axis.
"""
Time alignment for price bars, indicator points and trade markers.

Axis keys:
    - Price bars:       'YYYY-MM-DD' day strings, used verbatim
    - Indicator points: integer epoch seconds (UTC), floored
    - Trade markers:    UTC calendar day of the entry/exit instant

Day and second keys share one axis; the chart surface converts both to
its native unit. Points that cannot be placed on the axis are dropped
and logged, never raised.
"""

import math
from typing import Any, Iterable, Optional

from models import IndicatorPoint, IndicatorRequest, PriceBar, TradeRecord
from services.time_centralize_utils import to_epoch_seconds, to_utc_day


def price_axis_key(bar: PriceBar) -> str:
    """Price bars are keyed by their calendar day as sent."""
    return bar.date


def _point_value(item: dict) -> Optional[float]:
    value = item.get("value")
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) or math.isinf(number) else number


def align_indicator_points(
    raw_points: Iterable[Any],
    request: Optional[IndicatorRequest] = None,
) -> list[IndicatorPoint]:
    """
    Convert raw {Date|date, value} items into IndicatorPoints.

    Accepts bare dates and ISO datetimes. Items with a missing or
    unparsable date, or a non-numeric value, are dropped.
    """
    label = request.key if request else "indicator"
    points: list[IndicatorPoint] = []
    dropped = 0

    for item in raw_points:
        if not isinstance(item, dict):
            dropped += 1
            print(f"   [Chart] {label}: dropped non-object point {item!r}")
            continue

        date_value = item.get("Date") or item.get("date")
        if not date_value:
            dropped += 1
            print(f"   [Chart] {label}: dropped point with missing date {item}")
            continue

        seconds = to_epoch_seconds(date_value)
        if seconds is None:
            dropped += 1
            print(f"   [Chart] {label}: dropped point with invalid date {item}")
            continue

        value = _point_value(item)
        if value is None:
            dropped += 1
            continue

        points.append(IndicatorPoint(time=seconds, value=value))

    if dropped:
        print(f"   [Chart] {label}: kept {len(points)} points, dropped {dropped}")
    return points


def trade_entry_day(trade: TradeRecord) -> Optional[str]:
    """UTC day of the entry instant."""
    return to_utc_day(trade.entry_time)


def trade_exit_day(trade: TradeRecord) -> Optional[str]:
    """UTC day of the exit instant, None while the position is open."""
    if trade.exit_time is None:
        return None
    return to_utc_day(trade.exit_time)
