# chart/markers.py - Trade records to chart annotations.
"""Project backtest trades onto the price chart as entry/exit markers."""

from typing import Iterable

from models import Marker, MarkerSide, TradeRecord
from .alignment import trade_entry_day, trade_exit_day


def entry_label(price: float) -> str:
    return f"Buy @ {price:.2f}"


def exit_label(price: float) -> str:
    return f"Sell @ {price:.2f}"


def project_markers(trades: Iterable[TradeRecord]) -> list[Marker]:
    """
    One entry marker per trade, plus an exit marker when the trade closed.

    Output follows trade order. Trades on the same day are not merged.
    A trade whose entry time cannot be parsed contributes nothing.
    """
    markers: list[Marker] = []

    for trade in trades:
        entry_day = trade_entry_day(trade)
        if entry_day is None:
            print(f"   [Chart] Skipping trade with invalid entry time: {trade.entry_time}")
            continue

        markers.append(Marker(
            time=entry_day,
            side=MarkerSide.ENTRY,
            price=trade.entry_price,
            label=entry_label(trade.entry_price),
        ))

        exit_day = trade_exit_day(trade)
        if exit_day is not None and trade.exit_price is not None:
            markers.append(Marker(
                time=exit_day,
                side=MarkerSide.EXIT,
                price=trade.exit_price,
                label=exit_label(trade.exit_price),
            ))

    return markers
