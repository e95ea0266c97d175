# backtest/metrics/__init__.py
"""Backtest response parsing and reporting."""

from .calculator import (
    BacktestResponse,
    BacktestStats,
    parse_backtest_response,
    parse_trade_record,
)
from .report import format_pct, format_ratio, format_stats, generate_report

__all__ = [
    "BacktestResponse",
    "BacktestStats",
    "parse_backtest_response",
    "parse_trade_record",
    "format_stats",
    "generate_report",
    "format_pct",
    "format_ratio",
]
