# backtest/__init__.py
"""Backtest request configuration and result handling."""

from .config import BacktestConfig
from .metrics import BacktestResponse, BacktestStats, generate_report

__all__ = [
    "BacktestConfig",
    "BacktestResponse",
    "BacktestStats",
    "generate_report",
]
