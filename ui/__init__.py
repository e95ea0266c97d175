# ui/__init__.py
"""UI components for strategy backtesting."""

from .state import AppState
from .runner import bind_teardown, refresh_chart, run_backtest

__all__ = ["AppState", "bind_teardown", "refresh_chart", "run_backtest"]
