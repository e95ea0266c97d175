# ui/state.py
"""Reactive state management for the strategy backtest UI."""

from dataclasses import dataclass, field
from typing import List, Optional

from backtest.config import BacktestConfig
from backtest.metrics import BacktestStats
from models import TradeRecord


@dataclass
class AppState:
    """
    Central state for the backtest UI.

    All UI components read/write to this state. Chart fetch errors and
    backtest errors live in separate slots: re-running a backtest does
    not require re-fetching chart data.
    """

    # Strategy parameters
    config: BacktestConfig = field(default_factory=BacktestConfig)

    # "light" or "dark" (colors only)
    theme: str = "light"

    # Run state
    running: bool = False
    progress: str = ""  # last progress line of the current run
    backtest_error: str = ""
    chart_error: str = ""

    # Results of the last successful backtest
    stats: Optional[BacktestStats] = None
    trades: List[TradeRecord] = field(default_factory=list)

    def reset_run_state(self):
        """Reset state before a new backtest run."""
        self.running = False
        self.progress = ""
        self.backtest_error = ""
