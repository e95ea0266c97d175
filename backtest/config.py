# backtest/config.py
"""Configuration dataclass for a backtest request."""

from dataclasses import dataclass, field
from typing import List, Optional

from models import Condition, IndicatorRequest
from strategies.conditions import (
    condition_from_dict,
    condition_to_dict,
    derive_indicator_requests,
    is_submittable,
)


# Defaults shown when the UI first opens
DEFAULT_TICKER = "AAPL"
DEFAULT_START_DATE = "2019-01-01"
DEFAULT_END_DATE = "2023-12-31"
DEFAULT_INITIAL_CASH = 10_000.0
DEFAULT_COMMISSION = 0.002  # 0.2% per trade
DEFAULT_FIXED_CASH_PER_TRADE = 0.0  # 0 = let the service size positions

DEFAULT_ENTRY_CONDITIONS = [
    {"indicator": "SMA", "period": 20, "comparison": ">", "reference": "SMA_50"},
    {"indicator": "RSI", "period": 14, "comparison": "<", "value": 30},
]
DEFAULT_EXIT_CONDITIONS = [
    {"indicator": "SMA", "period": 20, "comparison": "<", "reference": "SMA_50"},
    {"indicator": "RSI", "period": 14, "comparison": ">", "value": 70},
]

MISSING_INPUTS_MESSAGE = "Please enter the ticker, start date, and end date."
MISSING_CONDITIONS_MESSAGE = "Please add at least one entry and one exit condition."


@dataclass
class BacktestConfig:
    """Strategy parameters sent to /run-backtest."""

    ticker: str = DEFAULT_TICKER

    # Date range - YYYY-MM-DD
    start_date: str = DEFAULT_START_DATE
    end_date: str = DEFAULT_END_DATE

    # Capital & costs
    initial_cash: float = DEFAULT_INITIAL_CASH
    commission: float = DEFAULT_COMMISSION
    fixed_cash_per_trade: float = DEFAULT_FIXED_CASH_PER_TRADE

    # Rules
    entry_conditions: List[Condition] = field(
        default_factory=lambda: [condition_from_dict(c) for c in DEFAULT_ENTRY_CONDITIONS]
    )
    exit_conditions: List[Condition] = field(
        default_factory=lambda: [condition_from_dict(c) for c in DEFAULT_EXIT_CONDITIONS]
    )

    def validate(self) -> Optional[str]:
        """Return the first user-facing validation message, or None if runnable."""
        if not self.ticker or not self.start_date or not self.end_date:
            return MISSING_INPUTS_MESSAGE
        if not is_submittable(self.entry_conditions, self.exit_conditions):
            return MISSING_CONDITIONS_MESSAGE
        return None

    def indicator_requests(self) -> list[IndicatorRequest]:
        """Distinct indicator series needed to chart this strategy."""
        return derive_indicator_requests(self.entry_conditions, self.exit_conditions)

    def to_payload(self) -> dict:
        """Request body for POST /run-backtest."""
        return {
            "ticker": self.ticker,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "params": {
                "conditions": [condition_to_dict(c) for c in self.entry_conditions],
                "exits": [condition_to_dict(c) for c in self.exit_conditions],
                "fixed_cash_per_trade": self.fixed_cash_per_trade,
            },
            "initial_cash": self.initial_cash,
            "commission": self.commission,
        }
