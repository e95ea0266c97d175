# tests/test_backtest_config.py
"""Backtest request configuration."""

from backtest.config import (
    MISSING_CONDITIONS_MESSAGE,
    MISSING_INPUTS_MESSAGE,
    BacktestConfig,
)
from models import IndicatorRequest, SelfReferencing, Thresholded


def test_defaults():
    config = BacktestConfig()
    assert config.ticker == "AAPL"
    assert (config.start_date, config.end_date) == ("2019-01-01", "2023-12-31")
    assert config.initial_cash == 10_000
    assert config.commission == 0.002
    assert config.fixed_cash_per_trade == 0
    assert config.entry_conditions[0].target == SelfReferencing("SMA_50")
    assert config.entry_conditions[1].target == Thresholded(30.0)
    assert config.validate() is None


def test_default_conditions_are_not_shared():
    a, b = BacktestConfig(), BacktestConfig()
    a.entry_conditions.pop()
    assert len(b.entry_conditions) == 2


def test_default_indicator_requests():
    assert BacktestConfig().indicator_requests() == [IndicatorRequest("SMA", 20), IndicatorRequest("RSI", 14)]


def test_validate_missing_inputs():
    assert BacktestConfig(ticker="").validate() == MISSING_INPUTS_MESSAGE
    assert BacktestConfig(end_date="").validate() == MISSING_INPUTS_MESSAGE


def test_validate_missing_conditions():
    assert BacktestConfig(exit_conditions=[]).validate() == MISSING_CONDITIONS_MESSAGE
    assert BacktestConfig(entry_conditions=[]).validate() == MISSING_CONDITIONS_MESSAGE


def test_payload_shape():
    payload = BacktestConfig(fixed_cash_per_trade=500).to_payload()

    assert payload["ticker"] == "AAPL"
    assert payload["initial_cash"] == 10_000
    assert payload["commission"] == 0.002
    assert payload["params"]["fixed_cash_per_trade"] == 500
    assert payload["params"]["conditions"][0] == {
        "indicator": "SMA", "period": 20, "comparison": ">", "reference": "SMA_50",
    }
    assert payload["params"]["exits"][1] == {
        "indicator": "RSI", "period": 14, "comparison": ">", "value": 70.0,
    }
