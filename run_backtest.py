#!/usr/bin/env python3
"""
Backtest Runner - headless entry point.

This script:
1. Submits the strategy to the analytics service
2. Prints the performance report
3. Prints the trade markers the chart would show

Usage:
    python run_backtest.py --ticker AAPL --start 2019-01-01 --end 2023-12-31

Configuration:
    ANALYTICS_API_URL in .env. Entry/exit rules are the defaults from
    backtest/config.py.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent

# Load environment variables
load_dotenv(PROJECT_ROOT / ".env")

from backtest.config import BacktestConfig
from backtest.metrics import generate_report
from chart.markers import project_markers
from services.analytics import AnalyticsAPI, AnalyticsError


def parse_args(argv=None) -> argparse.Namespace:
    defaults = BacktestConfig()
    parser = argparse.ArgumentParser(description="Run a rule-based backtest on the analytics service")
    parser.add_argument("--ticker", default=defaults.ticker)
    parser.add_argument("--start", default=defaults.start_date, help="YYYY-MM-DD")
    parser.add_argument("--end", default=defaults.end_date, help="YYYY-MM-DD")
    parser.add_argument("--cash", type=float, default=defaults.initial_cash)
    parser.add_argument("--commission", type=float, default=defaults.commission)
    parser.add_argument("--fixed-cash", type=float, default=defaults.fixed_cash_per_trade)
    parser.add_argument("--api-url", default=None, help="Overrides ANALYTICS_API_URL")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """Run the backtest. Returns a process exit code."""
    config = BacktestConfig(
        ticker=args.ticker.upper(),
        start_date=args.start,
        end_date=args.end,
        initial_cash=args.cash,
        commission=args.commission,
        fixed_cash_per_trade=args.fixed_cash,
    )

    message = config.validate()
    if message:
        print(message)
        return 2

    print("=" * 60)
    print("RULE BACKTEST")
    print("=" * 60)
    print(f"Ticker:        {config.ticker}")
    print(f"Period:        {config.start_date} to {config.end_date}")
    print(f"Cash:          ${config.initial_cash:,.0f}")
    print(f"Indicators:    {', '.join(r.key for r in config.indicator_requests())}")
    print("=" * 60)

    async with AnalyticsAPI(args.api_url) as api:
        try:
            response = await api.run_backtest(config)
        except AnalyticsError as e:
            print(f"Backtest failed: {e}")
            return 1

    print(generate_report(response, config))

    markers = project_markers(response.trades)
    if markers:
        print("\nTrade markers:")
        for marker in markers:
            print(f"  {marker.time}  {marker.side.value:<5}  {marker.label}")

    print("\nBacktest complete!")
    return 0


def main(argv=None) -> int:
    return asyncio.run(run(parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
