# backtest/metrics/report.py
"""Format backtest results for the terminal and the UI."""

from typing import Dict, Optional

from .calculator import BacktestResponse, BacktestStats
from backtest.config import BacktestConfig


NA = "N/A"


def format_pct(value: Optional[float]) -> str:
    """12.345 -> '12.35%', None -> 'N/A'."""
    return NA if value is None else f"{value:.2f}%"


def format_ratio(value: Optional[float]) -> str:
    """1.234 -> '1.23', None -> 'N/A'."""
    return NA if value is None else f"{value:.2f}"


def format_stats(stats: BacktestStats) -> Dict[str, str]:
    """Display strings keyed by card label, in display order."""
    return {
        "Win Rate": format_pct(stats.win_rate),
        "Profit Factor": format_ratio(stats.profit_factor),
        "Sharpe Ratio": format_ratio(stats.sharpe_ratio),
        "Max Drawdown": format_pct(stats.max_drawdown),
        "Total Return": format_pct(stats.total_return),
    }


def generate_report(
    response: BacktestResponse,
    config: BacktestConfig,
) -> str:
    """
    Generate a text report of backtest results.

    Args:
        response: Parsed /run-backtest response
        config: Backtest configuration that produced it

    Returns:
        Formatted report string
    """
    display = format_stats(response.stats)

    lines = [
        "=" * 60,
        "BACKTEST RESULTS",
        "=" * 60,
        "",
        "Configuration:",
        f"  Ticker:          {config.ticker}",
        f"  Period:          {config.start_date} to {config.end_date}",
        f"  Initial Cash:    ${config.initial_cash:,.2f}",
        f"  Commission:      {config.commission * 100:.2f}%",
        f"  Entry Rules:     {len(config.entry_conditions)}",
        f"  Exit Rules:      {len(config.exit_conditions)}",
        "",
        "-" * 60,
        "Performance Summary:",
        "-" * 60,
    ]
    lines.extend(f"  {label + ':':<16} {value}" for label, value in display.items())
    lines.extend([
        "",
        "-" * 60,
        "Trade Statistics:",
        "-" * 60,
        f"  Total Trades:    {response.total_trades}",
        f"  Winning Trades:  {response.winning_trades}",
        f"  Losing Trades:   {response.losing_trades}",
        f"  Open Positions:  {len(response.open_trades)}",
        f"  Closed P&L:      ${response.total_pnl:,.2f}",
        "",
        "=" * 60,
    ])

    return "\n".join(lines)
