# backtest/metrics/calculator.py
"""Parse backtest responses and derive trade statistics."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from models import TradeRecord


# Aggregate fields sent by /run-backtest
STAT_FIELDS = ("total_return", "win_rate", "profit_factor", "sharpe_ratio", "max_drawdown")


def _stat_value(value: Any) -> Optional[float]:
    """Service sends a number or the literal "N/A". NaN and null mean N/A too."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        if value.strip().upper() in ("", "N/A", "NAN"):
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    number = float(value)
    return None if math.isnan(number) or math.isinf(number) else number


def _optional_int(value: Any) -> Optional[int]:
    number = _optional_float(value)
    return None if number is None else int(number)


@dataclass
class BacktestStats:
    """Aggregate statistics. None means the service reported N/A."""

    total_return: Optional[float] = None
    win_rate: Optional[float] = None
    profit_factor: Optional[float] = None
    sharpe_ratio: Optional[float] = None
    max_drawdown: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BacktestStats":
        return cls(**{name: _stat_value(data.get(name)) for name in STAT_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, N/A for missing values."""
        return {
            name: ("N/A" if getattr(self, name) is None else round(getattr(self, name), 4))
            for name in STAT_FIELDS
        }


@dataclass
class BacktestResponse:
    """Statistics plus individual trades from one backtest run."""

    stats: BacktestStats = field(default_factory=BacktestStats)
    trades: List[TradeRecord] = field(default_factory=list)

    @property
    def total_trades(self) -> int:
        return len(self.trades)

    @property
    def closed_trades(self) -> List[TradeRecord]:
        return [t for t in self.trades if not t.is_open]

    @property
    def open_trades(self) -> List[TradeRecord]:
        return [t for t in self.trades if t.is_open]

    @property
    def winning_trades(self) -> int:
        return sum(1 for t in self.closed_trades if t.pnl > 0)

    @property
    def losing_trades(self) -> int:
        return sum(1 for t in self.closed_trades if t.pnl <= 0)

    @property
    def total_pnl(self) -> float:
        return sum(t.pnl for t in self.closed_trades)


def parse_trade_record(item: Dict[str, Any]) -> TradeRecord:
    """
    Build a TradeRecord from a trade_history entry.

    Keys: EntryTime, ExitTime, EntryPrice, ExitPrice, Size, PnL,
    ReturnPct, Duration, EntryBar, ExitBar. Exit keys may be absent or
    null for an open position.

    Raises:
        ValueError: If the entry is not an object, or EntryTime or EntryPrice
            is missing or not numeric
    """
    if not isinstance(item, dict):
        raise ValueError(f"Trade entry must be an object, got {type(item).__name__}")

    entry_time = _optional_str(item.get("EntryTime"))
    if entry_time is None:
        raise ValueError(f"Trade without EntryTime: {item}")
    entry_price = _optional_float(item.get("EntryPrice"))
    if entry_price is None:
        raise ValueError(f"Trade without EntryPrice: {item}")

    return TradeRecord(
        entry_time=entry_time,
        entry_price=entry_price,
        size=_optional_float(item.get("Size")) or 0.0,
        pnl=_optional_float(item.get("PnL")) or 0.0,
        return_pct=_optional_float(item.get("ReturnPct")) or 0.0,
        duration_bars=_optional_int(item.get("Duration")) or 0,
        exit_time=_optional_str(item.get("ExitTime")),
        exit_price=_optional_float(item.get("ExitPrice")),
        entry_bar=_optional_int(item.get("EntryBar")),
        exit_bar=_optional_int(item.get("ExitBar")),
    )


def parse_backtest_response(data: Any) -> BacktestResponse:
    """
    Parse the /run-backtest JSON body.

    Raises:
        ValueError: If the body is not an object or a trade is malformed
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected JSON object, got {type(data).__name__}")

    history = data.get("trade_history") or []
    if not isinstance(history, list):
        raise ValueError("trade_history must be a list")

    return BacktestResponse(
        stats=BacktestStats.from_dict(data),
        trades=[parse_trade_record(item) for item in history],
    )
