# services/time_centralize_utils.py - Centralized time handling for chart data.
"""
CENTRALIZED TIME SERVER - Single source of truth for chart time keys.

This module provides:
1. Tolerant parsing of the date/datetime strings the analytics service sends
2. Conversion to the two chart axis keys:
   - Day keys:    'YYYY-MM-DD' (price bars, trade markers)
   - Second keys: integer epoch seconds, UTC (indicator points)
3. Current-time helpers for logging

Naive datetimes are assumed to be UTC. Bare dates resolve to UTC midnight.

ALL date parsing in the project should use this module.
"""

import math
from datetime import datetime
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo

import pandas as pd


# =============================================================================
# TIMEZONE CONSTANTS
# =============================================================================

UTC_TZ = ZoneInfo("UTC")

DAY_FORMAT = "%Y-%m-%d"


# =============================================================================
# CORE TIME FUNCTIONS
# =============================================================================


def get_utc_now() -> datetime:
    """Get current time in UTC (timezone-aware)."""
    return datetime.now(UTC_TZ)


def get_local_now() -> datetime:
    """Get current local wall-clock time. Use for log file names and prefixes."""
    return datetime.now()


# =============================================================================
# PARSING
# =============================================================================


def parse_datetime(value: Union[str, datetime, pd.Timestamp, None]) -> Optional[pd.Timestamp]:
    """Parse a bare date or ISO datetime into a UTC-aware Timestamp.

    Supports:
    - Bare date: '2024-01-02' (UTC midnight)
    - ISO format: '2024-01-02T15:30:00Z', '2024-01-02 09:30:00-05:00'
    - Naive ISO: '2024-01-02T15:30:00' (assumed UTC)

    Returns None when the value is missing or unparsable.
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None

    try:
        ts = pd.to_datetime(value, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None

    if ts is None or pd.isna(ts):
        return None

    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


# =============================================================================
# AXIS KEYS
# =============================================================================


def to_epoch_seconds(value: Any) -> Optional[int]:
    """Convert to integer epoch seconds, floored. None if unparsable."""
    ts = parse_datetime(value)
    if ts is None:
        return None
    return math.floor(ts.timestamp())


def to_utc_day(value: Any) -> Optional[str]:
    """Reduce to the UTC calendar day ('YYYY-MM-DD'). None if unparsable."""
    ts = parse_datetime(value)
    if ts is None:
        return None
    return ts.strftime(DAY_FORMAT)


def day_to_epoch_seconds(day: str) -> int:
    """Epoch seconds for UTC midnight of a 'YYYY-MM-DD' day key."""
    return int(datetime.strptime(day[:10], DAY_FORMAT).replace(tzinfo=UTC_TZ).timestamp())
