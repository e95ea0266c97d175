"""Services package - Infrastructure components."""

from .analytics import AnalyticsAPI, AnalyticsError, EmptyResult, FetchFailure
from .logger import terminal_logger
from .time_centralize_utils import (
    get_utc_now,
    get_local_now,
    parse_datetime,
    to_epoch_seconds,
    to_utc_day,
    day_to_epoch_seconds,
    UTC_TZ,
    DAY_FORMAT,
)

__all__ = [
    # Centralized time handling
    "get_utc_now",
    "get_local_now",
    "parse_datetime",
    "to_epoch_seconds",
    "to_utc_day",
    "day_to_epoch_seconds",
    "UTC_TZ",
    "DAY_FORMAT",
    # Analytics service
    "AnalyticsAPI",
    "AnalyticsError",
    "EmptyResult",
    "FetchFailure",
    # Logging
    "terminal_logger",
]
