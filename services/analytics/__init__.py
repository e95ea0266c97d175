# services/analytics/__init__.py - Public exports for the analytics package.
"""
Analytics service package.

Main classes:
    AnalyticsAPI - Async client for price, indicator and backtest endpoints

Errors:
    AnalyticsError - Base for user-visible failures
    FetchFailure - Non-2xx, transport or malformed response
    EmptyResult - No price data for the ticker/range

Usage:
    from services.analytics import AnalyticsAPI

    async with AnalyticsAPI() as api:
        bars = await api.fetch_price_data("AAPL", "2019-01-01", "2023-12-31")
"""

from .api import AnalyticsAPI
from .errors import AnalyticsError, EmptyResult, FetchFailure

__all__ = [
    "AnalyticsAPI",
    "AnalyticsError",
    "EmptyResult",
    "FetchFailure",
]
