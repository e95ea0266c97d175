# services/analytics/errors.py - Errors raised by the analytics client.
"""
User-visible failures of the analytics service.

Both carry a single human-readable message that the UI shows as-is.
"""


class AnalyticsError(Exception):
    """Base class for failures reported to the user."""


class FetchFailure(AnalyticsError):
    """Non-2xx, transport error or malformed response from the service."""


class EmptyResult(AnalyticsError):
    """The service returned no price data for the ticker/range."""
