# services/analytics/api.py - Raw analytics service API calls.
"""
Async client for the external analytics service.

This module handles direct API calls only. No caching, no retries:
identical requests are refetched every time.

Endpoints:
    - Price bars:  GET  {base}/get-price-data?ticker&start_date&end_date
    - Indicator:   GET  {base}/get-indicator-data?ticker&indicator&period&start_date&end_date
    - Backtest:    POST {base}/run-backtest

Non-2xx responses carry a JSON body like {"error": "..."}; that message is
surfaced to the user when present.
"""

import os
from typing import Any, Optional

import aiohttp

from backtest.config import BacktestConfig
from backtest.metrics.calculator import BacktestResponse, parse_backtest_response
from models import IndicatorRequest, PriceBar
from .errors import FetchFailure


PRICE_FALLBACK_ERROR = "Error fetching price data"
BACKTEST_FALLBACK_ERROR = "Error running backtest"


def indicator_fallback_error(indicator: str) -> str:
    return f"Error fetching {indicator} data"


class AnalyticsAPI:
    """
    Async analytics service client.

    Usage:
        api = AnalyticsAPI()

        # Fetch data
        bars = await api.fetch_price_data("AAPL", "2019-01-01", "2023-12-31")
        raw = await api.fetch_indicator_data("AAPL", IndicatorRequest("RSI", 14), start, end)
        result = await api.run_backtest(config)

        # Close session
        await api.close()
    """

    def __init__(self, base_url: Optional[str] = None):
        """
        Initialize API client.

        Args:
            base_url: Service root URL (defaults to ANALYTICS_API_URL env var)
        """
        base_url = base_url or os.getenv("ANALYTICS_API_URL")
        if not base_url:
            raise ValueError("ANALYTICS_API_URL not set in environment")

        self.base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "AnalyticsAPI":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"Content-Type": "application/json"}
            )
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    @staticmethod
    async def _error_message(response: aiohttp.ClientResponse, fallback: str) -> str:
        """Take "error" from the JSON body if there is one, else the fallback."""
        try:
            data = await response.json(content_type=None)
        except (aiohttp.ContentTypeError, ValueError):
            return fallback
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return fallback

    async def _request_json(
        self,
        method: str,
        path: str,
        fallback: str,
        params: Optional[dict] = None,
        payload: Optional[dict] = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body.

        Raises:
            FetchFailure: On non-2xx, transport error or undecodable body
        """
        session = await self._get_session()
        url = f"{self.base_url}{path}"

        try:
            async with session.request(method, url, params=params, json=payload) as response:
                if not 200 <= response.status < 300:
                    message = await self._error_message(response, fallback)
                    print(f"   [Analytics] {method} {path} -> {response.status}: {message}")
                    raise FetchFailure(message)

                try:
                    return await response.json(content_type=None)
                except ValueError:
                    print(f"   [Analytics] {method} {path} -> undecodable body")
                    raise FetchFailure(fallback)

        except aiohttp.ClientError as e:
            print(f"   [Analytics] {method} {path} failed: {type(e).__name__}: {e}")
            raise FetchFailure(str(e) or fallback) from e

    async def fetch_price_data(
        self,
        ticker: str,
        start_date: str,
        end_date: str,
    ) -> list[PriceBar]:
        """
        Fetch daily OHLC bars.

        Args:
            ticker: Stock symbol
            start_date: Start date (YYYY-MM-DD)
            end_date: End date (YYYY-MM-DD)

        Returns:
            Chronological PriceBar list (may be empty)

        Raises:
            FetchFailure: On service error or malformed bars
        """
        params = {"ticker": ticker, "start_date": start_date, "end_date": end_date}
        data = await self._request_json("GET", "/get-price-data", PRICE_FALLBACK_ERROR, params=params)

        if not isinstance(data, list):
            raise FetchFailure(PRICE_FALLBACK_ERROR)

        try:
            bars = [
                PriceBar(
                    date=str(item["date"])[:10],
                    open=float(item["open"]),
                    high=float(item["high"]),
                    low=float(item["low"]),
                    close=float(item["close"]),
                )
                for item in data
            ]
        except (KeyError, TypeError, ValueError) as e:
            print(f"   [Analytics] {ticker} price data malformed: {e}")
            raise FetchFailure(PRICE_FALLBACK_ERROR) from e

        print(f"   [Analytics] {ticker} daily: {len(bars)} bars ({start_date} to {end_date})")
        return bars

    async def fetch_indicator_data(
        self,
        ticker: str,
        request: IndicatorRequest,
        start_date: str,
        end_date: str,
    ) -> list[dict]:
        """
        Fetch one indicator series.

        Points are returned raw ({Date|date, value}); time alignment happens
        in chart.alignment so bad points can be dropped individually.

        Raises:
            FetchFailure: On service error or a non-list body
        """
        fallback = indicator_fallback_error(request.indicator)
        params = {
            "ticker": ticker,
            "indicator": request.indicator,
            "period": str(request.period),
            "start_date": start_date,
            "end_date": end_date,
        }
        data = await self._request_json("GET", "/get-indicator-data", fallback, params=params)

        if not isinstance(data, list):
            raise FetchFailure(fallback)

        print(f"   [Analytics] {ticker} {request.key}: {len(data)} points")
        return data

    async def run_backtest(self, config: BacktestConfig) -> BacktestResponse:
        """
        Submit a strategy for backtesting.

        Raises:
            FetchFailure: On service error or malformed response
        """
        data = await self._request_json(
            "POST", "/run-backtest", BACKTEST_FALLBACK_ERROR, payload=config.to_payload()
        )

        try:
            result = parse_backtest_response(data)
        except (TypeError, ValueError) as e:
            print(f"   [Analytics] backtest response malformed: {e}")
            raise FetchFailure(BACKTEST_FALLBACK_ERROR) from e

        print(f"   [Analytics] {config.ticker} backtest: {result.total_trades} trades")
        return result
