# chart/sync.py - One-shot chart synchronization passes.
"""
Fetch everything a chart needs, then hand it to the lifecycle manager.

A pass runs strictly in order: price bars first, then one indicator at a
time in request order, then trade markers, then display. Any failure
aborts the whole pass; nothing partial is ever drawn.

Passes are numbered. Starting a pass, or closing the synchronizer,
supersedes every earlier pass: a superseded pass notices at its next
resume point and stops without touching the chart or the network.
"""

from typing import Iterable, Sequence

from models import ChartView, IndicatorOverlay, IndicatorRequest, TradeRecord
from services.analytics import AnalyticsAPI
from services.analytics.errors import AnalyticsError, EmptyResult, FetchFailure
from .alignment import align_indicator_points
from .lifecycle import ChartLifecycleManager
from .markers import project_markers


NO_DATA_MESSAGE = "No price data available for the selected ticker and date range."


class PreconditionUnmet(Exception):
    """Missing ticker, date or mount point. Not shown to the user."""


class PassSuperseded(Exception):
    """A newer pass started while this one was waiting."""


class ChartSynchronizer:
    """
    Series fetch orchestrator.

    Usage:
        sync = ChartSynchronizer(api, charts)
        view = await sync.synchronize("AAPL", "2019-01-01", "2023-12-31",
                                      config.indicator_requests(), trades)
    """

    def __init__(self, api: AnalyticsAPI, charts: ChartLifecycleManager):
        self.api = api
        self.charts = charts
        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of the most recently started pass."""
        return self._generation

    def close(self) -> None:
        """Page teardown: make any in-flight pass stale and release the chart."""
        self._generation += 1
        self.charts.unmount()
        print(f"   [Sync] Closed at pass {self._generation}")

    def _ensure_current(self, generation: int) -> None:
        if generation != self._generation:
            print(f"   [Sync] Pass {generation} superseded by pass {self._generation}")
            raise PassSuperseded(f"pass {generation} superseded")

    @staticmethod
    def _check_request(request: IndicatorRequest) -> None:
        if not request.indicator or request.period <= 0:
            raise FetchFailure(
                f"Invalid indicator request: '{request.indicator}' with period {request.period}"
            )

    async def synchronize(
        self,
        ticker: str,
        start_date: str,
        end_date: str,
        indicator_requests: Sequence[IndicatorRequest],
        trade_records: Iterable[TradeRecord] = (),
        theme: str = "light",
    ) -> ChartView:
        """
        Run one synchronization pass.

        Returns:
            The ChartView now on display

        Raises:
            PreconditionUnmet: Missing ticker/dates or no mount point (no network call)
            PassSuperseded: A newer pass started meanwhile (chart untouched)
            EmptyResult: No price bars for the range
            FetchFailure: Any price or indicator fetch failed
        """
        self._generation += 1
        generation = self._generation

        # Inputs changed: the old chart no longer matches them
        self.charts.dispose()

        if not ticker or not start_date or not end_date:
            raise PreconditionUnmet("ticker, start date and end date are required")
        if not self.charts.has_mount_point:
            raise PreconditionUnmet("chart has no mount point")

        print(
            f"   [Sync] Pass {generation}: {ticker} {start_date} to {end_date}, "
            f"{len(indicator_requests)} indicators"
        )

        try:
            bars = await self.api.fetch_price_data(ticker, start_date, end_date)
            self._ensure_current(generation)
            if not bars:
                raise EmptyResult(NO_DATA_MESSAGE)

            overlays: dict[str, IndicatorOverlay] = {}
            for request in indicator_requests:
                self._check_request(request)
                raw = await self.api.fetch_indicator_data(ticker, request, start_date, end_date)
                self._ensure_current(generation)
                overlays[request.key] = IndicatorOverlay(
                    request=request,
                    points=align_indicator_points(raw, request),
                )
        except AnalyticsError as e:
            # Errors from a stale pass must not overwrite the newer pass's error
            if generation != self._generation:
                raise PassSuperseded(f"pass {generation} superseded") from e
            print(f"   [Sync] Pass {generation} failed: {e}")
            raise

        view = ChartView(
            ticker=ticker,
            price=bars,
            overlays=overlays,
            markers=project_markers(trade_records),
        )
        self.charts.display(view, theme)
        return view
