# ui/runner.py
"""Backtest and chart refresh wrappers for the UI."""

from typing import Callable, Optional

from backtest.metrics import BacktestResponse
from chart.sync import ChartSynchronizer, PassSuperseded, PreconditionUnmet
from models import ChartView
from services.analytics import AnalyticsAPI, AnalyticsError

from .state import AppState


async def run_backtest(
    state: AppState,
    api: AnalyticsAPI,
    on_progress: Optional[Callable[[str], None]] = None,
) -> Optional[BacktestResponse]:
    """
    Run a backtest with current UI state settings.

    Validation and service failures go to state.backtest_error only; the
    chart error slot is cleared on success since new results trigger a
    fresh chart pass.

    Args:
        state: Current UI state with all settings
        api: Analytics service client
        on_progress: Optional callback for progress updates

    Returns:
        Parsed response, or None if validation or the request failed
    """

    def log(msg: str):
        state.progress = msg
        if on_progress:
            on_progress(msg)
        print(msg)

    state.reset_run_state()

    message = state.config.validate()
    if message:
        state.backtest_error = message
        return None

    config = state.config
    state.running = True
    log(f"[UI] Running backtest: {config.ticker} {config.start_date} to {config.end_date}")
    log(f"  Entry rules: {len(config.entry_conditions)}, exit rules: {len(config.exit_conditions)}")

    try:
        response = await api.run_backtest(config)
    except AnalyticsError as e:
        state.backtest_error = str(e)
        log(f"[UI] Backtest failed: {e}")
        return None
    finally:
        state.running = False

    state.stats = response.stats
    state.trades = response.trades
    state.chart_error = ""
    log(f"[UI] Backtest complete: {response.total_trades} trades")
    return response


async def refresh_chart(
    state: AppState,
    synchronizer: ChartSynchronizer,
) -> Optional[ChartView]:
    """
    Run one chart synchronization pass for the current state.

    Returns:
        The displayed ChartView, or None when the pass did not run, was
        superseded, or failed (failure text in state.chart_error)
    """
    config = state.config
    try:
        view = await synchronizer.synchronize(
            config.ticker,
            config.start_date,
            config.end_date,
            config.indicator_requests(),
            state.trades,
            theme=state.theme,
        )
    except (PreconditionUnmet, PassSuperseded):
        return None
    except AnalyticsError as e:
        state.chart_error = str(e)
        return None
    except Exception as e:
        # Surface construction/rendering errors
        state.chart_error = str(e) or "Error fetching price data"
        print(f"[UI] Chart rendering failed: {type(e).__name__}: {e}")
        return None

    state.chart_error = ""
    return view


def bind_teardown(client, synchronizer: ChartSynchronizer, api: AnalyticsAPI) -> None:
    """
    Release the chart and the HTTP session when the page's client is deleted.

    Bound to deletion, not disconnect: a client that drops and reconnects
    within the reconnect timeout keeps its page, so its chart must stay
    mounted.
    """

    async def teardown():
        synchronizer.close()
        await api.close()
        print("[UI] Page closed, chart released")

    client.on_delete(teardown)
