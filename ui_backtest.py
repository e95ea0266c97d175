#!/usr/bin/env python3
"""
Strategy Backtest Dashboard - NiceGUI Application

Build entry/exit rules over technical indicators, run a backtest on the
analytics service and see trades on the price chart.

Usage:
    python ui_backtest.py

Then open http://localhost:8080 in your browser.
"""

import os
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv
from nicegui import app, background_tasks, ui

# Load environment variables
PROJECT_ROOT = Path(__file__).parent
load_dotenv(PROJECT_ROOT / ".env")

from backtest.metrics import format_stats
from chart import ChartLifecycleManager, ChartSynchronizer, EChartSurface
from models import Condition, SelfReferencing, Thresholded
from services.analytics import AnalyticsAPI
from services.logger import terminal_logger
from strategies.conditions import COMPARISONS, KNOWN_INDICATORS, blank_condition, with_indicator
from ui import AppState, bind_teardown, refresh_chart, run_backtest


# ============================================================
# CONFIGURATION - Edit these defaults as needed
# ============================================================

DEFAULT_THEME = "light"  # "light" or "dark"

# Debounce for text inputs before a chart refresh (ms)
INPUT_DEBOUNCE_MS = 500

# UI settings
UI_PORT = int(os.getenv("UI_PORT", "8080"))
UI_TITLE = "Strategy Backtest"

# Tee terminal output into data/logs/ (set LOG_TO_FILE=0 to disable)
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "1") != "0"


# ============================================================
# UI COMPONENTS
# ============================================================

def create_header(state: AppState, dark: ui.dark_mode, on_theme_change):
    """Create page header with theme toggle."""

    def toggle(e):
        state.theme = "dark" if e.value else "light"
        dark.set_value(e.value)
        on_theme_change()

    with ui.row().classes("w-full items-center justify-between mb-6"):
        ui.label("Strategy Lab: Rule Backtester").classes("text-2xl font-bold")
        ui.switch("Dark mode", value=state.theme == "dark", on_change=toggle)


def create_config_panel(state: AppState, on_change):
    """Create strategy parameter inputs."""
    config = state.config

    def setter(name: str, cast=str, refresh: bool = True):
        def apply(e):
            if e.value is None:
                return
            setattr(config, name, cast(e.value))
            if refresh:
                on_change()
        return apply

    with ui.card().classes("w-full mb-4"):
        ui.label("Backtest Configuration").classes("text-lg font-semibold mb-2")

        with ui.grid(columns=2).classes("w-full gap-4"):
            ui.input(
                label="Ticker",
                value=config.ticker,
                on_change=setter("ticker", lambda v: str(v).upper()),
            ).props(f"debounce={INPUT_DEBOUNCE_MS}").classes("w-full")

            ui.number(
                label="Initial Cash ($)",
                value=config.initial_cash,
                min=0,
                step=1000,
                format="%.0f",
                on_change=setter("initial_cash", float, refresh=False),
            ).classes("w-full")

            ui.input(
                label="Start Date",
                value=config.start_date,
                on_change=setter("start_date"),
            ).props(f"type=date debounce={INPUT_DEBOUNCE_MS}").classes("w-full")

            ui.input(
                label="End Date",
                value=config.end_date,
                on_change=setter("end_date"),
            ).props(f"type=date debounce={INPUT_DEBOUNCE_MS}").classes("w-full")

            ui.number(
                label="Commission",
                value=config.commission,
                min=0,
                max=1,
                step=0.001,
                format="%.4f",
                on_change=setter("commission", float, refresh=False),
            ).classes("w-full")

            ui.number(
                label="Fixed Cash per Trade ($)",
                value=config.fixed_cash_per_trade,
                min=0,
                step=100,
                format="%.0f",
                on_change=setter("fixed_cash_per_trade", float, refresh=False),
            ).classes("w-full")


def create_condition_editor(state: AppState, on_change):
    """Create entry and exit condition editors."""

    def conditions_for(is_exit: bool) -> list[Condition]:
        return state.config.exit_conditions if is_exit else state.config.entry_conditions

    def update(index: int, is_exit: bool, change, rerender: bool = False):
        conditions = conditions_for(is_exit)
        conditions[index] = change(conditions[index])
        if rerender:
            condition_list.refresh()
        on_change()

    def add(is_exit: bool):
        conditions_for(is_exit).append(blank_condition())
        condition_list.refresh()
        on_change()

    def remove(index: int, is_exit: bool):
        del conditions_for(is_exit)[index]
        condition_list.refresh()
        on_change()

    def render_condition(condition: Condition, index: int, is_exit: bool):
        kind = "Exit Condition" if is_exit else "Entry Condition"
        with ui.card().classes("w-full p-3"):
            with ui.row().classes("w-full items-center justify-between"):
                ui.label(f"{kind} {index + 1}").classes("font-medium")
                ui.button(icon="delete", on_click=lambda: remove(index, is_exit)).props("flat dense")

            ui.select(
                KNOWN_INDICATORS,
                label="Indicator",
                value=condition.indicator or None,
                on_change=lambda e: update(
                    index, is_exit, lambda c: with_indicator(c, e.value or ""), rerender=True
                ),
            ).classes("w-full")

            ui.number(
                label="Period",
                value=condition.period or None,
                min=1,
                step=1,
                format="%.0f",
                on_change=lambda e: update(
                    index, is_exit, lambda c: replace(c, period=int(e.value or 0))
                ),
            ).props(f"debounce={INPUT_DEBOUNCE_MS}").classes("w-full")

            ui.select(
                list(COMPARISONS),
                label="Comparison",
                value=condition.comparison or None,
                on_change=lambda e: update(
                    index, is_exit, lambda c: replace(c, comparison=e.value or "")
                ),
            ).classes("w-full")

            if isinstance(condition.target, SelfReferencing):
                ui.input(
                    label="Reference (e.g. SMA_50)",
                    value=condition.target.reference,
                    on_change=lambda e: update(
                        index, is_exit, lambda c: replace(c, target=SelfReferencing(e.value or ""))
                    ),
                ).props(f"debounce={INPUT_DEBOUNCE_MS}").classes("w-full")
            else:
                ui.number(
                    label="Value",
                    value=condition.target.value,
                    on_change=lambda e: update(
                        index, is_exit,
                        lambda c: replace(c, target=Thresholded(None if e.value is None else float(e.value))),
                    ),
                ).props(f"debounce={INPUT_DEBOUNCE_MS}").classes("w-full")

    @ui.refreshable
    def condition_list():
        for is_exit, title in ((False, "Entry Conditions"), (True, "Exit Conditions")):
            ui.label(title).classes("font-semibold mt-2")
            for index, condition in enumerate(conditions_for(is_exit)):
                render_condition(condition, index, is_exit)
            ui.button(
                "Add Exit Condition" if is_exit else "Add Entry Condition",
                icon="add",
                on_click=lambda is_exit=is_exit: add(is_exit),
            ).props("outline").classes("w-full")

    with ui.card().classes("w-full mb-4"):
        ui.label("Conditions").classes("text-lg font-semibold mb-2")
        condition_list()


def create_results_card(state: AppState):
    """Create statistics display. Returns the refreshable to call after a run."""

    @ui.refreshable
    def stats_grid():
        if state.stats is None:
            ui.label("Run a backtest to see results.").classes("text-sm text-gray-500")
            return
        with ui.grid(columns=5).classes("w-full gap-4"):
            for label, value in format_stats(state.stats).items():
                with ui.column().classes("gap-0"):
                    ui.label(label).classes("text-xs text-gray-500")
                    ui.label(value).classes("text-lg font-mono")
        ui.label(f"{len(state.trades)} trades").classes("text-sm text-gray-500 mt-2")

    with ui.card().classes("w-full mb-4"):
        ui.label("Backtest Results").classes("text-lg font-semibold mb-2")
        stats_grid()

    return stats_grid


def create_run_section(state: AppState, api: AnalyticsAPI, on_results):
    """Create run button, progress log and backtest error label."""

    async def do_run():
        """Execute backtest."""
        run_btn.disable()
        progress_log.classes(remove="hidden")
        progress_log.clear()

        try:
            response = await run_backtest(state, api, progress_log.push)
            if response is None:
                ui.notify(f"Backtest failed: {state.backtest_error}", type="negative")
            else:
                ui.notify("Backtest complete!", type="positive")
                on_results()
        finally:
            run_btn.enable()

    with ui.card().classes("w-full"):
        ui.label("Run Backtest").classes("text-lg font-semibold mb-2")
        run_btn = ui.button("Run Backtest", on_click=do_run, color="primary").classes("w-full")
        ui.label().classes("text-red-500 text-center").bind_text_from(state, "backtest_error")
        progress_log = ui.log(max_lines=20).classes("w-full h-32 mt-2 hidden")


# ============================================================
# MAIN PAGE
# ============================================================

@ui.page("/")
async def main_page():
    """Main dashboard page. Each browser tab gets its own state and chart."""
    ui.colors(primary="#3b82f6")

    state = AppState(theme=DEFAULT_THEME)
    api = AnalyticsAPI()
    charts = ChartLifecycleManager(EChartSurface)
    synchronizer = ChartSynchronizer(api, charts)
    dark = ui.dark_mode(state.theme == "dark")

    def schedule_refresh():
        background_tasks.create(refresh_chart(state, synchronizer), name="chart-refresh")

    with ui.column().classes("w-full max-w-6xl mx-auto p-6"):
        create_header(state, dark, schedule_refresh)

        with ui.row().classes("w-full no-wrap gap-6 items-start"):
            with ui.column().classes("w-2/3"):
                with ui.card().classes("w-full mb-4"):
                    chart_container = ui.element("div").classes("w-full")
                    ui.label().classes("text-red-500 text-center mt-2").bind_text_from(state, "chart_error")
                stats_grid = create_results_card(state)
                create_config_panel(state, schedule_refresh)

            with ui.column().classes("w-1/3"):
                create_condition_editor(state, schedule_refresh)

                def on_results():
                    stats_grid.refresh()
                    schedule_refresh()

                create_run_section(state, api, on_results)

    charts.mount(chart_container)

    client = ui.context.client
    bind_teardown(client, synchronizer, api)

    await client.connected()
    schedule_refresh()


# ============================================================
# RUN
# ============================================================

if __name__ in {"__main__", "__mp_main__"}:
    if LOG_TO_FILE:
        print(f"Logging to: {terminal_logger.start()}")
        app.on_shutdown(terminal_logger.stop)

    ui.run(
        title=UI_TITLE,
        port=UI_PORT,
        reload=False,
        show=True,
    )
