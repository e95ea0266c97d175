# tests/conftest.py
"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from chart.lifecycle import ChartLifecycleManager
from chart.sync import ChartSynchronizer
from tests.fakes import FakeAnalyticsAPI, SurfaceRegistry, make_bar


@pytest.fixture
def registry():
    return SurfaceRegistry()


@pytest.fixture
def charts(registry):
    return ChartLifecycleManager(registry.factory, mount=object())


@pytest.fixture
def api():
    return FakeAnalyticsAPI(prices={
        "AAPL": [make_bar("2024-01-02"), make_bar("2024-01-03", 104, 108, 103, 107)],
        "MSFT": [make_bar("2024-01-02", 370, 375, 368, 372)],
    })


@pytest.fixture
def synchronizer(api, charts):
    return ChartSynchronizer(api, charts)
