# chart/__init__.py
"""Chart pipeline: time alignment, markers, surface lifecycle and sync passes."""

from .alignment import align_indicator_points
from .lifecycle import ChartLifecycleManager, ChartState
from .markers import project_markers
from .surface import ChartSurface, EChartSurface
from .sync import ChartSynchronizer, PassSuperseded, PreconditionUnmet
from .theme import indicator_color, palette_for

__all__ = [
    "align_indicator_points",
    "ChartLifecycleManager",
    "ChartState",
    "project_markers",
    "ChartSurface",
    "EChartSurface",
    "ChartSynchronizer",
    "PassSuperseded",
    "PreconditionUnmet",
    "indicator_color",
    "palette_for",
]
