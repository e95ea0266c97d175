# chart/lifecycle.py - Owns the single live chart surface.
"""
Chart lifecycle: Unmounted -> Ready -> Displaying -> Disposed.

The manager is the only holder of the surface. Every acquire releases the
previous surface first, so at most one surface is ever live. A disposed
surface is never reused; the next pass gets a fresh one.

Usage:
    charts = ChartLifecycleManager(EChartSurface)
    charts.mount(container)
    charts.display(view, theme="dark")
    ...
    charts.unmount()   # page teardown
"""

from enum import Enum
from typing import Any, Callable, Optional

from models import ChartView
from .surface import ChartSurface
from .theme import Palette, indicator_color, palette_for


# (mount target, palette) -> new surface
SurfaceFactory = Callable[[Any, Palette], ChartSurface]


class ChartState(str, Enum):
    UNMOUNTED = "unmounted"
    READY = "ready"
    DISPLAYING = "displaying"
    DISPOSED = "disposed"


class ChartLifecycleManager:
    """Creates, populates and releases the chart surface."""

    def __init__(self, surface_factory: SurfaceFactory, mount: Any = None):
        self._factory = surface_factory
        self._mount = mount
        self._surface: Optional[ChartSurface] = None
        self._state = ChartState.UNMOUNTED

    def __enter__(self) -> "ChartLifecycleManager":
        return self

    def __exit__(self, *exc) -> None:
        self.unmount()

    @property
    def state(self) -> ChartState:
        return self._state

    @property
    def has_mount_point(self) -> bool:
        return self._mount is not None

    @property
    def surface(self) -> Optional[ChartSurface]:
        """Current live surface, if any. Do not hold on to it across passes."""
        return self._surface

    def mount(self, target: Any) -> None:
        """Attach to a mount target. Any surface on the old target is released."""
        if target is not self._mount:
            self.dispose()
        self._mount = target

    def unmount(self) -> None:
        """Release the surface and forget the mount target."""
        self.dispose()
        self._mount = None
        self._state = ChartState.UNMOUNTED

    def dispose(self) -> None:
        """Release the current surface, if any."""
        surface, self._surface = self._surface, None
        if surface is None:
            return
        surface.remove()
        self._state = ChartState.DISPOSED
        print("   [Chart] Surface disposed")

    def acquire(self, theme: str = "light") -> ChartSurface:
        """Release the previous surface, then create a fresh one (Ready)."""
        if self._mount is None:
            raise RuntimeError("Chart has no mount point")

        self.dispose()
        self._surface = self._factory(self._mount, palette_for(theme))
        self._state = ChartState.READY
        return self._surface

    def display(self, view: ChartView, theme: str = "light") -> ChartSurface:
        """
        Acquire a fresh surface and draw a finished ChartView on it.

        Raises whatever the surface raises, after disposing the partially
        built surface.
        """
        surface = self.acquire(theme)
        try:
            surface.set_price_data(view.price)
            surface.clear_overlays()
            for key, overlay in view.overlays.items():
                surface.add_line_series(key, overlay.points, indicator_color(overlay.request.indicator))
            surface.set_markers(view.markers)
            surface.fit_content()
        except Exception:
            self.dispose()
            raise

        self._state = ChartState.DISPLAYING
        print(
            f"   [Chart] {view.ticker}: {len(view.price)} bars, "
            f"{len(view.overlays)} overlays, {len(view.markers)} markers"
        )
        return surface
