"""Mounting charts into containers.

A container is whatever the page layer hands the charting core: it can
create one drawing surface per chart and show a text note instead of a
chart. mount_chart() returns a ChartHandle that owns the surface's resize
and theme subscriptions; dispose it (or use it as a context manager) when
the chart goes away.

    with mount_chart(container, {"a": 1, "b": 2}, kind="pie") as handle:
        container.pump()
        container.surfaces[0].save("pie.png")
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from charts.bar import draw_bar
from charts.options import coerce_options
from charts.pie import draw_pie
from charts.redraw import RedrawController
from charts.series import normalize
from charts.surface import ImageSurface, Surface
from ingest.pipeline import safe_load, safe_load_ping_log

logger = logging.getLogger(__name__)

DRAWERS = {
    "bar": draw_bar,
    "pie": draw_pie,
}


class Container(ABC):
    """Mount point for charts."""

    @abstractmethod
    def new_surface(self) -> Surface:
        ...

    @abstractmethod
    def add_note(self, text: str):
        ...

    def remove(self, surface):
        """Detach a surface created by new_surface(). Optional."""


class ImageContainer(Container):
    """Offscreen container: Pillow surfaces of a fixed width, notes as strings."""

    def __init__(self, width: float = 640, scale: float = 1.0):
        self.width = width
        self.scale = scale
        self.surfaces: List[ImageSurface] = []
        self.notes: List[str] = []

    def new_surface(self) -> ImageSurface:
        surface = ImageSurface(self.width, self.scale)
        self.surfaces.append(surface)
        return surface

    def add_note(self, text: str):
        self.notes.append(text)
        return text

    def remove(self, surface):
        if surface in self.surfaces:
            self.surfaces.remove(surface)

    def pump(self, max_frames: int = 100) -> int:
        return sum(s.pump(max_frames) for s in list(self.surfaces))


class ChartHandle:
    """Owns one mounted chart. dispose() is idempotent."""

    def __init__(self, container, surface, controller: RedrawController, kind: str):
        self.container = container
        self.surface = surface
        self.controller = controller
        self.kind = kind

    @property
    def disposed(self) -> bool:
        return self.controller.disposed

    def redraw(self) -> bool:
        return self.controller.redraw()

    def dispose(self, remove: bool = False):
        self.controller.dispose()
        if remove:
            self.container.remove(self.surface)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.dispose()
        return False


def mount_chart(container, values, kind: str = "bar", options=None,
                theme=None) -> ChartHandle:
    """Normalise ``values``, append a surface to ``container`` and draw into it."""
    drawer = DRAWERS.get(kind)
    if drawer is None:
        raise ValueError(f"Unknown chart kind: {kind} (expected one of {sorted(DRAWERS)})")

    series = normalize(values)
    opts = coerce_options(options)
    surface = container.new_surface()

    def draw(target):
        drawer(target, series, opts, theme)

    controller = RedrawController(surface, draw, theme=theme,
                                  name=opts.title or kind)
    controller.start()
    logger.debug("Mounted %s chart with %d points", kind, len(series))
    return ChartHandle(container, surface, controller, kind)


def add_chart_file(container, source, kind: str = "bar", options=None,
                   fmt: Optional[str] = None, has_header: Optional[bool] = None,
                   theme=None, session=None) -> Optional[ChartHandle]:
    """Ingest a JSON/CSV/TSV file or URL and chart it, or add a note on failure."""
    outcome = safe_load(source, fmt, has_header=has_header, session=session)
    if not outcome.ok:
        container.add_note(outcome.note)
        return None
    return mount_chart(container, outcome.values, kind, options, theme)


def add_ping_log_chart(container, source, options=None, theme=None,
                       session=None) -> Optional[ChartHandle]:
    """Chart per-host ping averages from a ping log, or add a note on failure."""
    opts = coerce_options(options)
    outcome = safe_load_ping_log(source, opts.limit, session=session)
    if not outcome.ok:
        container.add_note(outcome.note)
        return None
    return mount_chart(container, outcome.values, "bar", opts.for_ping_log(), theme)

