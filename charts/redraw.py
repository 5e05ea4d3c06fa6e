"""Responsive redraw -- when a mounted chart draws itself.

A freshly mounted surface may not have been laid out yet (width 0). The
controller waits a frame at a time until the surface is at least
MIN_DRAW_WIDTH wide, draws once, then redraws on every resize and every
theme change, with no debounce.
"""

import logging
from typing import Callable, Optional

from charts.theme import THEME_STATE
from config import MIN_DRAW_WIDTH

logger = logging.getLogger(__name__)


class RedrawController:
    """Drives ``draw(surface)`` for one surface until disposed."""

    def __init__(self, surface, draw: Callable, theme=None,
                 min_width: float = MIN_DRAW_WIDTH, name: str = "chart"):
        self.surface = surface
        self.theme = theme or THEME_STATE
        self.min_width = min_width
        self.name = name
        self._draw = draw
        self._pending = None
        self._resize_sub = None
        self._theme_sub = None
        self.mounted = False
        self.disposed = False
        self.draws = 0
        self.failures = 0
        self.deferrals = 0

    def start(self):
        """Schedule the first draw attempt on the next frame."""
        if self.disposed or self._pending is not None:
            return
        self._pending = self.surface.after_frame(self._attempt)

    def _attempt(self):
        self._pending = None
        self.request()

    def request(self):
        """Draw now if the surface is laid out, otherwise retry next frame."""
        if self.disposed:
            return
        if self.surface.logical_width() < self.min_width:
            if self._pending is None:
                self.deferrals += 1
                self._pending = self.surface.after_frame(self._attempt)
            return

        self.redraw()
        if not self.mounted:
            self.mounted = True
            self._resize_sub = self.surface.on_resize(lambda _w: self.request())
            self._theme_sub = self.theme.on_change(lambda _t: self.request())
            logger.debug("Chart %s mounted after %d deferrals", self.name, self.deferrals)

    def redraw(self) -> bool:
        """One full draw. Failures are logged and leave the last frame visible."""
        if self.disposed:
            return False
        try:
            self._draw(self.surface)
        except Exception as exc:
            self.failures += 1
            logger.error("Chart %s draw failed: %s", self.name, exc)
            return False
        self.draws += 1
        return True

    def dispose(self):
        """Cancel pending frames and drop resize/theme subscriptions."""
        if self.disposed:
            return
        self.disposed = True
        if self._pending is not None:
            self.surface.cancel_frame(self._pending)
            self._pending = None
        for sub in (self._resize_sub, self._theme_sub):
            if sub is not None:
                sub.cancel()
        self._resize_sub = self._theme_sub = None

    @property
    def pending(self) -> Optional[object]:
        return self._pending
