"""Drawing surfaces.

A Surface is what a chart draws on. Painters work in logical pixels; the
surface multiplies every coordinate by its device scale so text and lines
stay crisp on dense displays.

Every draw is staged: begin_frame() opens a new frame at the requested
size, commit() makes it the visible one, rollback() throws it away and
leaves the previous frame untouched. A failed draw therefore never shows
up half-painted.

ImageSurface renders into a Pillow image (offscreen, PNG export, tests);
TkCanvasSurface in charts/tk_surface.py renders onto a tk.Canvas.
"""

import itertools
import logging
import math
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Callable, Dict, Optional

from PIL import Image, ImageDraw, ImageFont

from core.observers import ObserverList, Subscription

logger = logging.getLogger(__name__)

FONT_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"


class Surface(ABC):
    """Abstract drawing surface. Coordinates are logical pixels."""

    def __init__(self):
        self._resize_observers = ObserverList("surface-resize")
        self.style_height = 0

    # -- layout ---------------------------------------------------------

    @abstractmethod
    def logical_width(self) -> float:
        """Rendered width in logical pixels (0 while not laid out)."""

    def device_scale(self) -> float:
        return 1.0

    def on_resize(self, callback: Callable) -> Subscription:
        """Call ``callback(width)`` whenever the rendered width changes."""
        return self._resize_observers.subscribe(callback)

    def _notify_resize(self, width):
        self._resize_observers.notify(width)

    # -- scheduling -----------------------------------------------------

    @abstractmethod
    def after_frame(self, callback: Callable) -> object:
        """Run ``callback`` on the next frame. Returns a cancel token."""

    @abstractmethod
    def cancel_frame(self, token: object):
        ...

    # -- frames ---------------------------------------------------------

    @abstractmethod
    def begin_frame(self, width: float, height: float, scale: float):
        """Open a staging frame of ``width x height`` logical pixels."""

    @abstractmethod
    def commit(self):
        ...

    @abstractmethod
    def rollback(self):
        ...

    # -- primitives -----------------------------------------------------

    @abstractmethod
    def fill_rect(self, x0, y0, x1, y1, fill: str):
        ...

    @abstractmethod
    def line(self, x0, y0, x1, y1, fill: str, width: float = 1):
        ...

    @abstractmethod
    def wedge(self, cx, cy, r, start_deg: float, extent_deg: float, fill: str):
        """Pie slice; angles in degrees, clockwise from 3 o'clock."""

    @abstractmethod
    def text(self, x, y, text: str, fill: str, size: int = 12,
             align: str = "left", baseline: str = "alphabetic"):
        ...


class ImageSurface(Surface):
    """Offscreen surface backed by a Pillow RGB image.

    Frames scheduled with after_frame() are queued and run by pump(),
    which plays the role of the tkinter main loop.
    """

    def __init__(self, width: float = 640, scale: float = 1.0):
        super().__init__()
        self._width = width
        self._scale = max(1.0, float(scale or 1.0))
        self.image: Optional["Image.Image"] = None
        self.frames_committed = 0
        self._stage = None
        self._draw = None
        self._stage_scale = 1.0
        self._committed_scale = 1.0
        self._stage_height = 0
        self._queue: "OrderedDict[int, Callable]" = OrderedDict()
        self._ids = itertools.count(1)
        self._fonts: Dict[int, object] = {}

    def logical_width(self) -> float:
        return self._width

    def device_scale(self) -> float:
        return self._scale

    def set_width(self, width: float):
        """Re-layout: change the rendered width and notify resize observers."""
        if width != self._width:
            self._width = width
            self._notify_resize(width)

    @property
    def size(self):
        """Physical (width, height) of the committed image."""
        return self.image.size if self.image is not None else (0, 0)

    # -- scheduling -----------------------------------------------------

    def after_frame(self, callback: Callable) -> object:
        token = next(self._ids)
        self._queue[token] = callback
        return token

    def cancel_frame(self, token: object):
        self._queue.pop(token, None)

    @property
    def pending_frames(self) -> int:
        return len(self._queue)

    def pump(self, max_frames: int = 100) -> int:
        """Run queued frame callbacks (including ones they queue). Returns count."""
        ran = 0
        while self._queue and ran < max_frames:
            _, callback = self._queue.popitem(last=False)
            callback()
            ran += 1
        return ran

    # -- frames ---------------------------------------------------------

    def begin_frame(self, width: float, height: float, scale: float):
        self._stage_scale = scale
        self._stage_height = height
        size = (max(1, math.floor(width * scale)), max(1, math.floor(height * scale)))
        self._stage = Image.new("RGB", size)
        self._draw = ImageDraw.Draw(self._stage)

    def commit(self):
        if self._stage is None:
            return
        self.image = self._stage
        self.style_height = self._stage_height
        self._committed_scale = self._stage_scale
        self.frames_committed += 1
        self._stage = self._draw = None

    def rollback(self):
        self._stage = self._draw = None

    def save(self, path, **kwargs):
        if self.image is None:
            raise RuntimeError("nothing has been drawn on this surface yet")
        self.image.save(path, **kwargs)

    def pixel(self, x: float, y: float):
        """Committed colour at a logical coordinate, as an (r, g, b) tuple."""
        s = self._committed_scale
        return self.image.getpixel((int(x * s), int(y * s)))

    # -- primitives -----------------------------------------------------

    def _xy(self, *coords):
        s = self._stage_scale
        return [c * s for c in coords]

    def fill_rect(self, x0, y0, x1, y1, fill):
        if y1 <= y0 or x1 <= x0:
            return
        x0, y0, x1, y1 = self._xy(x0, y0, x1, y1)
        # Pillow's rectangle includes its far edge
        self._draw.rectangle([x0, y0, max(x0, x1 - 1), max(y0, y1 - 1)], fill=fill)

    def line(self, x0, y0, x1, y1, fill, width=1):
        x0, y0, x1, y1 = self._xy(x0, y0, x1, y1)
        self._draw.line([(x0, y0), (x1, y1)], fill=fill,
                        width=max(1, round(width * self._stage_scale)))

    def wedge(self, cx, cy, r, start_deg, extent_deg, fill):
        if extent_deg <= 0:
            return
        cx, cy, r = self._xy(cx, cy, r)
        self._draw.pieslice([cx - r, cy - r, cx + r, cy + r],
                            start_deg, start_deg + extent_deg, fill=fill)

    def _font(self, px: int):
        if px not in self._fonts:
            try:
                self._fonts[px] = ImageFont.truetype(FONT_PATH, px)
            except (IOError, OSError):
                self._fonts[px] = ImageFont.load_default()
        return self._fonts[px]

    def text(self, x, y, text, fill, size=12, align="left", baseline="alphabetic"):
        if not text:
            return
        font = self._font(max(1, round(size * self._stage_scale)))
        x, y = self._xy(x, y)
        left, top, right, bottom = self._draw.textbbox((0, 0), text, font=font)

        if align == "center":
            ox = x - (left + right) / 2
        elif align == "right":
            ox = x - right
        else:
            ox = x - left

        if baseline == "middle":
            oy = y - (top + bottom) / 2
        elif baseline == "bottom":
            oy = y - bottom
        elif baseline == "top":
            oy = y - top
        else:
            ascent = font.getmetrics()[0] if hasattr(font, "getmetrics") else bottom
            oy = y - ascent

        self._draw.text((ox, oy), text, fill=fill, font=font)
