"""tkinter Canvas surface.

Maps the Surface primitives onto canvas items. A frame's items are created
under a staging tag and only replace the visible ones on commit(), so the
canvas keeps showing the last good chart if a draw fails midway.

Canvas item coordinates are screen pixels; logical coordinates are
multiplied by the display scale (Tk's pixels-per-point over the 96 dpi
baseline).
"""

import logging
import math
import tkinter as tk
from typing import Callable

from charts.mount import Container
from charts.surface import Surface
from config import FRAME_DELAY_MS

logger = logging.getLogger(__name__)

LIVE_TAG = "chart-live"
STAGE_TAG = "chart-stage"
FONT_FAMILY = "Arial"

ANCHORS = {
    ("left", "alphabetic"): "sw", ("center", "alphabetic"): "s", ("right", "alphabetic"): "se",
    ("left", "bottom"): "sw", ("center", "bottom"): "s", ("right", "bottom"): "se",
    ("left", "middle"): "w", ("center", "middle"): "center", ("right", "middle"): "e",
    ("left", "top"): "nw", ("center", "top"): "n", ("right", "top"): "ne",
}


class TkCanvasSurface(Surface):
    """Surface backed by a tk.Canvas that fills its parent's width."""

    def __init__(self, parent, bg: str = "#1a1a1a"):
        super().__init__()
        self.canvas = tk.Canvas(parent, bg=bg, highlightthickness=0, height=1)
        self.canvas.pack(fill="x", expand=False)
        self._scale = 1.0
        self._stage_scale = 1.0
        self._stage_size = (0, 0)
        self._stage_height = 0
        self._last_width = 0
        self.canvas.bind("<Configure>", self._on_configure, add="+")

    def _on_configure(self, event):
        width = self.logical_width()
        if width != self._last_width:
            self._last_width = width
            self._notify_resize(width)

    def logical_width(self) -> float:
        try:
            return self.canvas.winfo_width() / self.device_scale()
        except tk.TclError:
            return 0

    def device_scale(self) -> float:
        try:
            return max(1.0, float(self.canvas.tk.call("tk", "scaling")) / (96 / 72))
        except tk.TclError:
            return 1.0

    # -- scheduling -----------------------------------------------------

    def after_frame(self, callback: Callable) -> object:
        return self.canvas.after(FRAME_DELAY_MS, callback)

    def cancel_frame(self, token: object):
        try:
            self.canvas.after_cancel(token)
        except (tk.TclError, ValueError):
            pass

    # -- frames ---------------------------------------------------------

    def begin_frame(self, width, height, scale):
        self.canvas.delete(STAGE_TAG)
        self._stage_scale = scale
        self._stage_size = (math.floor(width * scale), math.floor(height * scale))
        self._stage_height = height

    def commit(self):
        _, phys_h = self._stage_size
        self.canvas.delete(LIVE_TAG)
        self.canvas.itemconfigure(STAGE_TAG, tags=(LIVE_TAG,))
        if int(self.canvas.cget("height")) != phys_h:
            self.canvas.configure(height=phys_h)
        self.style_height = self._stage_height

    def rollback(self):
        self.canvas.delete(STAGE_TAG)

    # -- primitives -----------------------------------------------------

    def _xy(self, *coords):
        s = self._stage_scale
        return [c * s for c in coords]

    def fill_rect(self, x0, y0, x1, y1, fill):
        if y1 <= y0 or x1 <= x0:
            return
        self.canvas.create_rectangle(*self._xy(x0, y0, x1, y1), fill=fill,
                                     outline="", tags=(STAGE_TAG,))

    def line(self, x0, y0, x1, y1, fill, width=1):
        self.canvas.create_line(*self._xy(x0, y0, x1, y1), fill=fill,
                                width=max(1, round(width * self._stage_scale)),
                                tags=(STAGE_TAG,))

    def wedge(self, cx, cy, r, start_deg, extent_deg, fill):
        if extent_deg <= 0:
            return
        cx, cy, r = self._xy(cx, cy, r)
        if extent_deg >= 360:
            self.canvas.create_oval(cx - r, cy - r, cx + r, cy + r, fill=fill,
                                    outline="", tags=(STAGE_TAG,))
            return
        # Tk arcs run counter-clockwise from 3 o'clock
        self.canvas.create_arc(cx - r, cy - r, cx + r, cy + r,
                               start=-start_deg, extent=-extent_deg,
                               style="pieslice", fill=fill, outline="",
                               tags=(STAGE_TAG,))

    def text(self, x, y, text, fill, size=12, align="left", baseline="alphabetic"):
        if not text:
            return
        x, y = self._xy(x, y)
        self.canvas.create_text(x, y, text=text, fill=fill,
                                anchor=ANCHORS.get((align, baseline), "sw"),
                                font=(FONT_FAMILY, -max(1, round(size * self._stage_scale))),
                                tags=(STAGE_TAG,))


class TkContainer(Container):
    """Mount point that stacks chart canvases and notes inside a tk frame."""

    def __init__(self, frame, bg: str = "#1a1a1a", note_fg: str = "#e0e0e0"):
        self.frame = frame
        self.bg = bg
        self.note_fg = note_fg

    def new_surface(self) -> TkCanvasSurface:
        return TkCanvasSurface(self.frame, bg=self.bg)

    def add_note(self, text: str):
        lbl = tk.Label(self.frame, text=text, font=("Arial", 10), justify="left",
                       anchor="w", wraplength=360, bg=self.frame["bg"], fg=self.note_fg)
        lbl.pack(fill="x", padx=8, pady=8)
        return lbl

    def remove(self, widget):
        target = getattr(widget, "canvas", widget)
        try:
            target.destroy()
        except tk.TclError:
            pass
