"""Pie chart renderer -- labels outside, values inside.

Slices start at 12 o'clock and run clockwise in series order. Each slice
ends where the next begins, so the slices always close the circle.
Category labels sit just outside the rim on a short leader line; values
(or ``value_format(value, fraction)``) sit at 62% of the radius.
Very thin slices skip their label and value to avoid clutter.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from charts.options import ChartOptions, coerce_options
from charts.palette import color_for, resolve_palette
from charts.series import Series, format_number, normalize, to_number
from charts.theme import THEME_STATE, ThemeColors
from config import CHART_DEFAULTS

logger = logging.getLogger(__name__)

START_ANGLE = -math.pi / 2
LABEL_MIN_ANGLE = 0.005     # radians, ~0.3 degrees
VALUE_MIN_ANGLE = 0.02      # radians, ~1.1 degrees
ELBOW_RADIUS = 0.92
LABEL_RADIUS = 1.06
VALUE_RADIUS = 0.62
LABEL_OFFSET = 8
LEADER_INSET = 6
LABEL_FONT = 12
TITLE_FONT = 13


@dataclass
class Slice:
    index: int
    label: str
    value: float
    fraction: float
    start: float        # radians, clockwise from 3 o'clock
    angle: float        # radians
    color: str

    @property
    def end(self) -> float:
        return self.start + self.angle

    @property
    def mid(self) -> float:
        return self.start + self.angle / 2

    @property
    def degrees(self) -> float:
        return math.degrees(self.angle)


@dataclass
class PieLayout:
    width: float
    height: float
    scale: float
    cx: float
    cy: float
    radius: float
    total: float
    slices: List[Slice] = field(default_factory=list)


def pie_layout(series: Series, options: Optional[ChartOptions] = None,
               width: float = 0, scale: float = 1.0) -> PieLayout:
    """Compute slice geometry without drawing anything."""
    defaults = CHART_DEFAULTS["pie"]
    opts = coerce_options(options).with_defaults("pie")

    width = width or defaults["fallback_width"]
    height = max(defaults["min_height"], to_number(opts.height) or defaults["height"])
    pad_top = to_number(opts.padding_top)

    cx = width / 2
    cy = pad_top + (height - pad_top) / 2
    radius = max(40.0, min(width, height - pad_top) * 0.35)

    data = [max(0.0, v) for v in series.data]
    total = sum(data) or 1.0
    palette = resolve_palette(opts)

    layout = PieLayout(width=width, height=height, scale=scale,
                       cx=cx, cy=cy, radius=radius, total=total)
    start = START_ANGLE
    for i, (label, value) in enumerate(zip(series.labels, data)):
        angle = value / total * math.tau
        layout.slices.append(Slice(
            index=i, label=label, value=value, fraction=value / total,
            start=start, angle=angle, color=color_for(i, palette=palette),
        ))
        start += angle
    return layout


def slice_value_text(sl: Slice, opts: ChartOptions) -> str:
    if opts.value_format is not None:
        return str(opts.value_format(sl.value, sl.fraction))
    return format_number(sl.value)


def paint_pie(surface, layout: PieLayout, opts: ChartOptions, colors: ThemeColors):
    """Issue the drawing calls for a computed layout onto an open frame."""
    # all value text is formatted before the first primitive is issued
    value_texts = {}
    if opts.show_values:
        for sl in layout.slices:
            if sl.angle > VALUE_MIN_ANGLE:
                value_texts[sl.index] = slice_value_text(sl, opts)

    cx, cy, r = layout.cx, layout.cy, layout.radius
    surface.fill_rect(0, 0, layout.width, layout.height, colors.background)

    for sl in layout.slices:
        surface.wedge(cx, cy, r, math.degrees(sl.start), sl.degrees, sl.color)

    if opts.show_labels:
        for sl in layout.slices:
            if sl.angle <= LABEL_MIN_ANGLE:
                continue
            mid = sl.mid
            cos_m, sin_m = math.cos(mid), math.sin(mid)
            is_right = cos_m >= 0
            ex = cx + cos_m * r * ELBOW_RADIUS
            ey = cy + sin_m * r * ELBOW_RADIUS
            tx = cx + cos_m * r * LABEL_RADIUS + (LABEL_OFFSET if is_right else -LABEL_OFFSET)
            ty = cy + sin_m * r * LABEL_RADIUS

            surface.line(ex, ey, tx + (-LEADER_INSET if is_right else LEADER_INSET), ty,
                         colors.text, width=1)
            surface.text(tx, ty, sl.label, colors.text, size=LABEL_FONT,
                         align="left" if is_right else "right", baseline="middle")

    for sl in layout.slices:
        text = value_texts.get(sl.index)
        if text is None:
            continue
        rx = cx + math.cos(sl.mid) * r * VALUE_RADIUS
        ry = cy + math.sin(sl.mid) * r * VALUE_RADIUS
        surface.text(rx, ry, text, colors.text, size=LABEL_FONT,
                     align="center", baseline="middle")

    if opts.title:
        surface.text(6, 14, str(opts.title), colors.text, size=TITLE_FONT)


def draw_pie(surface, series, options=None, theme=None) -> PieLayout:
    """Draw ``series`` as a pie chart. Rolls the surface back on failure."""
    if not isinstance(series, Series):
        series = normalize(series)
    opts = coerce_options(options).with_defaults("pie")
    scale = max(1.0, surface.device_scale())
    colors = (theme or THEME_STATE).colors()

    layout = pie_layout(series, opts, surface.logical_width(), scale)
    surface.begin_frame(layout.width, layout.height, scale)
    try:
        paint_pie(surface, layout, opts, colors)
    except Exception:
        surface.rollback()
        raise
    surface.commit()
    return layout
