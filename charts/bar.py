"""Bar chart renderer.

Layout (logical pixels):

    +------------------------------------------+
    | title                                    |  padding_top
    |        42                                |
    |       ____        17                     |
    |      |    |      ____                    |
    |      |    |     |    |                   |
    |------+----+-----+----+-------------------|  baseline
    |        eu        us                      |  bottom padding 28
    +------------------------------------------+
     left 28                            right 12

Bars share the plot width with a fixed 8px gap and never get narrower than
4px; past that point they overlap rather than disappear.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from charts.options import ChartOptions, coerce_options
from charts.palette import color_for, resolve_palette
from charts.series import Series, format_number, normalize, to_number
from charts.theme import THEME_STATE, ThemeColors
from config import CHART_DEFAULTS

logger = logging.getLogger(__name__)

PAD_RIGHT = 12
PAD_BOTTOM = 28
PAD_LEFT = 28
GAP = 8
MIN_BAR_WIDTH = 4
LABEL_FONT = 12
TITLE_FONT = 13


@dataclass
class Bar:
    index: int
    label: str
    value: float
    x: float
    y: float
    width: float
    height: float
    color: str


@dataclass
class BarLayout:
    width: float
    height: float
    scale: float
    ceiling: float
    plot_left: float
    plot_top: float
    plot_width: float
    plot_height: float
    bar_width: float
    bars: List[Bar] = field(default_factory=list)

    @property
    def baseline(self) -> float:
        return self.plot_top + self.plot_height


def axis_ceiling(data, max_override=None) -> float:
    """opts.max when it is a positive number, else max(1, max(data))."""
    if max_override is not None:
        ceiling = to_number(max_override)
        if ceiling > 0:
            return ceiling
        logger.debug("Ignoring non-positive max override: %r", max_override)
    return max([1.0, *data])


def bar_layout(series: Series, options: Optional[ChartOptions] = None,
               width: float = 0, scale: float = 1.0) -> BarLayout:
    """Compute bar geometry without drawing anything."""
    defaults = CHART_DEFAULTS["bar"]
    opts = coerce_options(options).with_defaults("bar")

    width = width or defaults["fallback_width"]
    height = max(defaults["min_height"], to_number(opts.height) or defaults["height"])
    pad_top = to_number(opts.padding_top)

    plot_w = max(0.0, width - PAD_LEFT - PAD_RIGHT)
    plot_h = max(0.0, height - pad_top - PAD_BOTTOM)
    ceiling = axis_ceiling(series.data, opts.max)

    n = max(1, len(series))
    bar_w = max(MIN_BAR_WIDTH, (plot_w - (n - 1) * GAP) / n)
    palette = resolve_palette(opts)

    layout = BarLayout(
        width=width, height=height, scale=scale, ceiling=ceiling,
        plot_left=PAD_LEFT, plot_top=pad_top, plot_width=plot_w,
        plot_height=plot_h, bar_width=bar_w,
    )
    for i, (label, raw) in enumerate(zip(series.labels, series.data)):
        value = max(0.0, raw)
        bh = min(plot_h, value / ceiling * plot_h)
        layout.bars.append(Bar(
            index=i,
            label=label,
            value=value,
            x=PAD_LEFT + i * (bar_w + GAP),
            y=pad_top + plot_h - bh,
            width=bar_w,
            height=bh,
            color=color_for(i, palette=palette),
        ))
    return layout


def paint_bar(surface, layout: BarLayout, opts: ChartOptions, colors: ThemeColors):
    """Issue the drawing calls for a computed layout onto an open frame."""
    surface.fill_rect(0, 0, layout.width, layout.height, colors.background)

    base = layout.baseline
    surface.line(layout.plot_left, base, layout.plot_left + layout.plot_width, base,
                 colors.axis, width=1)

    for bar in layout.bars:
        surface.fill_rect(bar.x, bar.y, bar.x + bar.width, base, bar.color)
        center = bar.x + bar.width / 2
        if opts.show_values:
            surface.text(center, max(12, bar.y - 4), format_number(bar.value),
                         colors.text, size=LABEL_FONT, align="center", baseline="bottom")
        surface.text(center, base + 14, bar.label, colors.text,
                     size=LABEL_FONT, align="center")

    if opts.title:
        surface.text(6, 14, str(opts.title), colors.text, size=TITLE_FONT)


def draw_bar(surface, series, options=None, theme=None) -> BarLayout:
    """Draw ``series`` as a bar chart. Rolls the surface back on failure."""
    if not isinstance(series, Series):
        series = normalize(series)
    opts = coerce_options(options).with_defaults("bar")
    scale = max(1.0, surface.device_scale())
    colors = (theme or THEME_STATE).colors()

    layout = bar_layout(series, opts, surface.logical_width(), scale)
    surface.begin_frame(layout.width, layout.height, scale)
    try:
        paint_bar(surface, layout, opts, colors)
    except Exception:
        surface.rollback()
        raise
    surface.commit()
    return layout
