"""Charting core for Chart Station.

Turns loosely typed values into a canonical Series and draws it as a bar
or pie chart on a Surface (tk.Canvas or Pillow image).

    series   -- input classification and normalisation
    palette  -- process-wide palette, cyclic colour assignment
    theme    -- active chart theme and change notifications
    options  -- ChartOptions (title, height, max, paddingTop, ...)
    bar/pie  -- layout + painting
    surface  -- Surface API and the Pillow-backed ImageSurface
    redraw   -- deferred first draw, redraw on resize / theme change
    mount    -- containers, mount_chart(), ChartHandle, file-to-chart glue
    export   -- headless PNG rendering

charts.mount and charts.export are imported on demand; they pull in the
ingestion pipeline. charts.tk_surface needs tkinter.
"""

from charts.series import Series, classify, normalize
from charts.palette import PALETTE, color_for
from charts.theme import THEME_STATE, ThemeColors
from charts.options import ChartOptions
from charts.bar import bar_layout, draw_bar
from charts.pie import draw_pie, pie_layout
from charts.surface import ImageSurface, Surface
from charts.redraw import RedrawController

__all__ = [
    "Series", "classify", "normalize",
    "PALETTE", "color_for",
    "THEME_STATE", "ThemeColors",
    "ChartOptions",
    "bar_layout", "draw_bar", "draw_pie", "pie_layout",
    "ImageSurface", "Surface",
    "RedrawController",
]
