"""Card implementations for Chart Station.

Importing this package registers all built-in card types.
"""

from cards.chart_card import ChartCard

__all__ = ["ChartCard"]
