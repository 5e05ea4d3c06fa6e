"""Chart palette -- process-wide default plus per-chart override.

Colours are assigned by series index, cyclically. Assignment is
index-stable, not label-stable: reordering a series reorders its colours.
"""

import logging
from typing import List, Optional, Sequence

from config import DEFAULT_PALETTE
from core.observers import ObserverList, Subscription

logger = logging.getLogger(__name__)


class PaletteConfig:
    """Holds the process-wide palette. Replacing it notifies subscribers."""

    def __init__(self, colors: Sequence[str] = DEFAULT_PALETTE):
        self._colors: List[str] = list(colors)
        self._observers = ObserverList("palette")

    def get(self) -> List[str]:
        return list(self._colors)

    def set(self, colors: Sequence[str]) -> bool:
        """Replace the palette. Empty or non-sequence values are ignored."""
        if isinstance(colors, str) or not isinstance(colors, (list, tuple)) or not colors:
            logger.warning("Ignoring invalid palette: %r", colors)
            return False
        self._colors = [str(c) for c in colors]
        logger.debug("Palette replaced (%d colours)", len(self._colors))
        self._observers.notify(self.get())
        return True

    def reset(self):
        self.set(DEFAULT_PALETTE)

    def on_change(self, callback) -> Subscription:
        return self._observers.subscribe(callback)


PALETTE = PaletteConfig()


def resolve_palette(options=None) -> List[str]:
    """The palette a chart should use: its own override, else the global one."""
    override = getattr(options, "palette", None)
    if isinstance(override, (list, tuple)) and override:
        return list(override)
    return PALETTE.get()


def color_for(index: int, options=None, palette: Optional[Sequence[str]] = None) -> str:
    pal = palette if palette else resolve_palette(options)
    return pal[index % len(pal)]
