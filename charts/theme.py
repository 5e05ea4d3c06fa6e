"""Active chart theme and its colours.

Charts never cache colours: every draw calls THEME_STATE.colors(), and a
redraw is triggered for every theme change through on_change(). A draw
already in progress keeps the colours it read at its start.
"""

import logging
from typing import Dict, NamedTuple, Optional

from config import CHART_THEMES, DEFAULT_THEME
from core.observers import ObserverList, Subscription

logger = logging.getLogger(__name__)


class ThemeColors(NamedTuple):
    background: str
    axis: str
    text: str


class ThemeState:
    """Current theme name, a colour table per theme, and change subscribers."""

    def __init__(self, themes: Optional[Dict[str, Dict]] = None, initial: str = DEFAULT_THEME):
        self._themes = dict(themes or CHART_THEMES)
        if initial not in self._themes:
            raise ValueError(f"Unknown theme: {initial}")
        self._current = initial
        self._observers = ObserverList("theme")

    @property
    def current(self) -> str:
        return self._current

    @property
    def names(self):
        return list(self._themes)

    def colors(self) -> ThemeColors:
        entry = self._themes[self._current]
        return ThemeColors(entry["chart_bg"], entry["chart_axis"], entry["chart_text"])

    def set_to(self, name: str) -> bool:
        """Switch theme. Unknown names are ignored; every switch notifies."""
        if name not in self._themes:
            logger.warning("Unknown theme: %s", name)
            return False
        self._current = name
        logger.debug("Theme set to %s", name)
        self._observers.notify(name)
        return True

    def toggle(self) -> str:
        """Flip between dark and light (or cycle through custom themes)."""
        names = self.names
        nxt = names[(names.index(self._current) + 1) % len(names)]
        self.set_to(nxt)
        return nxt

    def on_change(self, callback) -> Subscription:
        return self._observers.subscribe(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._observers)


THEME_STATE = ThemeState()
