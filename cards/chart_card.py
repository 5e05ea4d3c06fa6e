"""Chart card -- a bar or pie chart on a tk.Canvas.

Values come inline from the card config or from a chartfile / pinglog
source. Every payload replaces the chart: the previous handle is disposed
first, so the last load to arrive is the one on screen. A failed load
shows the pipeline's note in place of the chart.

Config example (in dashboard.yaml):
    cards:
      - type: "chart"
        kind: "pie"
        label: "Browser share"
        source_id: "files.browsers"
        options:
          title: "Browser share"
          valueFormat: "{fraction:.0%}"
"""

import tkinter as tk
import logging
from typing import Dict, Optional, Tuple

from charts.mount import ChartHandle, mount_chart
from charts.options import ChartOptions, coerce_options
from charts.theme import THEME_STATE
from charts.tk_surface import TkContainer
from config import THEME
from core.base_card import BaseCard
from core.registry import register_card

logger = logging.getLogger(__name__)


def card_options(card_config: Dict) -> Tuple[ChartOptions, Optional[str]]:
    """Chart options from a card config, or defaults and a note if they are invalid."""
    try:
        return coerce_options(card_config.get("options")), None
    except (TypeError, ValueError) as exc:
        return ChartOptions(), f"chart: {exc}"


@register_card("chart")
class ChartCard(BaseCard):
    """Displays one chart, redrawn on resize and theme changes."""

    def setup_ui(self):
        bg = self["bg"]
        tk.Label(
            self, text=self.get_display_name(), font=("Arial", 11, "bold"),
            bg=bg, fg=THEME["text"], anchor="w",
        ).pack(fill="x", padx=8, pady=(6, 0))

        self._body = tk.Frame(self, bg=bg)
        self._body.pack(fill="both", expand=True, padx=4, pady=4)
        self._container = TkContainer(
            self._body, bg=THEME_STATE.colors().background, note_fg=THEME["text_dim"],
        )
        self._kind = self.card_config.get("kind", "bar")
        self._handle: Optional[ChartHandle] = None
        self._note = None
        self._options, self._problem = card_options(self.card_config)
        if self._problem:
            logger.error("Chart card %s: %s", self.get_display_name(), self._problem)
            self.show_note(self._problem)
            return

        values = self.card_config.get("values")
        if values is not None:
            self.show_values(values)
        elif not self.topic:
            self.show_note("chart: no values or source_id configured")

    def on_data(self, payload: Dict):
        if self._problem:
            return
        if payload.get("note"):
            self.show_note(payload["note"])
        elif payload.get("fmt") == "log":
            self.show_values(payload.get("values"), "bar", self._options.for_ping_log())
        else:
            self.show_values(payload.get("values"))

    def show_values(self, values, kind: Optional[str] = None, options=None):
        self._clear()
        try:
            self._handle = mount_chart(
                self._container, values, kind or self._kind, options or self._options,
            )
        except (TypeError, ValueError) as exc:
            logger.error("Chart card %s: %s", self.get_display_name(), exc)
            self.show_note(f"chart: {exc}")

    def show_note(self, text: str):
        self._clear()
        self._note = self._container.add_note(text)

    def _clear(self):
        if self._handle is not None:
            self._handle.dispose(remove=True)
            self._handle = None
        if self._note is not None:
            self._note.destroy()
            self._note = None

    def destroy(self):
        self._clear()
        super().destroy()
