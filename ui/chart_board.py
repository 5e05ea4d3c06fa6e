"""Chart Station -- a grid of chart cards fed by file sources.

Loads card and source configuration from dashboard.yaml, instantiates
registered card types and data sources, and lays the cards out in a
grid. The THEME button flips every chart between the dark and light
chart themes; charts redraw themselves on the change.
"""

import tkinter as tk
import logging
from typing import Dict

import yaml

from charts.theme import THEME_STATE
from config import DASHBOARD_COLS, DASHBOARD_TITLE, DEMO_CARDS, THEME
from core import EventBus
from core.registry import CARD_REGISTRY, create_source

# Import card and source packages to trigger registration
import cards  # noqa: F401
import sources  # noqa: F401

logger = logging.getLogger(__name__)

# Layout constants
PAD = 8
GAP = 8
TOP_H = 36


def load_config(path: str) -> Dict:
    """Load dashboard config from YAML file."""
    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file not found: %s", path)
        return {}
    except yaml.YAMLError as exc:
        logger.error("Invalid config %s: %s", path, exc)
        return {}


def get_builtin_config() -> Dict:
    """Return the built-in demo configuration (inline values, no sources)."""
    return {"title": DASHBOARD_TITLE, "cards": [dict(c) for c in DEMO_CARDS], "sources": []}


class ChartBoard:
    """Single-page dashboard of chart cards."""

    def __init__(self, root, config_path: str = "dashboard.yaml"):
        self.root = root
        self.root.title("Chart Station")
        self.root.configure(bg=THEME["bg"])
        self.root.geometry("800x480")
        self.root.bind("<Escape>", lambda e: self.root.quit())

        # Core framework
        self.bus = EventBus(root)

        # Load config
        self._config = load_config(config_path)
        if not self._config.get("cards"):
            logger.info("Using built-in configuration")
            self._config = get_builtin_config()

        self._cols = int(self._config.get("cols", DASHBOARD_COLS))
        self._cards = []
        self._sources = {}

        # Build UI
        self._build_top_bar()
        self._build_grid()

        self.root.after(100, self._start_sources)

    # ------------------------------------------------------------------
    # Source management
    # ------------------------------------------------------------------

    def _start_sources(self):
        """Create and start all configured data sources."""
        for src_cfg in self._config.get("sources", []):
            src_id = src_cfg.get("id", "")
            if src_id in self._sources:
                continue  # already created
            try:
                source = create_source(src_cfg, self.bus)
            except Exception as exc:
                logger.error("Failed to create source %s: %s", src_id, exc)
                continue
            if source is None:
                continue
            source.start()
            self._sources[source.source_id] = source
        logger.info("Chart Station: %d sources started", len(self._sources))

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_top_bar(self):
        bar = tk.Frame(self.root, bg=THEME["bg"], height=TOP_H)
        bar.pack(fill="x", padx=PAD)
        bar.pack_propagate(False)

        tk.Label(
            bar, text=self._config.get("title", DASHBOARD_TITLE),
            font=("Arial", 16, "bold"), bg=THEME["bg"], fg=THEME["text"],
        ).pack(side="left", padx=(4, 0))

        btn_kw = {
            "font": ("Arial", 11, "bold"), "relief": "flat",
            "width": 6, "cursor": "hand2",
        }

        tk.Button(
            bar, text="EXIT", bg="#444", fg="white",
            command=self.root.quit, **btn_kw,
        ).pack(side="right", padx=2)

        self._theme_btn = tk.Button(
            bar, text=THEME_STATE.current.upper(), bg=THEME["accent"], fg="white",
            command=self._toggle_theme, **btn_kw,
        )
        self._theme_btn.pack(side="right", padx=2)

    def _build_grid(self):
        """Create cards and grid them left to right, top to bottom."""
        grid = tk.Frame(self.root, bg=THEME["bg"])
        grid.pack(fill="both", expand=True, padx=PAD, pady=(0, PAD))
        for col in range(self._cols):
            grid.columnconfigure(col, weight=1, uniform="card")

        pos = 0
        for card_cfg in self._config.get("cards", []):
            card_type = card_cfg.get("type", "chart")
            cls = CARD_REGISTRY.get(card_type)
            if not cls:
                logger.warning("Unknown card type: %s", card_type)
                continue
            try:
                card = cls(grid, self.bus, card_cfg)
            except Exception as exc:
                logger.error("Failed to create card %s: %s", card_type, exc)
                continue
            r, c = divmod(pos, self._cols)
            grid.rowconfigure(r, weight=1)
            card.grid(row=r, column=c, columnspan=getattr(card, "COLS", 1),
                      padx=GAP // 2, pady=GAP // 2, sticky="nsew")
            self._cards.append(card)
            pos += getattr(card, "COLS", 1)

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def _toggle_theme(self):
        name = THEME_STATE.toggle()
        self._theme_btn.config(text=name.upper())
        logger.info("Chart theme: %s", name)

    def cleanup(self):
        """Stop sources and dispose every chart."""
        for source in self._sources.values():
            source.close()
        for card in self._cards:
            try:
                card.destroy()
            except tk.TclError:
                pass
        self._cards.clear()
