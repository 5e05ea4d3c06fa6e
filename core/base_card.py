"""Base card widget for Chart Station.

A card is a framed tk.Frame on the board grid. If its config names a
``source_id`` it listens on that EventBus topic and gets every payload the
source publishes through on_data(), on the main thread.

setup_ui() runs once while the card is built; on_data() runs per load.
"""

import tkinter as tk
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from config import THEME
from core.event_bus import EventBus
from core.observers import Subscription

logger = logging.getLogger(__name__)


class BaseCard(tk.Frame, ABC):
    """Abstract card widget. Subclasses define how data is displayed."""

    COLS = 1  # grid columns spanned

    def __init__(self, parent, bus: EventBus, config: Dict):
        super().__init__(
            parent,
            bg=config.get("bg", THEME["card_bg"]),
            highlightbackground=THEME["accent"],
            highlightthickness=1,
        )
        self.bus = bus
        self.card_config = config
        self.topic = config.get("source_id", "")
        self._subscription: Optional[Subscription] = None

        self.setup_ui()

        if self.topic:
            self._subscription = self.bus.subscribe(self.topic, self._deliver)

    def _deliver(self, payload: Any):
        try:
            self.on_data(payload)
        except Exception as exc:
            logger.error("Card %s (%s) update error: %s",
                         self.get_display_name(), self.topic, exc)

    @abstractmethod
    def setup_ui(self):
        """Create the card's tkinter widgets. Runs once at init."""

    @abstractmethod
    def on_data(self, payload: Dict):
        """Handle a payload from the card's source. Runs on main thread."""

    def get_display_name(self) -> str:
        return self.card_config.get("label", self.__class__.__name__)

    def destroy(self):
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        super().destroy()
