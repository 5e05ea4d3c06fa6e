"""Core framework for the Chart Station dashboard.

Provides the building blocks for adding data sources (chart files, URLs,
ping logs) and card types (charts) to the dashboard.

Architecture:
    DataSource  -- loads data in a background thread, publishes to EventBus
    EventBus    -- thread-safe message bus, delivers payloads to subscribers on main thread
    BaseCard    -- tkinter Frame that subscribes to a topic and renders data (core.base_card)
    Registry    -- registers card types + data source types by name
    Observers   -- in-process callback lists for palette / theme changes
"""

from core.event_bus import EventBus
from core.data_source import DataSource
from core.observers import ObserverList, Subscription
from core.registry import CARD_REGISTRY, SOURCE_REGISTRY, register_card, register_source

__all__ = [
    "EventBus",
    "DataSource",
    "ObserverList",
    "Subscription",
    "CARD_REGISTRY",
    "SOURCE_REGISTRY",
    "register_card",
    "register_source",
]
