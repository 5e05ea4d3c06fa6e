"""Thread-safe event bus for Chart Station.

Background threads (data sources) push loaded chart data via publish().
The main tkinter thread polls the queue and hands each payload to the
topic's ObserverList, so every chart is redrawn on the main thread
(required by tkinter).

When two loads for the same topic finish close together, both payloads
are delivered in order and the later one wins on screen.
"""

import logging
from queue import Queue, Empty
from typing import Any, Callable, Dict

from core.observers import ObserverList, Subscription

logger = logging.getLogger(__name__)

POLL_MS = 50
BATCH = 50  # messages handled per tick


class EventBus:
    """Central message bus bridging background threads to the tkinter main thread."""

    def __init__(self, root):
        self._root = root
        self._queue = Queue()
        self._topics: Dict[str, ObserverList] = {}
        self._poll()

    def publish(self, topic: str, payload: Any):
        """Push data from any thread. Thread-safe."""
        self._queue.put((topic, payload))

    def subscribe(self, topic: str, callback: Callable) -> Subscription:
        """Register a callback for a topic. Called on main thread."""
        if topic not in self._topics:
            self._topics[topic] = ObserverList(topic)
        return self._topics[topic].subscribe(callback)

    def unsubscribe(self, topic: str, callback: Callable):
        observers = self._topics.get(topic)
        if observers is not None:
            observers.unsubscribe(callback)

    def drain(self, limit: int = BATCH) -> int:
        """Dispatch up to ``limit`` queued messages. Returns how many ran."""
        handled = 0
        while handled < limit:
            try:
                topic, payload = self._queue.get_nowait()
            except Empty:
                break
            handled += 1
            observers = self._topics.get(topic)
            if observers is None:
                logger.debug("No subscribers for %s", topic)
                continue
            observers.notify(payload)
        return handled

    def _poll(self):
        self.drain()
        self._root.after(POLL_MS, self._poll)
