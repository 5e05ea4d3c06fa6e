"""Data source abstraction for Chart Station.

A DataSource loads data (chart files, URLs, ping logs) in a background
thread and publishes it to the EventBus. Cards don't care where data
comes from -- they just subscribe to topics.

Without an ``interval`` a source loads once; with one it reloads on that
period (handy for a ping log that keeps growing).
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from core.event_bus import EventBus

logger = logging.getLogger(__name__)


class DataSource(ABC):
    """Base class for all data providers.

    Subclasses implement fetch() which runs in a background thread.
    Data is published to the EventBus under self.topic.
    """

    def __init__(self, source_id: str, bus: EventBus, config: Dict):
        self.source_id = source_id
        self.bus = bus
        self.config = config
        self.topic = source_id  # subscribers use this to listen
        self.interval: Optional[float] = config.get("interval")  # seconds, None = once
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self):
        """Start the background loader thread."""
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, daemon=True, name=f"src-{self.source_id}"
        )
        self._thread.start()
        if self.interval:
            logger.info("DataSource %s started (%.1fs interval)", self.source_id, self.interval)
        else:
            logger.info("DataSource %s started (one-shot)", self.source_id)

    def stop(self):
        """Signal the background thread to stop."""
        self._stop.set()

    def run_once(self):
        """Fetch and publish one result on the calling thread."""
        try:
            data = self.fetch()
            if data is not None:
                self.bus.publish(self.topic, data)
        except Exception as exc:
            logger.error("DataSource %s fetch error: %s", self.source_id, exc)

    def _run(self):
        """Load loop -- fetch and publish, sleep in small chunks."""
        while not self._stop.is_set():
            self.run_once()
            if not self.interval:
                break

            # Sleep in 0.1s chunks so stop() is responsive
            chunks = int(self.interval * 10)
            for _ in range(max(chunks, 1)):
                if self._stop.is_set():
                    break
                time.sleep(0.1)

    @abstractmethod
    def fetch(self) -> Optional[Dict[str, Any]]:
        """Fetch data. Runs in background thread.

        Returns:
            Payload dict, or None to skip this cycle.
        """
        ...

    def close(self):
        """Release resources. Override if needed."""
        self.stop()
