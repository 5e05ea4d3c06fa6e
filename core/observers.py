"""Callback lists with explicit unsubscribe handles.

Used for process-wide settings (chart theme, palette) that charts watch.
Unlike the EventBus there is no queue: notify() calls every subscriber
synchronously on the caller's thread, which is always the main thread.
"""

import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class Subscription:
    """Handle returned by ObserverList.subscribe(). Cancel to unsubscribe."""

    def __init__(self, owner: "ObserverList", callback: Callable):
        self._owner = owner
        self.callback = callback
        self.active = True

    def cancel(self):
        if self.active:
            self.active = False
            self._owner.unsubscribe(self.callback)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.cancel()
        return False


class ObserverList:
    """Ordered list of callbacks notified with a single payload."""

    def __init__(self, name: str = ""):
        self.name = name
        self._callbacks: List[Callable] = []

    def subscribe(self, callback: Callable) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(self, callback)

    def unsubscribe(self, callback: Callable):
        self._callbacks = [cb for cb in self._callbacks if cb != callback]

    def notify(self, payload: Any = None):
        # copy: callbacks may unsubscribe themselves
        for cb in list(self._callbacks):
            try:
                cb(payload)
            except Exception as exc:
                logger.error("Observer callback error [%s]: %s", self.name, exc)

    def __len__(self):
        return len(self._callbacks)
