"""
Lifecycle events raised by the host once per day cycle.

    day_started -> (player's day) -> day_ending -> saving -> day_started ...

Handlers take no arguments and run synchronously in subscription order.
A handler that raises is logged; the remaining handlers still run.
"""

import logging
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[[], object]

EVENT_NAMES = ("day_started", "day_ending", "saving")


class LifecycleEvents:
    """Minimal synchronous event source for the host's day/save lifecycle."""

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {name: [] for name in EVENT_NAMES}

    def subscribe(self, event: str, handler: Handler) -> None:
        self._handlers_for(event).append(handler)

    def unsubscribe(self, event: str, handler: Handler) -> None:
        handlers = self._handlers_for(event)
        if handler in handlers:
            handlers.remove(handler)

    def handler_count(self, event: str) -> int:
        return len(self._handlers_for(event))

    def fire(self, event: str) -> None:
        for handler in list(self._handlers_for(event)):
            try:
                handler()
            except Exception as e:
                logger.error(f"{event} handler {getattr(handler, '__name__', handler)} failed: {e}")

    def fire_day_started(self) -> None:
        self.fire("day_started")

    def fire_day_ending(self) -> None:
        self.fire("day_ending")

    def fire_saving(self) -> None:
        self.fire("saving")

    def _handlers_for(self, event: str) -> List[Handler]:
        if event not in self._handlers:
            raise KeyError(f"Unknown lifecycle event: {event}")
        return self._handlers[event]
