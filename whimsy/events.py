"""
Entity lifecycle events.

The provider announces every state change so callers can attach audit,
notification or test hooks without touching the generation core.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

ENTITY_CREATED = "entity.created"
ENTITY_UPDATED = "entity.updated"
ENTITY_REGENERATED = "entity.regenerated"
ENTITY_DELETED = "entity.deleted"


class Event:
    """An event name plus payload dict"""

    def __init__(self, name: str, payload: Dict[str, Any]):
        self.name = name
        self.payload = payload

    def __repr__(self) -> str:
        return f"Event(name={self.name}, payload={self.payload})"


EventHandler = Callable[[Event], None]


class EventBus:
    """
    Pub/sub bus for entity events.

    Events:
        - entity.created: an entity got its first name
        - entity.updated: an update kept the existing name
        - entity.regenerated: an update produced a new name
        - entity.deleted: an entity was discarded

    A failing handler is logged and skipped; it never breaks the operation
    that emitted the event.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        self._handlers[event_name].append(handler)
        logger.debug(f"Subscribed handler to {event_name}")

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        if handler in self._handlers.get(event_name, []):
            self._handlers[event_name].remove(handler)
            logger.debug(f"Unsubscribed handler from {event_name}")

    def emit(self, event_name: str, payload: Dict[str, Any]) -> int:
        """Deliver to every handler of ``event_name``; returns how many succeeded."""
        event = Event(event_name, payload)
        logger.debug(f"Emitting event: {event_name}")

        delivered = 0
        for handler in list(self._handlers.get(event_name, [])):
            try:
                handler(event)
                delivered += 1
            except Exception as e:  # noqa: BLE001
                logger.error(f"Error in event handler for {event_name}: {e}")
        return delivered

    def clear(self) -> None:
        """Drop all subscriptions (used by tests)"""
        self._handlers.clear()


_global_bus = EventBus()


def get_event_bus() -> EventBus:
    """Process-wide bus used when a provider is not given its own"""
    return _global_bus
