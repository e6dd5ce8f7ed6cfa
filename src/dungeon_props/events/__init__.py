from .deferred import DeferredNotifier
from .event_bus import ALL_EVENTS, Event, EventBus, get_event_bus
from .types import EventType

__all__ = [
    "ALL_EVENTS",
    "DeferredNotifier",
    "Event",
    "EventBus",
    "EventType",
    "get_event_bus",
]
