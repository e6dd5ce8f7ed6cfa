from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from threading import RLock
from typing import Any, Callable, DefaultDict, Dict, List

logger = logging.getLogger(__name__)

# Subscribing to this name receives every published event.
ALL_EVENTS = "*"

Subscriber = Callable[["Event"], None]


@dataclass(frozen=True)
class Event:
    """A generation stage finished.

    Attributes:
        name: one of the EventType names.
        payload: counts describing what the stage produced.
    """
    name: str
    payload: Dict[str, Any] = field(default_factory=dict)


class EventBus:
    """Synchronous publish/subscribe hub for generation stages.

    Subscribers for a name run in registration order, followed by ALL_EVENTS
    subscribers. Publishing is lock protected because a delayed completion
    notification arrives from a timer thread.
    """

    def __init__(self) -> None:
        self._subs: DefaultDict[str, List[Subscriber]] = defaultdict(list)
        self._lock = RLock()

    def subscribe(self, event_name: str, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` and return a function that removes it again."""
        if not callable(callback):
            raise TypeError("callback must be callable")
        with self._lock:
            self._subs[event_name].append(callback)
        logger.debug("Subscribed %s to '%s'", getattr(callback, "__name__", repr(callback)), event_name)
        return lambda: self.unsubscribe(event_name, callback)

    def unsubscribe(self, event_name: str, callback: Subscriber) -> None:
        with self._lock:
            subs = self._subs.get(event_name)
            if subs and callback in subs:
                subs.remove(callback)

    def publish(self, event_name: str, payload: Dict[str, Any] | None = None, **extra: Any) -> Event:
        """Deliver an event; a failing observer is logged and does not stop generation."""
        event = Event(name=event_name, payload={**(payload or {}), **extra})
        with self._lock:
            subs = list(self._subs.get(event_name, ())) + list(self._subs.get(ALL_EVENTS, ()))
        logger.debug("Event '%s' -> %d subscribers: %s", event_name, len(subs), event.payload)
        for cb in subs:
            try:
                cb(event)
            except Exception:
                logger.exception("Subscriber %r failed on '%s'", cb, event_name)
        return event


_GLOBAL_BUS: EventBus = EventBus()


def get_event_bus() -> EventBus:
    """Process-wide bus for hosts that do not inject their own."""
    return _GLOBAL_BUS
