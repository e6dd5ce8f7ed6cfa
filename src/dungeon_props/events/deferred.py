from __future__ import annotations

import logging
import threading
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class DeferredNotifier:
    """Runs completion callbacks once, optionally after a fixed delay.

    With ``delay <= 0`` the callback runs synchronously inside ``schedule``.
    Otherwise a daemon timer fires it later; ``wait`` blocks until every
    scheduled callback has run and ``cancel`` drops the ones still pending.
    """

    def __init__(self, delay: float = 0.0) -> None:
        if delay < 0:
            raise ValueError(f"delay must be non-negative, got {delay}")
        self.delay = delay
        self._lock = threading.Lock()
        self._timers: List[threading.Timer] = []

    def schedule(self, callback: Callable[..., None], *args: Any) -> None:
        fired = threading.Event()

        def run_once() -> None:
            if fired.is_set():
                return
            fired.set()
            callback(*args)

        if self.delay <= 0:
            run_once()
            return
        timer = threading.Timer(self.delay, run_once)
        timer.daemon = True
        with self._lock:
            self._timers.append(timer)
        timer.start()
        logger.debug("Scheduled %s in %.2fs", getattr(callback, "__name__", repr(callback)), self.delay)

    @property
    def pending(self) -> int:
        with self._lock:
            return sum(1 for t in self._timers if t.is_alive())

    def wait(self, timeout: float | None = None) -> None:
        with self._lock:
            timers = list(self._timers)
        for timer in timers:
            timer.join(timeout)
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]

    def cancel(self) -> None:
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()
        if timers:
            logger.debug("Cancelled %d pending notifications", len(timers))
