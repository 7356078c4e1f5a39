"""Change notifications for settings documents, keyed by uri."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsChanged:
    uri: str


SettingsChangedHandler = Callable[[SettingsChanged], None]


class SettingsChangedChannel:
    """
    Publish/subscribe channel for `SettingsChanged` events.

    Publishing is split in two steps. `enqueue` only records the event and is
    meant to be called while the publisher still holds its own lock, so events
    are queued in mutation order. `flush` delivers queued events and must be
    called after that lock is released. Delivery is serialized across threads;
    a handler that publishes again from inside a callback has its event
    delivered by the running flush once the current callback returns.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[SettingsChangedHandler]] = {}
        self._subscribers_lock = threading.Lock()
        self._pending: deque[SettingsChanged] = deque()
        self._pending_lock = threading.Lock()
        self._dispatch_lock = threading.RLock()
        self._dispatching = False

    @staticmethod
    def _key(uri: str) -> str:
        return uri.casefold()

    def subscribe(self, uri: str, handler: SettingsChangedHandler) -> None:
        """Subscribe to change events of one uri (compared case-insensitively)."""
        with self._subscribers_lock:
            self._subscribers.setdefault(self._key(uri), []).append(handler)

    def enqueue(self, event: SettingsChanged) -> None:
        with self._pending_lock:
            self._pending.append(event)

    def _next(self) -> SettingsChanged | None:
        with self._pending_lock:
            return self._pending.popleft() if self._pending else None

    def flush(self) -> None:
        with self._dispatch_lock:
            if self._dispatching:
                # Re-entered from a handler on this thread; the outer loop delivers.
                return
            self._dispatching = True
            try:
                while True:
                    event = self._next()
                    if event is None:
                        break
                    self._deliver(event)
            finally:
                self._dispatching = False

    def _deliver(self, event: SettingsChanged) -> None:
        with self._subscribers_lock:
            handlers = list(self._subscribers.get(self._key(event.uri), []))
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception("Error in settings change handler for %s", event.uri)
