"""Notification registry for put, remove and expiration events.

Each event kind keeps its own append-only list of listeners. Callers take a
snapshot of a list and invoke it after releasing the store lock, so a
listener may call back into the cache.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Dict, Generic, List, Optional, Tuple

from kvcache.models import Listener, T


class Event(Enum):
    PUT = "put"
    REMOVE = "remove"
    EXPIRE = "expire"


class ListenerRegistry(Generic[T]):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: Dict[Event, List[Listener[T]]] = {event: [] for event in Event}

    def add(self, event: Event, listener: Listener[T]) -> None:
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        with self._lock:
            self._listeners[event].append(listener)

    def snapshot(self, event: Event) -> Tuple[Listener[T], ...]:
        with self._lock:
            return tuple(self._listeners[event])

    def notify(self, event: Event, key: str, value: T) -> None:
        self.notify_many(event, [(key, value)])

    def notify_many(self, event: Event, pairs: List[Tuple[str, T]]) -> None:
        """Deliver every (key, value) pair to every listener in registration order.

        A failing listener does not stop delivery; the first exception is
        re-raised once all calls have been made.
        """
        listeners = self.snapshot(event)
        if not listeners:
            return
        first_error: Optional[BaseException] = None
        for key, value in pairs:
            for listener in listeners:
                try:
                    listener(key, value)
                except Exception as e:
                    if first_error is None:
                        first_error = e
        if first_error is not None:
            raise first_error
