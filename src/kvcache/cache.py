"""Thread-safe in-memory key/value cache with per-entry expiration.

Entries expire lazily (reads treat an expired entry as absent) and actively
(delete_expired purges them, periodically when a Janitor is attached).
A single reader/writer lock guards the entry map; listeners always run after
the lock has been released.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Generic, List, Optional, Tuple, Union

from kvcache import config
from kvcache.entry import CacheEntry, new_entry
from kvcache.errors import KeyExpiredError, KeyNotFoundError, ValidationError
from kvcache.janitor import Janitor
from kvcache.listeners import Event, ListenerRegistry
from kvcache.models import (
    Duration,
    Expiration,
    ExpirationArg,
    Listener,
    T,
    Visitor,
    normalize_expiration,
    to_seconds,
)
from kvcache.rwlock import ReadWriteLock

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class HashCache(Generic[T]):
    """Unbounded cache keyed by string; only expiration removes entries.

    default_expiration is a duration or Expiration.NEVER and is used by
    writes that pass Expiration.DEFAULT. A positive cleanup_interval attaches
    a Janitor thread that calls delete_expired on that period until close().
    """

    def __init__(
        self,
        default_expiration: Union[Duration, Expiration] = Expiration.NEVER,
        cleanup_interval: Duration = 0,
        *,
        clock: Optional[Clock] = None,
        start_janitor: bool = True,
        janitor_name: str = "kvcache-janitor",
    ) -> None:
        default = normalize_expiration(default_expiration)
        if default is Expiration.DEFAULT:
            raise ValidationError("The cache default expiration cannot itself be Expiration.DEFAULT")

        self._default_expiration: Union[float, Expiration] = default
        self._clock: Clock = clock if clock is not None else time.time
        self._items: Dict[str, CacheEntry[T]] = {}
        self._lock = ReadWriteLock()
        self._listeners: ListenerRegistry[T] = ListenerRegistry()

        self._janitor: Optional[Janitor] = None
        interval = to_seconds(cleanup_interval)
        if interval > 0:
            self._janitor = Janitor(interval=interval, sweep=self.delete_expired, name=janitor_name)
            if start_janitor:
                self._janitor.start()

    @property
    def default_expiration(self) -> Union[float, Expiration]:
        return self._default_expiration

    @property
    def janitor(self) -> Optional[Janitor]:
        return self._janitor

    # Reads

    def get(self, key: str) -> Tuple[Optional[T], bool]:
        with self._lock.read():
            entry = self._items.get(key)
            if entry is None or entry.expired(self._clock()):
                return None, False
            return entry.value, True

    def fetch(self, key: str) -> T:
        """Return the live value for key or raise why it is unavailable."""
        with self._lock.read():
            entry = self._items.get(key)
            if entry is None:
                raise KeyNotFoundError(key)
            if entry.expired(self._clock()):
                raise KeyExpiredError(key)
            return entry.value

    def get_expiration(self, key: str) -> Tuple[Union[float, Expiration, None], bool]:
        """Return the absolute expiration instant (epoch seconds).

        Reports found for any physically present entry, expired or not.
        """
        with self._lock.read():
            entry = self._items.get(key)
            if entry is None:
                return None, False
            if entry.expires_at is None:
                return Expiration.NEVER, True
            return entry.expires_at, True

    def get_expected_expiration(self, key: str) -> Tuple[Union[float, Expiration, None], bool]:
        """Return seconds left, Expiration.NEVER or Expiration.EXPIRED."""
        with self._lock.read():
            entry = self._items.get(key)
            if entry is None:
                return None, False
            if entry.never_expires:
                return Expiration.NEVER, True
            now = self._clock()
            if entry.expired(now):
                return Expiration.EXPIRED, True
            return entry.remaining(now), True

    def exists(self, key: str) -> bool:
        with self._lock.read():
            entry = self._items.get(key)
            return entry is not None and not entry.expired(self._clock())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.exists(key)

    # Writes

    def put(self, key: str, value: T, expiration: ExpirationArg = Expiration.DEFAULT) -> None:
        resolved = normalize_expiration(expiration)
        with self._lock.write():
            self._insert(key, value, resolved)
        self._listeners.notify(Event.PUT, key, value)

    def put_if_absent(self, key: str, value: T, expiration: ExpirationArg = Expiration.DEFAULT) -> bool:
        resolved = normalize_expiration(expiration)
        with self._lock.write():
            if self._live(key):
                return False
            self._insert(key, value, resolved)
        self._listeners.notify(Event.PUT, key, value)
        return True

    def put_if_exists(self, key: str, value: T, expiration: ExpirationArg = Expiration.DEFAULT) -> bool:
        resolved = normalize_expiration(expiration)
        with self._lock.write():
            if not self._live(key):
                return False
            self._insert(key, value, resolved)
        self._listeners.notify(Event.PUT, key, value)
        return True

    def remove(self, key: str) -> bool:
        # An expired entry counts as already gone and is left for the sweep
        with self._lock.write():
            entry = self._items.get(key)
            if entry is None or entry.expired(self._clock()):
                return False
            del self._items[key]
        self._listeners.notify(Event.REMOVE, key, entry.value)
        return True

    def clear(self) -> None:
        with self._lock.write():
            dropped = len(self._items)
            self._items = {}
        logger.debug("Cleared %d entries", dropped)

    def delete_expired(self) -> int:
        """Purge every expired entry and notify expiration listeners.

        Returns the number of entries purged.
        """
        with self._lock.write():
            now = self._clock()
            expired = [(key, entry.value) for key, entry in self._items.items() if entry.expired(now)]
            for key, _ in expired:
                del self._items[key]

        if expired:
            logger.debug("Purged %d expired entries", len(expired))
            self._listeners.notify_many(Event.EXPIRE, expired)
        return len(expired)

    # Enumeration

    def count(self) -> int:
        # Raw size: expired entries still waiting for a sweep are included
        with self._lock.read():
            return len(self._items)

    def __len__(self) -> int:
        return self.count()

    def keys(self) -> List[str]:
        return [key for key, _ in self._live_items()]

    def values(self) -> List[T]:
        return [value for _, value in self._live_items()]

    def for_each(self, visitor: Visitor[T]) -> None:
        """Call visitor(key, value) for each live entry until it returns False.

        Works on a snapshot, so the visitor may freely mutate the cache.
        """
        for key, value in self._live_items():
            if visitor(key, value) is False:
                break

    # Listeners

    def add_put_listener(self, listener: Listener[T]) -> None:
        self._listeners.add(Event.PUT, listener)

    def add_remove_listener(self, listener: Listener[T]) -> None:
        self._listeners.add(Event.REMOVE, listener)

    def add_expiration_listener(self, listener: Listener[T]) -> None:
        self._listeners.add(Event.EXPIRE, listener)

    # Lifecycle

    def close(self) -> None:
        if self._janitor is not None:
            self._janitor.stop()

    def __enter__(self) -> "HashCache[T]":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Helpers; callers must hold the lock

    def _insert(self, key: str, value: T, expiration: Union[float, Expiration]) -> None:
        self._items[key] = new_entry(value, expiration, self._default_expiration, now=self._clock())

    def _live(self, key: str) -> bool:
        entry = self._items.get(key)
        return entry is not None and not entry.expired(self._clock())

    def _live_items(self) -> List[Tuple[str, T]]:
        with self._lock.read():
            now = self._clock()
            return [(key, entry.value) for key, entry in self._items.items() if not entry.expired(now)]


def new_cache(
    default_expiration: Union[Duration, Expiration, None] = None,
    cleanup_interval: Optional[Duration] = None,
    *,
    clock: Optional[Clock] = None,
    start_janitor: bool = True,
) -> HashCache:
    """Create a cache, falling back to environment configuration.

    Omitted arguments resolve to config.DEFAULT_EXPIRATION and
    config.CLEANUP_INTERVAL. A non-positive cleanup_interval disables the
    background janitor; reads still honour expiration.
    """
    if default_expiration is None:
        default_expiration = config.DEFAULT_EXPIRATION
    if cleanup_interval is None:
        cleanup_interval = config.CLEANUP_INTERVAL

    return HashCache(
        default_expiration,
        cleanup_interval,
        clock=clock,
        start_janitor=start_janitor,
        janitor_name=config.JANITOR_THREAD_NAME,
    )
