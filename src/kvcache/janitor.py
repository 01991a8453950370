"""Background sweepers that purge expired cache entries.

Janitor runs in a daemon thread and suits ordinary threaded programs.
AsyncJanitor runs as an asyncio task for applications that live inside an
event loop. Both drive a zero-argument sweep callable (normally
HashCache.delete_expired) once per interval and follow the same one-way
state machine: IDLE -> RUNNING -> STOPPED. Stopping is idempotent.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from enum import Enum
from typing import Callable, Optional

from kvcache.errors import CacheError, ValidationError

logger = logging.getLogger(__name__)

Sweep = Callable[[], object]


class JanitorState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


def _check_interval(interval: float) -> float:
    interval = float(interval)
    if interval <= 0:
        raise ValidationError(f"Janitor interval must be positive, got {interval}")
    return interval


class Janitor:
    def __init__(self, *, interval: float, sweep: Sweep, name: str = "kvcache-janitor") -> None:
        self._interval = _check_interval(interval)
        self._sweep = sweep
        self._name = name
        self._state = JanitorState.IDLE
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def state(self) -> JanitorState:
        return self._state

    def start(self) -> None:
        with self._state_lock:
            if self._state is JanitorState.RUNNING:
                return
            if self._state is JanitorState.STOPPED:
                raise CacheError("A stopped janitor cannot be restarted")
            self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
            self._state = JanitorState.RUNNING
            self._thread.start()
        logger.info("Janitor started (interval=%ss)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        with self._state_lock:
            if self._state is JanitorState.STOPPED:
                return
            was_running = self._state is JanitorState.RUNNING
            self._state = JanitorState.STOPPED
            self._stop_event.set()
            thread = self._thread

        if not was_running:
            return

        # A listener running on the janitor thread may close its own cache
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Janitor thread still running after stop (timeout=%ss)", timeout)
                return
        logger.info("Janitor stopped")

    def _run(self) -> None:
        # Event.wait doubles as the ticker; it returns True once stop is requested
        while not self._stop_event.wait(self._interval):
            try:
                self._sweep()
            except Exception:
                logger.exception("Janitor sweep failed")


class AsyncJanitor:
    """Sweeper driven by an asyncio task.

    The caller owns its lifecycle: HashCache.close() does not stop it, so
    await stop() before the loop shuts down.
    """

    def __init__(self, *, interval: float, sweep: Sweep) -> None:
        self._interval = _check_interval(interval)
        self._sweep = sweep
        self._state = JanitorState.IDLE
        self._task: Optional["asyncio.Task[None]"] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def state(self) -> JanitorState:
        return self._state

    def start(self) -> None:
        # Must be called from inside a running event loop
        if self._state is JanitorState.RUNNING:
            return
        if self._state is JanitorState.STOPPED:
            raise CacheError("A stopped janitor cannot be restarted")
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run())
        self._state = JanitorState.RUNNING
        logger.info("Async janitor started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        if self._state is JanitorState.STOPPED:
            return
        was_running = self._state is JanitorState.RUNNING
        self._state = JanitorState.STOPPED
        task, self._task = self._task, None
        if not was_running or task is None:
            return

        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Async janitor stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                # The sweep takes the cache write lock; keep it off the event loop
                await asyncio.to_thread(self._sweep)
            except Exception:
                logger.exception("Async janitor sweep failed")
