"""Cancellable timers and input debouncing on the running event loop."""

import asyncio
from typing import Any, Callable, Optional

from loguru import logger


class CancellableTimer:
    """A single-shot timer. Coroutine callbacks are run as a task."""

    def __init__(self):
        self._handle: Optional[asyncio.TimerHandle] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def task(self) -> Optional[asyncio.Task]:
        """Task started by the last coroutine callback, if any."""
        return self._task

    def schedule(self, fn: Callable[[], Any], delay: float) -> None:
        """Run `fn` after `delay` seconds, replacing anything already scheduled."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._fire, fn)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, fn: Callable[[], Any]) -> None:
        self._handle = None
        result = fn()
        if asyncio.iscoroutine(result):
            self._task = asyncio.ensure_future(result)


class Debouncer:
    """
    Invokes `callback(query)` once input has been quiet for `delay_ms`.

    Each trigger cancels the pending one: last writer wins, nothing queues.
    """

    def __init__(self, callback: Callable[[str], Any], delay_ms: int):
        self.callback = callback
        self.delay_ms = delay_ms
        self._timer = CancellableTimer()
        self._stats = {"triggered": 0, "superseded": 0, "fired": 0}

    @property
    def pending(self) -> bool:
        return self._timer.pending

    def trigger(self, query: str) -> None:
        self._stats["triggered"] += 1
        if self._timer.pending:
            self._stats["superseded"] += 1
            logger.debug(f"Debounce: superseding pending search with {query!r}")
        self._timer.schedule(lambda: self._fire(query), self.delay_ms / 1000.0)

    def _fire(self, query: str) -> Any:
        self._stats["fired"] += 1
        return self.callback(query)

    def cancel(self) -> None:
        """Drop the pending invocation, if any."""
        self._timer.cancel()

    def close(self) -> None:
        """Teardown: cancel the timer and any search it already started."""
        self._timer.cancel()
        task = self._timer.task
        if task is not None and not task.done():
            task.cancel()

    def get_stats(self):
        return dict(self._stats)
