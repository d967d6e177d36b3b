"""
Session event bus.

A session publishes what happened to it (a search completed or was discarded,
the selection changed) and renderers or analytics hooks subscribe by pattern.
Events are queued and delivered by one consumer task on the event loop, in
publication order. Plain callables run inline on the loop; coroutine handlers
for the same event are awaited together.
"""

import asyncio
import inspect
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from loguru import logger

SEARCH_COMPLETED = "search.completed"
SEARCH_DISCARDED = "search.discarded"
SEARCH_FAILED = "search.failed"
SELECTION_CHANGED = "selection.changed"
RECENT_UPDATED = "recent.updated"


@dataclass
class Event:
    """Something a session did, named `category.action`."""
    type: str
    data: Dict[str, Any]
    timestamp: datetime = field(default_factory=datetime.now)
    source: Optional[str] = None

    @property
    def category(self) -> str:
        return self.type.split(".", 1)[0]


Handler = Callable[[Event], Union[None, Awaitable[None]]]


@dataclass
class Subscription:
    """A handler bound to `*`, `category.*` or one exact event type."""
    pattern: str
    handler: Handler

    def accepts(self, event_type: str) -> bool:
        if self.pattern == "*":
            return True
        if self.pattern.endswith(".*"):
            return event_type.startswith(self.pattern[:-1])
        return event_type == self.pattern


class EventBus:
    """Queue-backed pub/sub for session events."""

    def __init__(self, maxsize: int = 1000):
        self._subscriptions: List[Subscription] = []
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._consumer: Optional[asyncio.Task] = None
        self._stats: Counter = Counter()

    @property
    def running(self) -> bool:
        return self._consumer is not None and not self._consumer.done()

    def subscribe(self, pattern: str, handler: Handler) -> Subscription:
        subscription = Subscription(pattern, handler)
        self._subscriptions.append(subscription)
        logger.debug(f"Subscribed {getattr(handler, '__name__', handler)!s} to {pattern}")
        return subscription

    def unsubscribe(self, pattern: str, handler: Handler) -> None:
        self._subscriptions = [
            s for s in self._subscriptions
            if not (s.pattern == pattern and s.handler == handler)
        ]

    def publish(self, event: Event) -> bool:
        """
        Queue an event for delivery without blocking the caller.

        Returns False when the queue is full and the event was dropped.
        """
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(f"Event queue full, dropping {event.type}")
            self._stats["dropped"] += 1
            return False
        self._stats["published"] += 1
        return True

    async def start(self) -> None:
        if self.running:
            logger.warning("Event bus already running")
            return
        self._consumer = asyncio.create_task(self._consume())
        logger.debug("Event bus started")

    async def drain(self) -> None:
        """Wait until every queued event has been delivered."""
        await self._queue.join()

    async def stop(self, drain: bool = True) -> None:
        """Stop the consumer, delivering queued events first unless `drain` is False."""
        if not self.running:
            return
        if drain:
            await self.drain()
        self._consumer.cancel()
        try:
            await self._consumer
        except asyncio.CancelledError:
            pass
        self._consumer = None
        logger.debug("Event bus stopped")

    async def _consume(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._deliver(event)
            finally:
                self._queue.task_done()

    async def _deliver(self, event: Event) -> None:
        awaiting = []
        for subscription in list(self._subscriptions):
            if not subscription.accepts(event.type):
                continue
            try:
                result = subscription.handler(event)
            except Exception as e:
                self._handler_failed(event, e)
                continue
            if inspect.isawaitable(result):
                awaiting.append(result)

        if awaiting:
            for outcome in await asyncio.gather(*awaiting, return_exceptions=True):
                if isinstance(outcome, Exception):
                    self._handler_failed(event, outcome)

        self._stats["delivered"] += 1

    def _handler_failed(self, event: Event, error: Exception) -> None:
        logger.error(f"Handler error for {event.type}: {error}")
        self._stats["handler_errors"] += 1

    def get_stats(self) -> Dict[str, int]:
        return dict(self._stats)
