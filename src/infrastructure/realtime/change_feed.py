"""In-process change feed backing subscription-style reads.

Writers publish after commit; each live subscription owns a bounded
queue. A full queue drops its oldest event: subscribers re-read the
stores on every wake-up, so a dropped event only coalesces two refreshes.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class ChangeEvent:
    """One change notification delivered to subscribers."""

    event: str
    topics: tuple[str, ...]
    payload: dict[str, Any] = field(default_factory=dict)


class Subscription:
    """A registered listener on one or more topics."""

    def __init__(self, topics: list[str], queue_size: int) -> None:
        self.topics = tuple(topics)
        self._queue: asyncio.Queue[ChangeEvent] = asyncio.Queue(maxsize=queue_size)
        self.dropped = 0

    def offer(self, change: ChangeEvent) -> None:
        """Queue an event, evicting the oldest one if the queue is full.

        The newest event always lands, so a terminal event such as a
        dissolved match reaches a subscriber that fell behind.
        """
        if self._queue.full():
            stale = self._queue.get_nowait()
            self.dropped += 1
            logger.debug("change_event_dropped", change_event=stale.event, topics=self.topics)
        self._queue.put_nowait(change)

    async def next_event(self, timeout: float | None = None) -> ChangeEvent:
        """Wait for the next event; raises TimeoutError if ``timeout`` elapses."""
        if timeout is None:
            return await self._queue.get()
        return await asyncio.wait_for(self._queue.get(), timeout)

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> ChangeEvent:
        return await self._queue.get()


class ChangeFeed:
    """Topic-keyed publish/subscribe hub (IChangeFeed)."""

    def __init__(self, queue_size: int = 64) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[str, set[Subscription]] = {}

    def publish(
        self,
        topics: list[str],
        event: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        """Deliver an event once to every subscriber of any listed topic."""
        change = ChangeEvent(event=event, topics=tuple(topics), payload=payload or {})
        targets: set[Subscription] = set()
        for topic in topics:
            targets.update(self._subscribers.get(topic, ()))
        for subscription in targets:
            subscription.offer(change)

    @asynccontextmanager
    async def subscribe(self, topics: list[str]) -> AsyncIterator[Subscription]:
        """Register a subscription for the lifetime of the context."""
        subscription = Subscription(topics, self._queue_size)
        for topic in subscription.topics:
            self._subscribers.setdefault(topic, set()).add(subscription)
        try:
            yield subscription
        finally:
            for topic in subscription.topics:
                listeners = self._subscribers.get(topic)
                if listeners is None:
                    continue
                listeners.discard(subscription)
                if not listeners:
                    del self._subscribers[topic]

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, ()))

    @property
    def active_subscriptions(self) -> int:
        """Number of distinct live subscriptions across all topics."""
        live: set[Subscription] = set()
        for listeners in self._subscribers.values():
            live.update(listeners)
        return len(live)
