"""Change feed shared by every worker through Postgres LISTEN/NOTIFY.

A write lands on whichever worker served the request, while the
WebSocket watching it may sit on another. Each worker publishes with
``pg_notify`` and listens on the same channel; notifications, including
its own, fan out to local subscribers through an in-process ChangeFeed.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, AsyncContextManager

import asyncpg
import orjson
import structlog

from infrastructure.realtime.change_feed import ChangeFeed, Subscription

logger = structlog.get_logger()

Connect = Callable[[str], Awaitable[Any]]


class PostgresChangeFeed:
    """IChangeFeed whose events cross process boundaries."""

    def __init__(
        self,
        dsn: str,
        channel: str = "heartline_changes",
        queue_size: int = 64,
        connect: Connect = asyncpg.connect,
    ) -> None:
        self._dsn = dsn
        self._channel = channel
        self._connect = connect
        self._local = ChangeFeed(queue_size=queue_size)
        self._outbox: asyncio.Queue[str] = asyncio.Queue()
        self._listener: Any = None
        self._sender: Any = None
        self._drain_task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._drain_task is not None

    async def start(self) -> None:
        """Open the listen and notify connections and start draining."""
        if self.running:
            return
        self._listener = await self._connect(self._dsn)
        await self._listener.add_listener(self._channel, self._on_notification)
        self._sender = await self._connect(self._dsn)
        self._drain_task = asyncio.create_task(self._drain())
        logger.info("change_feed_listening", channel=self._channel)

    async def stop(self) -> None:
        if self._drain_task is not None:
            self._drain_task.cancel()
            await asyncio.gather(self._drain_task, return_exceptions=True)
            self._drain_task = None
        if self._listener is not None:
            await self._listener.remove_listener(self._channel, self._on_notification)
            await self._listener.close()
            self._listener = None
        if self._sender is not None:
            await self._sender.close()
            self._sender = None
        logger.info("change_feed_stopped", channel=self._channel)

    def publish(
        self,
        topics: list[str],
        event: str,
        payload: dict[str, Any] | None = None,
    ) -> None:
        """Queue an event for every worker; stays local until started."""
        if not self.running:
            self._local.publish(topics, event, payload)
            return
        body = orjson.dumps({"event": event, "topics": topics, "payload": payload or {}})
        self._outbox.put_nowait(body.decode())

    def subscribe(self, topics: list[str]) -> AsyncContextManager[Subscription]:
        return self._local.subscribe(topics)

    def subscriber_count(self, topic: str) -> int:
        return self._local.subscriber_count(topic)

    @property
    def active_subscriptions(self) -> int:
        return self._local.active_subscriptions

    async def _drain(self) -> None:
        while True:
            body = await self._outbox.get()
            try:
                await self._sender.execute("SELECT pg_notify($1, $2)", self._channel, body)
            except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
                # This worker's subscribers still hear about it
                logger.warning(
                    "change_notify_failed",
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                self._deliver(body)

    def _on_notification(self, connection: Any, pid: int, channel: str, body: str) -> None:
        self._deliver(body)

    def _deliver(self, body: str) -> None:
        try:
            message = orjson.loads(body)
            self._local.publish(list(message["topics"]), message["event"], message["payload"])
        except (orjson.JSONDecodeError, KeyError, TypeError) as exc:
            logger.warning("change_notification_malformed", error=str(exc))


@asynccontextmanager
async def running_feed(feed: Any) -> AsyncIterator[None]:
    """Run a shared feed for the lifetime of the context; no-op for local feeds."""
    if not isinstance(feed, PostgresChangeFeed):
        yield
        return
    await feed.start()
    try:
        yield
    finally:
        await feed.stop()
