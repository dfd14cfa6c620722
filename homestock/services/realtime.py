"""Household change propagation over Redis pub/sub.

Mutating endpoints publish row-level change events to the household's Redis
channel. Every API process runs one pattern subscription and fans events out
to the WebSocket clients it holds through a ``SubscriberRegistry``.

Delivery is best-effort: events are not persisted, so a client that drops
or falls behind must refetch on reconnect.
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Iterable
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Any

import redis
import redis.asyncio as aioredis

from homestock.config import get_settings

if TYPE_CHECKING:
    from redis.asyncio.client import PubSub

logger = logging.getLogger(__name__)
settings = get_settings()

CHANNEL_PREFIX = "household:"


class ChangeTable(StrEnum):
    """Tables whose changes are pushed to subscribers."""

    CONSUMABLES = "consumables"
    NON_CONSUMABLES = "non_consumables"
    ACTIVITY_LOG = "activity_log"
    SHOPPING_LIST_ITEMS = "shopping_list_items"


class ChangeEvent(StrEnum):
    """Row-level change kinds."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


def household_channel(household_id: int) -> str:
    return f"{CHANNEL_PREFIX}{household_id}"


# Synchronous Redis client for publishing from API endpoints and tasks
_sync_redis: redis.Redis | None = None


def get_sync_redis() -> redis.Redis:
    """Get synchronous Redis client for publishing."""
    global _sync_redis
    if _sync_redis is None:
        _sync_redis = redis.from_url(settings.redis_url)
    return _sync_redis


def build_change_message(
    household_id: int, table: ChangeTable, event: ChangeEvent, record: dict[str, Any]
) -> dict[str, Any]:
    return {
        "type": "change",
        "household_id": household_id,
        "table": str(table),
        "event": str(event),
        "record": record,
        "timestamp": datetime.now(UTC).isoformat(),
    }


def publish_household_event(
    household_id: int,
    table: ChangeTable,
    event: ChangeEvent,
    record: dict[str, Any],
) -> None:
    """Publish a change event to a household's channel.

    Called after the write has been committed. Failures are logged and never
    reach the caller; subscribers detect staleness on reconnect.
    """
    try:
        message = build_change_message(household_id, table, event, record)
        get_sync_redis().publish(household_channel(household_id), json.dumps(message))
        logger.debug(f"Published {event} on {table} to household {household_id}")
    except redis.RedisError as e:
        logger.error(f"Failed to publish household event: {e}")


class Subscription:
    """One connected client's view of a household channel.

    Events are buffered in a bounded queue. A subscriber that lets the queue
    fill up is marked stale and closed instead of slowing down delivery to
    everyone else.
    """

    def __init__(
        self, household_id: int, tables: Iterable[str] | None = None, maxsize: int = 100
    ) -> None:
        self.household_id = household_id
        self.tables = frozenset(tables) if tables else None
        self.stale = False
        self.closed = False
        self._queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue(maxsize=maxsize)

    def wants(self, message: dict[str, Any]) -> bool:
        if self.tables is None or message.get("type") != "change":
            return True
        return message.get("table") in self.tables

    def offer(self, message: dict[str, Any]) -> bool:
        """Queue a message without waiting. Returns False if it was not queued."""
        if self.closed or not self.wants(message):
            return False
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            logger.warning(f"Subscriber on household {self.household_id} fell behind, dropping")
            self.close(stale=True)
            return False
        return True

    def close(self, stale: bool = False) -> None:
        if self.closed:
            return
        self.closed = True
        self.stale = self.stale or stale
        # Make room for the end marker; pending events are useless once stale
        while self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(None)

    async def messages(self) -> AsyncIterator[dict[str, Any]]:
        """Yield queued messages until the subscription is closed."""
        while True:
            message = await self._queue.get()
            if message is None:
                return
            yield message


class SubscriberRegistry:
    """Per-household set of live subscriptions held by this process."""

    def __init__(self, queue_size: int = 100) -> None:
        self._queue_size = queue_size
        self._channels: dict[int, set[Subscription]] = {}
        self._lock = asyncio.Lock()

    async def subscribe(
        self, household_id: int, tables: Iterable[str] | None = None
    ) -> Subscription:
        subscription = Subscription(household_id, tables, maxsize=self._queue_size)
        async with self._lock:
            self._channels.setdefault(household_id, set()).add(subscription)
        return subscription

    async def unsubscribe(self, subscription: Subscription) -> None:
        subscription.close()
        async with self._lock:
            subscribers = self._channels.get(subscription.household_id)
            if subscribers is None:
                return
            subscribers.discard(subscription)
            if not subscribers:
                del self._channels[subscription.household_id]

    def deliver(self, household_id: int, message: dict[str, Any]) -> int:
        """Fan a message out to every subscriber of the household.

        Never awaits, so one slow subscriber cannot hold up the others.
        Returns the number of subscribers that accepted the message.
        """
        delivered = 0
        for subscription in tuple(self._channels.get(household_id, ())):
            if subscription.offer(message):
                delivered += 1
        return delivered

    async def close_all(self, stale: bool = False) -> None:
        async with self._lock:
            subscriptions = [s for subs in self._channels.values() for s in subs]
            self._channels.clear()
        for subscription in subscriptions:
            subscription.close(stale=stale)

    def subscriber_count(self, household_id: int | None = None) -> int:
        if household_id is not None:
            return len(self._channels.get(household_id, ()))
        return sum(len(subs) for subs in self._channels.values())


class RealtimeService:
    """Bridges the Redis household channels to the local subscriber registry."""

    def __init__(self, registry: SubscriberRegistry | None = None) -> None:
        self.registry = registry or SubscriberRegistry(settings.realtime_queue_size)
        self._redis: aioredis.Redis | None = None
        self._pubsub: PubSub | None = None
        self._listener: asyncio.Task | None = None

    async def _get_redis(self) -> aioredis.Redis:
        if self._redis is None:
            self._redis = aioredis.from_url(settings.redis_url)
        return self._redis

    async def ensure_listener(self) -> None:
        """Start the Redis pattern subscription if it is not running."""
        if self._listener is not None and not self._listener.done():
            return
        redis_conn = await self._get_redis()
        self._pubsub = redis_conn.pubsub()
        await self._pubsub.psubscribe(f"{CHANNEL_PREFIX}*")
        self._listener = asyncio.create_task(self._listen(self._pubsub))

    async def _listen(self, pubsub: "PubSub") -> None:
        try:
            async for message in pubsub.listen():
                if message["type"] != "pmessage":
                    continue
                self.dispatch(message["data"])
        except (redis.RedisError, OSError) as e:
            logger.error(f"Realtime listener lost Redis connection: {e}")
            # Nothing is replayed, so every client has to resync
            await self.registry.close_all(stale=True)

    def dispatch(self, raw: bytes | str) -> int:
        """Decode one pub/sub payload and hand it to local subscribers."""
        try:
            data = json.loads(raw)
            household_id = int(data["household_id"])
        except (json.JSONDecodeError, KeyError, TypeError, ValueError):
            logger.warning(f"Invalid realtime payload: {raw!r}")
            return 0
        return self.registry.deliver(household_id, data)

    async def subscribe(
        self, household_id: int, tables: Iterable[str] | None = None
    ) -> Subscription:
        await self.ensure_listener()
        return await self.registry.subscribe(household_id, tables)

    async def unsubscribe(self, subscription: Subscription) -> None:
        await self.registry.unsubscribe(subscription)

    async def cleanup(self) -> None:
        """Stop the listener and close Redis connections."""
        await self.registry.close_all()
        if self._listener is not None:
            self._listener.cancel()
            try:
                await self._listener
            except asyncio.CancelledError:
                pass
            self._listener = None
        if self._pubsub:
            await self._pubsub.close()
            self._pubsub = None
        if self._redis:
            await self._redis.close()
            self._redis = None
