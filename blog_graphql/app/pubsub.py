"""Publish/subscribe event bus for GraphQL subscriptions.

Two backends share one interface:
- InMemoryPubSub: asyncio queues, for a single server process
- RedisPubSub: Redis channels, for several server processes behind a balancer

Payloads are JSON-compatible dicts so that both backends carry the same data.
"""

import asyncio
import json
import logging
import uuid
from collections.abc import AsyncIterator
from typing import Any, Protocol

import redis.asyncio as aioredis

from blog_graphql.app.config import Settings
from blog_graphql.app.utils.metrics import pubsub_messages_published_total

logger = logging.getLogger(__name__)

POST_TOPIC = "post"

_CLOSED = object()


def comment_topic(post_id: uuid.UUID | str) -> str:
    """Topic carrying comment events for one post."""
    return f"comment {post_id}"


class Subscription(Protocol):
    """Live subscription to one topic."""

    topic: str

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]: ...

    async def __anext__(self) -> dict[str, Any]: ...

    async def aclose(self) -> None: ...


class PubSub(Protocol):
    """Event bus interface consumed by resolvers."""

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        """Deliver payload to every live subscription of topic."""
        ...

    async def subscribe(self, topic: str) -> Subscription:
        """Register a subscription; messages published afterwards are delivered to it."""
        ...

    async def ping(self) -> bool: ...

    async def aclose(self) -> None: ...


class InMemorySubscription:
    """Queue-backed subscription registered with an InMemoryPubSub."""

    def __init__(self, bus: "InMemoryPubSub", topic: str) -> None:
        self.topic = topic
        self._bus = bus
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._closed = False

    def deliver(self, payload: dict[str, Any]) -> None:
        if not self._closed:
            self._queue.put_nowait(payload)

    def __aiter__(self) -> "InMemorySubscription":
        return self

    async def __anext__(self) -> dict[str, Any]:
        if self._closed:
            raise StopAsyncIteration
        payload = await self._queue.get()
        if payload is _CLOSED:
            raise StopAsyncIteration
        return payload

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus._remove(self)
        # Wake a consumer blocked in __anext__
        self._queue.put_nowait(_CLOSED)


class InMemoryPubSub:
    """In-process event bus keyed by topic string."""

    backend = "memory"

    def __init__(self) -> None:
        self._subscriptions: dict[str, set[InMemorySubscription]] = {}

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        subscribers = list(self._subscriptions.get(topic, ()))
        for subscription in subscribers:
            subscription.deliver(payload)

        pubsub_messages_published_total.labels(backend=self.backend).inc()
        logger.debug(
            "Published event on %s",
            topic,
            extra={"structured": {"topic": topic, "subscribers": len(subscribers)}},
        )

    async def subscribe(self, topic: str) -> InMemorySubscription:
        subscription = InMemorySubscription(self, topic)
        self._subscriptions.setdefault(topic, set()).add(subscription)
        return subscription

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscriptions.get(topic, ()))

    def _remove(self, subscription: InMemorySubscription) -> None:
        subscribers = self._subscriptions.get(subscription.topic)
        if subscribers is None:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscriptions[subscription.topic]

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        for subscribers in list(self._subscriptions.values()):
            for subscription in list(subscribers):
                await subscription.aclose()


class RedisSubscription:
    """Subscription backed by a Redis PubSub connection."""

    def __init__(self, pubsub: aioredis.client.PubSub, topic: str) -> None:
        self.topic = topic
        self._pubsub = pubsub
        self._closed = False

    def __aiter__(self) -> "RedisSubscription":
        return self

    async def __anext__(self) -> dict[str, Any]:
        while not self._closed:
            message = await self._pubsub.get_message(ignore_subscribe_messages=True, timeout=None)
            if message is not None and message["type"] == "message":
                return json.loads(message["data"])
        raise StopAsyncIteration

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._pubsub.unsubscribe(self.topic)
        await self._pubsub.aclose()


class RedisPubSub:
    """Event bus over Redis channels, one channel per topic."""

    backend = "redis"

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisPubSub":
        return cls(aioredis.from_url(url, decode_responses=True))

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        receivers = await self._client.publish(topic, json.dumps(payload))
        pubsub_messages_published_total.labels(backend=self.backend).inc()
        logger.debug(
            "Published event on %s",
            topic,
            extra={"structured": {"topic": topic, "subscribers": receivers}},
        )

    async def subscribe(self, topic: str) -> RedisSubscription:
        pubsub = self._client.pubsub()
        await pubsub.subscribe(topic)
        return RedisSubscription(pubsub, topic)

    async def ping(self) -> bool:
        return bool(await self._client.ping())

    async def aclose(self) -> None:
        await self._client.aclose()


def create_pubsub(settings: Settings) -> InMemoryPubSub | RedisPubSub:
    """Create the event bus selected by settings.

    Redis when REDIS_URL is set, in-process otherwise.
    """
    if settings.redis_url:
        logger.info("Using Redis event bus")
        return RedisPubSub.from_url(settings.redis_url)

    logger.info("Using in-memory event bus")
    return InMemoryPubSub()
