"""Unit tests for the event bus."""

import asyncio
import json
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from blog_graphql.app.config import Settings
from blog_graphql.app.pubsub import (
    POST_TOPIC,
    InMemoryPubSub,
    RedisPubSub,
    comment_topic,
    create_pubsub,
)


def test_comment_topic_is_keyed_by_post() -> None:
    post_id = uuid.UUID("00000000-0000-0000-0000-0000000000aa")

    assert comment_topic(post_id) == "comment 00000000-0000-0000-0000-0000000000aa"
    assert comment_topic(str(post_id)) == comment_topic(post_id)


@pytest.mark.asyncio
async def test_subscriber_receives_published_payload() -> None:
    bus = InMemoryPubSub()
    subscription = await bus.subscribe(POST_TOPIC)

    await bus.publish(POST_TOPIC, {"mutation": "CREATED", "data": {"id": "1"}})

    events = aiter(subscription)
    assert await asyncio.wait_for(anext(events), timeout=1) == {
        "mutation": "CREATED",
        "data": {"id": "1"},
    }


@pytest.mark.asyncio
async def test_topics_are_isolated() -> None:
    bus = InMemoryPubSub()
    first = await bus.subscribe(comment_topic("a"))
    second = await bus.subscribe(comment_topic("b"))

    await bus.publish(comment_topic("a"), {"n": 1})

    assert await asyncio.wait_for(anext(aiter(first)), timeout=1) == {"n": 1}
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(anext(aiter(second)), timeout=0.05)


@pytest.mark.asyncio
async def test_every_subscriber_of_a_topic_gets_each_message() -> None:
    bus = InMemoryPubSub()
    subscriptions = [await bus.subscribe(POST_TOPIC) for _ in range(3)]

    await bus.publish(POST_TOPIC, {"n": 1})
    await bus.publish(POST_TOPIC, {"n": 2})

    for subscription in subscriptions:
        events = aiter(subscription)
        assert await anext(events) == {"n": 1}
        assert await anext(events) == {"n": 2}


@pytest.mark.asyncio
async def test_publish_without_subscribers_is_noop() -> None:
    bus = InMemoryPubSub()

    await bus.publish(POST_TOPIC, {"n": 1})

    assert bus.subscriber_count(POST_TOPIC) == 0


@pytest.mark.asyncio
async def test_closed_subscription_is_unregistered() -> None:
    bus = InMemoryPubSub()
    subscription = await bus.subscribe(POST_TOPIC)
    assert bus.subscriber_count(POST_TOPIC) == 1

    await subscription.aclose()
    await subscription.aclose()

    assert bus.subscriber_count(POST_TOPIC) == 0


@pytest.mark.asyncio
async def test_bus_close_releases_all_subscriptions() -> None:
    bus = InMemoryPubSub()
    await bus.subscribe(POST_TOPIC)
    await bus.subscribe(comment_topic("a"))

    await bus.aclose()

    assert bus.subscriber_count(POST_TOPIC) == 0
    assert bus.subscriber_count(comment_topic("a")) == 0


@pytest.mark.asyncio
async def test_in_memory_ping() -> None:
    assert await InMemoryPubSub().ping() is True


@pytest.mark.asyncio
async def test_redis_publish_encodes_json() -> None:
    client = MagicMock()
    client.publish = AsyncMock(return_value=2)
    bus = RedisPubSub(client)

    await bus.publish(POST_TOPIC, {"mutation": "DELETED", "data": {"id": "x"}})

    channel, message = client.publish.call_args.args
    assert channel == POST_TOPIC
    assert json.loads(message) == {"mutation": "DELETED", "data": {"id": "x"}}


@pytest.mark.asyncio
async def test_redis_subscription_decodes_messages_and_skips_control() -> None:
    redis_pubsub = MagicMock()
    redis_pubsub.get_message = AsyncMock(
        side_effect=[None, {"type": "message", "data": json.dumps({"n": 1})}]
    )
    redis_pubsub.subscribe = AsyncMock()
    redis_pubsub.unsubscribe = AsyncMock()
    redis_pubsub.aclose = AsyncMock()
    client = MagicMock()
    client.pubsub.return_value = redis_pubsub

    subscription = await RedisPubSub(client).subscribe(POST_TOPIC)
    redis_pubsub.subscribe.assert_awaited_once_with(POST_TOPIC)

    assert await anext(subscription) == {"n": 1}
    redis_pubsub.get_message.assert_awaited_with(ignore_subscribe_messages=True, timeout=None)

    await subscription.aclose()
    redis_pubsub.unsubscribe.assert_awaited_once_with(POST_TOPIC)
    redis_pubsub.aclose.assert_awaited_once()


def test_create_pubsub_in_memory_without_redis_url() -> None:
    settings = Settings(_env_file=None, redis_url=None)

    assert isinstance(create_pubsub(settings), InMemoryPubSub)


def test_create_pubsub_redis_when_configured() -> None:
    settings = Settings(_env_file=None, redis_url="redis://localhost:6379/0")

    assert isinstance(create_pubsub(settings), RedisPubSub)


@pytest.mark.asyncio
async def test_close_ends_pending_iteration() -> None:
    bus = InMemoryPubSub()
    subscription = await bus.subscribe(POST_TOPIC)
    pending = asyncio.ensure_future(anext(subscription))
    await asyncio.sleep(0)

    await subscription.aclose()

    with pytest.raises(StopAsyncIteration):
        await asyncio.wait_for(pending, timeout=1)


@pytest.mark.asyncio
async def test_closed_subscription_ignores_later_events() -> None:
    bus = InMemoryPubSub()
    subscription = await bus.subscribe(POST_TOPIC)
    await subscription.aclose()

    await bus.publish(POST_TOPIC, {"n": 1})

    with pytest.raises(StopAsyncIteration):
        await anext(subscription)
