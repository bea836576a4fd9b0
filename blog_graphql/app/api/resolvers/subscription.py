"""Subscription sources and resolvers backed by the event bus.

Sources subscribe before returning, so events published after the
subscription is accepted are never missed. The returned Subscription is
the event stream itself; closing the stream unregisters it from the bus.
"""

from typing import Any

from ariadne import SubscriptionType
from graphql import GraphQLError, GraphQLResolveInfo

from blog_graphql.app.api.resolvers.common import parse_id
from blog_graphql.app.db import repositories
from blog_graphql.app.pubsub import POST_TOPIC, Subscription, comment_topic

subscription = SubscriptionType()


@subscription.source("comment")
async def comment_source(_: Any, info: GraphQLResolveInfo, post_id: str) -> Subscription:
    """Comment events for one published post."""
    parsed = parse_id(post_id, "postId")
    async with info.context.orm() as session:
        post = await repositories.get_post(session, parsed)
    if post is None or not post.published:
        raise GraphQLError("Post not found")

    return await info.context.pubsub.subscribe(comment_topic(parsed))


@subscription.source("post")
async def post_source(_: Any, info: GraphQLResolveInfo) -> Subscription:
    return await info.context.pubsub.subscribe(POST_TOPIC)


@subscription.field("comment")
@subscription.field("post")
def resolve_event(event: dict[str, Any], *_: Any, **__: Any) -> dict[str, Any]:
    return event
