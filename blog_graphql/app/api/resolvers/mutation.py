"""Mutation resolvers.

Post and comment mutations act on behalf of the authenticated user and
publish a MutationEvent for subscribers.
"""

import logging
from typing import Any

from ariadne import MutationType
from graphql import GraphQLError, GraphQLResolveInfo

from blog_graphql.app.api.auth import get_user_id
from blog_graphql.app.api.resolvers.common import parse_id, validate_input
from blog_graphql.app.db import repositories
from blog_graphql.app.db.models import Comment, Post, User
from blog_graphql.app.models.events import CommentRecord, MutationEvent, MutationType as Kind, PostRecord
from blog_graphql.app.models.inputs import CreateCommentInput, CreatePostInput, CreateUserInput
from blog_graphql.app.pubsub import POST_TOPIC, comment_topic

logger = logging.getLogger(__name__)

mutation = MutationType()


async def publish_post_event(info: GraphQLResolveInfo, kind: Kind, post: Post) -> None:
    """Notify post subscribers; drafts are never broadcast."""
    if not post.published:
        return
    event = MutationEvent(mutation=kind, data=PostRecord.model_validate(post))
    await info.context.pubsub.publish(POST_TOPIC, event.to_payload())


async def publish_comment_event(info: GraphQLResolveInfo, kind: Kind, comment: Comment) -> None:
    event = MutationEvent(mutation=kind, data=CommentRecord.model_validate(comment))
    await info.context.pubsub.publish(comment_topic(comment.post_id), event.to_payload())


@mutation.field("createUser")
async def resolve_create_user(_: Any, info: GraphQLResolveInfo, data: dict[str, Any]) -> User:
    payload = validate_input(CreateUserInput, data)

    async with info.context.orm() as session:
        if await repositories.get_user_by_email(session, payload.email) is not None:
            raise GraphQLError("Email taken")
        user = await repositories.create_user(session, name=payload.name, email=payload.email)

    logger.info("Created user", extra={"structured": {"user_id": str(user.id)}})
    return user


@mutation.field("createPost")
async def resolve_create_post(_: Any, info: GraphQLResolveInfo, data: dict[str, Any]) -> Post:
    user_id = get_user_id(info.context.request)
    payload = validate_input(CreatePostInput, data)

    async with info.context.orm() as session:
        if await repositories.get_user(session, user_id) is None:
            raise GraphQLError("User not found")
        post = await repositories.create_post(
            session,
            title=payload.title,
            body=payload.body,
            published=payload.published,
            author_id=user_id,
        )

    await publish_post_event(info, "CREATED", post)
    return post


@mutation.field("deletePost")
async def resolve_delete_post(_: Any, info: GraphQLResolveInfo, id: str) -> Post:
    user_id = get_user_id(info.context.request)
    post_id = parse_id(id)

    async with info.context.orm() as session:
        post = await repositories.get_post(session, post_id)
        if post is None or post.author_id != user_id:
            raise GraphQLError("Post not found")
        await repositories.delete_post(session, post)

    await publish_post_event(info, "DELETED", post)
    return post


@mutation.field("createComment")
async def resolve_create_comment(
    _: Any, info: GraphQLResolveInfo, data: dict[str, Any]
) -> Comment:
    user_id = get_user_id(info.context.request)
    payload = validate_input(CreateCommentInput, data)
    post_id = parse_id(payload.post_id, "postId")

    async with info.context.orm() as session:
        if await repositories.get_user(session, user_id) is None:
            raise GraphQLError("User not found")
        post = await repositories.get_post(session, post_id)
        if post is None or not post.published:
            raise GraphQLError("Post not found")
        comment = await repositories.create_comment(
            session, text=payload.text, author_id=user_id, post_id=post_id
        )

    await publish_comment_event(info, "CREATED", comment)
    return comment


@mutation.field("deleteComment")
async def resolve_delete_comment(_: Any, info: GraphQLResolveInfo, id: str) -> Comment:
    user_id = get_user_id(info.context.request)
    comment_id = parse_id(id)

    async with info.context.orm() as session:
        comment = await repositories.get_comment(session, comment_id)
        if comment is None or comment.author_id != user_id:
            raise GraphQLError("Comment not found")
        await repositories.delete_comment(session, comment)

    await publish_comment_event(info, "DELETED", comment)
    return comment
