"""Query resolvers."""

from typing import Any

from ariadne import QueryType
from graphql import GraphQLResolveInfo
from sqlalchemy import text

from blog_graphql.app.api.auth import get_user_id
from blog_graphql.app.api.resolvers.common import parse_id
from blog_graphql.app.db import repositories
from blog_graphql.app.db.models import Comment, Post, User

query = QueryType()


@query.field("users")
async def resolve_users(_: Any, info: GraphQLResolveInfo, query: str | None = None) -> list[User]:
    async with info.context.orm() as session:
        return await repositories.list_users(session, search=query)


@query.field("posts")
async def resolve_posts(_: Any, info: GraphQLResolveInfo, query: str | None = None) -> list[Post]:
    """Published posts, optionally filtered by title/body text."""
    async with info.context.orm() as session:
        return await repositories.list_posts(session, search=query)


@query.field("post")
async def resolve_post(_: Any, info: GraphQLResolveInfo, id: str) -> Post | None:
    """A single post; drafts are visible to their author only."""
    post_id = parse_id(id)
    user_id = get_user_id(info.context.request, required=False)

    async with info.context.orm() as session:
        post = await repositories.get_post(session, post_id)

    if post is None:
        return None
    if not post.published and post.author_id != user_id:
        return None
    return post


@query.field("comments")
async def resolve_comments(
    _: Any, info: GraphQLResolveInfo, post_id: str | None = None
) -> list[Comment]:
    parsed = parse_id(post_id, "postId") if post_id is not None else None
    async with info.context.orm() as session:
        return await repositories.list_comments(session, post_id=parsed)


@query.field("me")
async def resolve_me(_: Any, info: GraphQLResolveInfo) -> User | None:
    user_id = get_user_id(info.context.request)
    async with info.context.orm() as session:
        return await repositories.get_user(session, user_id)


@query.field("stats")
async def resolve_stats(_: Any, info: GraphQLResolveInfo) -> dict[str, int]:
    """Row counts, read through the persistence handle."""
    db = info.context.db
    return {
        "users": await db.scalar(text("SELECT COUNT(*) FROM users")),
        "posts": await db.scalar(text("SELECT COUNT(*) FROM posts WHERE published")),
        "comments": await db.scalar(text("SELECT COUNT(*) FROM comments")),
    }
