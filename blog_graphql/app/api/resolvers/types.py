"""Object type resolvers.

Sources are ORM rows for queries and mutations, or JSON payload dicts for
subscription events; fields are read through get_field so both work.
"""

from typing import Any

from ariadne import ObjectType
from graphql import GraphQLResolveInfo

from blog_graphql.app.api.auth import get_user_id
from blog_graphql.app.api.resolvers.common import get_field, parse_id
from blog_graphql.app.db import repositories
from blog_graphql.app.db.models import Comment, Post, User

user_type = ObjectType("User")
post_type = ObjectType("Post")
comment_type = ObjectType("Comment")


def resolve_id(obj: Any, _: GraphQLResolveInfo) -> str:
    return str(get_field(obj, "id"))


for object_type in (user_type, post_type, comment_type):
    object_type.set_field("id", resolve_id)


@user_type.field("email")
def resolve_user_email(obj: Any, info: GraphQLResolveInfo) -> str | None:
    """Email is only visible to the user it belongs to."""
    user_id = get_user_id(info.context.request, required=False)
    if user_id is not None and user_id == parse_id(get_field(obj, "id")):
        return get_field(obj, "email")
    return None


@user_type.field("posts")
async def resolve_user_posts(obj: Any, info: GraphQLResolveInfo) -> list[Post]:
    async with info.context.orm() as session:
        return await repositories.list_posts(session, author_id=parse_id(get_field(obj, "id")))


@user_type.field("comments")
async def resolve_user_comments(obj: Any, info: GraphQLResolveInfo) -> list[Comment]:
    async with info.context.orm() as session:
        return await repositories.list_comments(session, author_id=parse_id(get_field(obj, "id")))


@post_type.field("author")
@comment_type.field("author")
async def resolve_author(obj: Any, info: GraphQLResolveInfo) -> User | None:
    async with info.context.orm() as session:
        return await repositories.get_user(session, parse_id(get_field(obj, "author_id")))


@post_type.field("comments")
async def resolve_post_comments(obj: Any, info: GraphQLResolveInfo) -> list[Comment]:
    async with info.context.orm() as session:
        return await repositories.list_comments(session, post_id=parse_id(get_field(obj, "id")))


@comment_type.field("post")
async def resolve_comment_post(obj: Any, info: GraphQLResolveInfo) -> Post | None:
    async with info.context.orm() as session:
        return await repositories.get_post(session, parse_id(get_field(obj, "post_id")))
