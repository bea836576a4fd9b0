"""Data access for users, posts and comments."""

import uuid

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog_graphql.app.db.models import Comment, Post, User


async def list_users(session: AsyncSession, search: str | None = None) -> list[User]:
    """List users, optionally filtered by a case-insensitive name match."""
    query = select(User).order_by(User.created_at, User.name)
    if search:
        query = query.where(User.name.ilike(f"%{search}%"))

    result = await session.execute(query)
    return list(result.scalars().all())


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, *, name: str, email: str) -> User:
    user = User(id=uuid.uuid4(), name=name, email=email)
    session.add(user)
    await session.commit()
    return user


async def list_posts(
    session: AsyncSession,
    search: str | None = None,
    *,
    author_id: uuid.UUID | None = None,
    published_only: bool = True,
) -> list[Post]:
    """List posts.

    Args:
        session: Database session
        search: Optional case-insensitive match on title or body
        author_id: Restrict to one author's posts
        published_only: Exclude drafts

    Returns:
        Posts ordered oldest first
    """
    query = select(Post).order_by(Post.created_at, Post.title)
    if published_only:
        query = query.where(Post.published.is_(True))
    if author_id is not None:
        query = query.where(Post.author_id == author_id)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Post.title.ilike(pattern), Post.body.ilike(pattern)))

    result = await session.execute(query)
    return list(result.scalars().all())


async def get_post(session: AsyncSession, post_id: uuid.UUID) -> Post | None:
    return await session.get(Post, post_id)


async def create_post(
    session: AsyncSession, *, title: str, body: str, published: bool, author_id: uuid.UUID
) -> Post:
    post = Post(
        id=uuid.uuid4(),
        title=title,
        body=body,
        published=published,
        author_id=author_id,
    )
    session.add(post)
    await session.commit()
    return post


async def delete_post(session: AsyncSession, post: Post) -> None:
    """Delete a post and its comments."""
    await session.execute(delete(Comment).where(Comment.post_id == post.id))
    await session.delete(post)
    await session.commit()


async def list_comments(
    session: AsyncSession,
    *,
    post_id: uuid.UUID | None = None,
    author_id: uuid.UUID | None = None,
) -> list[Comment]:
    query = select(Comment).order_by(Comment.created_at)
    if post_id is not None:
        query = query.where(Comment.post_id == post_id)
    if author_id is not None:
        query = query.where(Comment.author_id == author_id)

    result = await session.execute(query)
    return list(result.scalars().all())


async def get_comment(session: AsyncSession, comment_id: uuid.UUID) -> Comment | None:
    return await session.get(Comment, comment_id)


async def create_comment(
    session: AsyncSession, *, text: str, author_id: uuid.UUID, post_id: uuid.UUID
) -> Comment:
    comment = Comment(id=uuid.uuid4(), text=text, author_id=author_id, post_id=post_id)
    session.add(comment)
    await session.commit()
    return comment


async def delete_comment(session: AsyncSession, comment: Comment) -> None:
    await session.delete(comment)
    await session.commit()
