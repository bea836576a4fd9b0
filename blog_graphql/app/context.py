"""Shared collaborators and the per-request GraphQL context."""

from dataclasses import dataclass, fields
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from blog_graphql.app.db.database import Database
from blog_graphql.app.errors import MissingCollaboratorError
from blog_graphql.app.pubsub import PubSub
from blog_graphql.app.utils.metrics import graphql_context_builds_total


def _require_all(obj: object) -> None:
    for field in fields(obj):  # type: ignore[arg-type]
        if getattr(obj, field.name) is None:
            raise MissingCollaboratorError(field.name)


@dataclass(frozen=True)
class Collaborators:
    """Long-lived references built once at process start.

    Shared by every request; each one is safe for concurrent use on its own.
    """

    db: Database
    pubsub: PubSub
    orm: async_sessionmaker[AsyncSession]

    def __post_init__(self) -> None:
        _require_all(self)

    async def aclose(self) -> None:
        """Release the event bus and database connections."""
        await self.pubsub.aclose()
        await self.db.dispose()


@dataclass(frozen=True)
class RequestContext:
    """Context handed to every resolver of one GraphQL operation.

    Attributes:
        db: Persistence handle for statement-level queries
        pubsub: Event bus for subscription updates
        orm: ORM client; open a session per unit of work
        request: Raw Starlette request (or websocket) for headers
    """

    db: Database
    pubsub: PubSub
    orm: async_sessionmaker[AsyncSession]
    request: Any

    def __post_init__(self) -> None:
        _require_all(self)


class ContextFactory:
    """Builds a RequestContext for each incoming request.

    Collaborators are checked once here, at startup. Building a context does
    no I/O and holds no mutable state, so concurrent requests can share one
    factory.
    """

    def __init__(
        self,
        db: Database | None,
        pubsub: PubSub | None,
        orm: async_sessionmaker[AsyncSession] | None,
    ) -> None:
        if db is None:
            raise MissingCollaboratorError("db")
        if pubsub is None:
            raise MissingCollaboratorError("pubsub")
        if orm is None:
            raise MissingCollaboratorError("orm")

        self.db = db
        self.pubsub = pubsub
        self.orm = orm

    @classmethod
    def from_collaborators(cls, collaborators: Collaborators) -> "ContextFactory":
        return cls(db=collaborators.db, pubsub=collaborators.pubsub, orm=collaborators.orm)

    def build_context(self, request: Any) -> RequestContext:
        """Assemble the context for one request."""
        graphql_context_builds_total.inc()
        return RequestContext(db=self.db, pubsub=self.pubsub, orm=self.orm, request=request)

    def __call__(self, request: Any, data: Any = None) -> RequestContext:
        # Ariadne calls context_value(request, data); data is unused
        return self.build_context(request)
