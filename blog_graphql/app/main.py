"""Process entry point: build collaborators, compose the server, listen."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from blog_graphql.app.api.resolvers import resolvers
from blog_graphql.app.config import Settings, get_settings
from blog_graphql.app.context import Collaborators, ContextFactory
from blog_graphql.app.db.database import Database
from blog_graphql.app.db.engine import create_async_engine_from_settings, create_session_factory
from blog_graphql.app.errors import BootstrapError
from blog_graphql.app.pubsub import create_pubsub
from blog_graphql.app.server import GraphQLServer, ListenConfig
from blog_graphql.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def build_collaborators(settings: Settings) -> Collaborators:
    """Create the shared persistence handle, event bus and ORM client.

    Nothing connects yet; engines and Redis clients connect lazily.

    Raises:
        ConfigurationError: If DATABASE_URL is unset
    """
    engine = create_async_engine_from_settings(settings)
    return Collaborators(
        db=Database(engine),
        pubsub=create_pubsub(settings),
        orm=create_session_factory(engine),
    )


def create_server(settings: Settings, collaborators: Collaborators) -> GraphQLServer:
    """Compose the GraphQL server around already-built collaborators.

    The collaborators are released when the application shuts down.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            if settings.db_create_all:
                await collaborators.db.create_all()
            yield
        finally:
            await collaborators.aclose()

    return GraphQLServer(
        settings.schema_path,
        resolvers,
        ContextFactory.from_collaborators(collaborators),
        graphql_path=settings.graphql_path,
        debug=settings.debug,
        lifespan=lifespan,
    )


def main() -> int:
    """Run the server.

    Returns:
        0 on normal shutdown, 1 on a startup failure
    """
    try:
        settings = get_settings()
    except ValidationError as e:
        configure_logging()
        logger.error("Invalid configuration: %s", e)
        return 1

    configure_logging(settings.log_level)

    collaborators: Collaborators | None = None
    try:
        collaborators = build_collaborators(settings)
        server = create_server(settings, collaborators)
        handle = server.start(ListenConfig.from_settings(settings))
    except BootstrapError as e:
        logger.error("Startup failed: %s", e)
        if collaborators is not None:
            asyncio.run(collaborators.aclose())
        return 1

    handle.run()
    if not handle.server.started:
        logger.error("Startup failed: application startup did not complete")
        return 1

    logger.info("Server stopped")
    return 0
