"""GraphQL server bootstrap.

Binds a schema source, a resolver map and a context factory into an ASGI
application, then listens on a TCP port. The bootstrap has two phases,
assembling (constructor) and listening (start); bind failures are fatal.
"""

import asyncio
import logging
import signal
import socket
import threading
from collections.abc import Callable, Generator, Sequence
from contextlib import AbstractAsyncContextManager, contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import uvicorn
from ariadne.asgi import GraphQL
from ariadne.asgi.handlers import GraphQLWSHandler
from ariadne.types import SchemaBindable
from fastapi import FastAPI, Request, Response, WebSocket

from blog_graphql.app.api.routes.ops import router as ops_router
from blog_graphql.app.config import DEFAULT_PORT, Settings
from blog_graphql.app.context import ContextFactory
from blog_graphql.app.errors import PortBindError
from blog_graphql.app.schema import build_schema

logger = logging.getLogger(__name__)

API_TITLE = "Blog GraphQL API"
API_VERSION = "0.1.0"

# Listen backlog, same default as uvicorn
BACKLOG = 2048

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[None]]


@dataclass(frozen=True)
class ListenConfig:
    """Where the server listens."""

    port: int = DEFAULT_PORT
    host: str = "0.0.0.0"

    @classmethod
    def from_settings(cls, settings: Settings) -> "ListenConfig":
        return cls(port=settings.port, host=settings.host)


def bind_socket(host: str, port: int, backlog: int = BACKLOG) -> socket.socket:
    """Bind and listen on (host, port).

    The socket is closed again when binding fails, so nothing is left
    listening.

    Raises:
        PortBindError: If the address is in use, not permitted or unknown
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(backlog)
    except OSError as e:
        sock.close()
        raise PortBindError(host, port, e) from e

    sock.set_inheritable(True)
    return sock


def display_url(host: str, port: int, path: str) -> str:
    if host in ("", "0.0.0.0", "::"):
        host = "localhost"
    elif ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{port}{path}"


class GracefulServer(uvicorn.Server):
    """uvicorn server that treats SIGINT/SIGTERM as a normal shutdown.

    Stock uvicorn re-raises captured signals once serving stops, which kills
    the process before the entry point can return its exit code.
    """

    @contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        # Signal handlers can only be installed from the main thread
        if threading.current_thread() is not threading.main_thread():
            yield
            return

        original_handlers = {
            sig: signal.signal(sig, self.handle_exit) for sig in (signal.SIGINT, signal.SIGTERM)
        }
        try:
            yield
        finally:
            for sig, handler in original_handlers.items():
                signal.signal(sig, handler)


@dataclass
class ListeningHandle:
    """A bound, listening server that has not necessarily started serving yet.

    Attributes:
        host: Host the socket is bound to
        port: Port actually bound (differs from the requested one for port 0)
        url: GraphQL endpoint URL
    """

    host: str
    port: int
    url: str
    socket: socket.socket
    server: uvicorn.Server

    async def serve(self) -> None:
        """Serve requests until shutdown() or a termination signal."""
        try:
            await self.server.serve(sockets=[self.socket])
        finally:
            self.close()

    def run(self) -> None:
        """Blocking variant of serve()."""
        asyncio.run(self.serve())

    def shutdown(self) -> None:
        """Ask a serving server to exit gracefully."""
        self.server.should_exit = True

    def close(self) -> None:
        """Release the listen socket."""
        self.socket.close()


class GraphQLServer:
    """Composes schema, resolvers and request context into a servable app.

    The GraphQL endpoint accepts queries and mutations over HTTP and
    subscriptions over websockets (graphql-ws protocol) on the same path.
    """

    def __init__(
        self,
        type_defs: str | Path,
        resolvers: Sequence[SchemaBindable],
        context: ContextFactory,
        *,
        graphql_path: str = "/graphql",
        debug: bool = False,
        lifespan: Lifespan | None = None,
    ) -> None:
        self.schema = build_schema(type_defs, resolvers)
        self.context = context
        self.graphql_path = graphql_path
        self.graphql = GraphQL(
            self.schema,
            context_value=context,
            websocket_handler=GraphQLWSHandler(),
            debug=debug,
        )
        self.app = self._create_app(lifespan)

    def _create_app(self, lifespan: Lifespan | None) -> FastAPI:
        app = FastAPI(title=API_TITLE, version=API_VERSION, lifespan=lifespan)
        app.state.context = self.context

        app.include_router(ops_router, tags=["ops"])

        @app.api_route(
            self.graphql_path, methods=["GET", "POST", "OPTIONS"], include_in_schema=False
        )
        async def graphql_http(request: Request) -> Response:
            """Queries and mutations; GET serves the GraphQL explorer."""
            return await self.graphql.handle_request(request)

        @app.websocket(self.graphql_path)
        async def graphql_ws(websocket: WebSocket) -> None:
            """Subscriptions over the graphql-ws protocol."""
            await self.graphql.handle_websocket(websocket)

        @app.get("/")
        async def root() -> dict[str, str]:
            """Root endpoint."""
            return {"message": API_TITLE, "version": API_VERSION, "graphql": self.graphql_path}

        return app

    def start(self, config: ListenConfig, **uvicorn_options: Any) -> ListeningHandle:
        """Bind the listen socket and prepare the ASGI server.

        Args:
            config: Host and port to listen on
            **uvicorn_options: Extra uvicorn.Config options

        Returns:
            Handle bound to the resolved port; call serve() or run() on it

        Raises:
            PortBindError: If the port cannot be bound
        """
        sock = bind_socket(config.host, config.port)
        port = sock.getsockname()[1]

        uvicorn_config = uvicorn.Config(self.app, log_config=None, **uvicorn_options)
        server = GracefulServer(uvicorn_config)

        url = display_url(config.host, port, self.graphql_path)
        logger.info(
            "served up: %s",
            url,
            extra={"structured": {"host": config.host, "port": port}},
        )
        return ListeningHandle(host=config.host, port=port, url=url, socket=sock, server=server)
