"""Shared pytest fixtures for all test suites."""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from blog_graphql.app.config import Settings
from blog_graphql.app.context import Collaborators, ContextFactory, RequestContext
from blog_graphql.app.main import build_collaborators, create_server


def make_request(user_id: object | None = None) -> SimpleNamespace:
    """Stand-in for a Starlette request carrying an optional bearer token."""
    headers = {"authorization": f"Bearer {user_id}"} if user_id is not None else {}
    return SimpleNamespace(headers=headers)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings backed by a throwaway SQLite file."""
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        redis_url=None,
        db_create_all=True,
        port=0,
        host="127.0.0.1",
    )


@pytest_asyncio.fixture
async def collaborators(settings: Settings) -> AsyncGenerator[Collaborators, None]:
    """Collaborators with tables created, released after the test."""
    collaborators = build_collaborators(settings)
    await collaborators.db.create_all()

    yield collaborators

    await collaborators.aclose()


@pytest.fixture
def context_factory(collaborators: Collaborators) -> ContextFactory:
    return ContextFactory.from_collaborators(collaborators)


@pytest.fixture
def make_context(context_factory: ContextFactory):
    """Build a request context acting as the given user (or anonymous)."""

    def _make(user_id: object | None = None) -> RequestContext:
        return context_factory.build_context(make_request(user_id))

    return _make


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Test client running the full app, lifespan included."""
    server = create_server(settings, build_collaborators(settings))
    with TestClient(server.app) as test_client:
        yield test_client
