"""Persistence handle over the async engine for raw queries."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Executable, text
from sqlalchemy.ext.asyncio import AsyncEngine

from blog_graphql.app.db.models import Base


class Database:
    """Shared handle for statement-level access to the database.

    Safe to share between concurrent requests: every call checks out its own
    connection from the engine pool.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine

    async def ping(self) -> bool:
        """Run ``SELECT 1`` against the database."""
        return await self.scalar(text("SELECT 1")) == 1

    async def scalar(self, statement: Executable, params: Mapping[str, Any] | None = None) -> Any:
        """Execute a statement and return the first column of the first row."""
        async with self.engine.connect() as conn:
            result = await conn.execute(statement, dict(params or {}))
            return result.scalar()

    async def create_all(self) -> None:
        """Create all tables that do not exist yet."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()
