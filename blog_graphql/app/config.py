"""Typed settings configuration - single source of truth."""

from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from blog_graphql.app.errors import InvalidPortError

PORT_ENV_VAR = "PORT"

# Local development port; hosting platforms inject PORT instead
DEFAULT_PORT = 4001

DEFAULT_SCHEMA_PATH = Path(__file__).parent / "api" / "schema.graphql"


def resolve_port(env: Mapping[str, str | None]) -> int:
    """Resolve the listen port from an environment mapping.

    Uses PORT when present and non-empty, otherwise DEFAULT_PORT.
    Port 0 is accepted and lets the OS choose a free port.

    Args:
        env: Environment mapping (e.g. os.environ)

    Returns:
        Port number

    Raises:
        InvalidPortError: If PORT is not an integer in 0..65535
    """
    raw = env.get(PORT_ENV_VAR)
    if raw is None or not str(raw).strip():
        return DEFAULT_PORT

    try:
        port = int(str(raw).strip())
    except ValueError as e:
        raise InvalidPortError(f"{PORT_ENV_VAR} must be an integer, got {raw!r}") from e

    if not 0 <= port <= 65535:
        raise InvalidPortError(f"{PORT_ENV_VAR} must be between 0 and 65535, got {port}")

    return port


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Listener
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)

    # Database
    database_url: str | None = None
    db_create_all: bool = False

    # Event bus (in-process when unset)
    redis_url: str | None = None

    # GraphQL
    schema_path: Path = DEFAULT_SCHEMA_PATH
    graphql_path: str = "/graphql"
    debug: bool = False

    # Logging
    log_level: str = "INFO"

    @field_validator("port", mode="before")
    @classmethod
    def _resolve_port(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return resolve_port({PORT_ENV_VAR: value})
        return value

    @field_validator("graphql_path")
    @classmethod
    def _normalize_graphql_path(cls, value: str) -> str:
        return "/" + value.strip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
