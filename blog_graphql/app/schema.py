"""Executable schema assembly from a schema source and resolver map."""

import logging
from collections.abc import Sequence
from pathlib import Path

from ariadne import load_schema_from_path, make_executable_schema
from ariadne.types import SchemaBindable
from graphql import GraphQLSchema

logger = logging.getLogger(__name__)


def load_type_defs(source: str | Path) -> str:
    """Load type definitions from a path or inline SDL.

    A Path, or a string naming an existing file or directory, is read with
    ``load_schema_from_path`` (directories are scanned for ``.graphql``
    files). Any other string is returned as inline SDL.
    """
    if isinstance(source, Path):
        return load_schema_from_path(source)

    if "\n" not in source and "{" not in source and Path(source).exists():
        return load_schema_from_path(source)

    return source


def build_schema(source: str | Path, resolvers: Sequence[SchemaBindable]) -> GraphQLSchema:
    """Bind resolvers to the type definitions found at source.

    Field and argument names are converted between camelCase (schema) and
    snake_case (Python).
    """
    type_defs = load_type_defs(source)
    schema = make_executable_schema(type_defs, *resolvers, convert_names_case=True)
    logger.debug("Built executable schema with %d types", len(schema.type_map))
    return schema
