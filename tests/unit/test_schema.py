"""Unit tests for schema loading and binding."""

from pathlib import Path

import pytest
from ariadne import QueryType
from graphql import GraphQLError, graphql_sync

from blog_graphql.app.api.resolvers import resolvers
from blog_graphql.app.config import DEFAULT_SCHEMA_PATH
from blog_graphql.app.schema import build_schema, load_type_defs

INLINE_SDL = """
type Query {
  greeting(userName: String!): String!
}
"""


def test_load_type_defs_from_path(tmp_path: Path) -> None:
    schema_file = tmp_path / "schema.graphql"
    schema_file.write_text(INLINE_SDL)

    assert "greeting" in load_type_defs(schema_file)
    assert "greeting" in load_type_defs(str(schema_file))


def test_load_type_defs_from_directory(tmp_path: Path) -> None:
    (tmp_path / "query.graphql").write_text(INLINE_SDL)
    (tmp_path / "extra.graphql").write_text("type Extra { id: ID! }")

    type_defs = load_type_defs(tmp_path)

    assert "greeting" in type_defs
    assert "Extra" in type_defs


def test_load_type_defs_inline_sdl_passthrough() -> None:
    assert load_type_defs(INLINE_SDL) == INLINE_SDL


def test_build_schema_binds_resolvers_with_snake_case_args() -> None:
    query = QueryType()

    @query.field("greeting")
    def resolve_greeting(*_: object, user_name: str) -> str:
        return f"Hello, {user_name}!"

    schema = build_schema(INLINE_SDL, [query])
    result = graphql_sync(schema, '{ greeting(userName: "Ada") }')

    assert result.errors is None
    assert result.data == {"greeting": "Hello, Ada!"}


def test_build_schema_rejects_invalid_sdl() -> None:
    with pytest.raises(GraphQLError):
        build_schema("type Query {", [])


def test_packaged_schema_builds_with_resolver_map() -> None:
    schema = build_schema(DEFAULT_SCHEMA_PATH, resolvers)

    assert schema.query_type is not None
    assert schema.mutation_type is not None
    assert schema.subscription_type is not None
    assert {"User", "Post", "Comment"} <= set(schema.type_map)
