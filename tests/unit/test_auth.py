"""Unit tests for resolver auth."""

import uuid
from types import SimpleNamespace

import pytest
from graphql import GraphQLError

from blog_graphql.app.api.auth import get_user_id


def request_with(authorization: str | None) -> SimpleNamespace:
    headers = {"authorization": authorization} if authorization is not None else {}
    return SimpleNamespace(headers=headers)


def test_get_user_id_valid_token() -> None:
    user_id = uuid.uuid4()

    assert get_user_id(request_with(f"Bearer {user_id}")) == user_id


def test_get_user_id_missing_header_required() -> None:
    with pytest.raises(GraphQLError, match="Authentication required"):
        get_user_id(request_with(None))


def test_get_user_id_missing_header_optional() -> None:
    assert get_user_id(request_with(None), required=False) is None


def test_get_user_id_invalid_bearer_format() -> None:
    with pytest.raises(GraphQLError, match="Invalid authorization header format"):
        get_user_id(request_with("Token abc"))


def test_get_user_id_invalid_uuid() -> None:
    """A malformed token is an error even when auth is optional."""
    with pytest.raises(GraphQLError, match="expected user ID"):
        get_user_id(request_with("Bearer not-a-uuid"), required=False)
