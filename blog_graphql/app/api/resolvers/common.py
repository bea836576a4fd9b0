"""Helpers shared by resolvers."""

import uuid
from collections.abc import Mapping
from typing import Any, TypeVar

from graphql import GraphQLError
from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_id(value: Any, name: str = "id") -> uuid.UUID:
    """Parse a GraphQL ID into a UUID.

    Raises:
        GraphQLError: If the value is not a valid UUID
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise GraphQLError(f"Invalid {name}: {value!r}") from e


def get_field(obj: Any, name: str) -> Any:
    """Read a field from an ORM row or from an event payload dict."""
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name)


def validate_input(model: type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """Validate mutation input, reporting failures as a GraphQL error."""
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise GraphQLError(f"Invalid input: {problems}") from e
