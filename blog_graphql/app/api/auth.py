"""Minimal auth for resolvers.

Stub implementation that reads the acting user's ID from a bearer token
("Bearer <user_id>") on the raw request carried in the GraphQL context.
"""

import uuid
from typing import Any

from graphql import GraphQLError


def get_user_id(request: Any, required: bool = True) -> uuid.UUID | None:
    """Extract the acting user ID from the Authorization header.

    Works for both HTTP requests and websocket connections.

    Args:
        request: Starlette Request or WebSocket
        required: Raise when no valid header is present

    Returns:
        User ID, or None when not required and absent

    Raises:
        GraphQLError: If authentication is required and missing or invalid
    """
    authorization = request.headers.get("authorization") if request is not None else None

    if not authorization:
        if required:
            raise GraphQLError("Authentication required")
        return None

    if not authorization.startswith("Bearer "):
        raise GraphQLError("Invalid authorization header format")

    token = authorization[7:].strip()  # Strip "Bearer "
    try:
        return uuid.UUID(token)
    except ValueError as e:
        raise GraphQLError("Invalid bearer token (expected user ID)") from e
