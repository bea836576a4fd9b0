"""Subscription event payloads published on the event bus."""

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

MutationType = Literal["CREATED", "UPDATED", "DELETED"]


class PostRecord(BaseModel):
    """Post fields carried in an event."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    body: str
    published: bool
    author_id: UUID


class CommentRecord(BaseModel):
    """Comment fields carried in an event."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    text: str
    author_id: UUID
    post_id: UUID


class MutationEvent(BaseModel):
    """Event published after a mutation.

    Dumped to a JSON-compatible dict so any bus backend can carry it.
    """

    mutation: MutationType
    data: PostRecord | CommentRecord

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
