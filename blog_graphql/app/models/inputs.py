"""Validated mutation inputs."""

from pydantic import BaseModel, Field, field_validator


class CreateUserInput(BaseModel):
    """Input for createUser."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        local, _, domain = value.partition("@")
        if not local or not domain:
            raise ValueError("email must contain '@'")
        return value


class CreatePostInput(BaseModel):
    """Input for createPost."""

    title: str = Field(..., min_length=1, max_length=300)
    body: str
    published: bool


class CreateCommentInput(BaseModel):
    """Input for createComment."""

    text: str = Field(..., min_length=1)
    post_id: str
