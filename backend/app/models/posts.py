"""Pydantic models for post requests and responses."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Fields a caller may change through an update request.
MUTABLE_FIELDS = ("title", "content")


def strip_text(v: str | None) -> str | None:
    """Trim surrounding whitespace from a title; non-strings pass through."""
    if isinstance(v, str):
        return v.strip()
    return v


class PostCreate(BaseModel):
    """Complete payload for a new post."""

    id: str | None = Field(default=None, max_length=36)
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    user_id: int = Field(..., ge=1)

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return strip_text(v)


class PostUpdate(BaseModel):
    """Partial update; unknown keys are dropped rather than rejected."""

    model_config = ConfigDict(extra="ignore")

    title: str | None = Field(default=None, max_length=200)
    content: str | None = None

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: str | None) -> str | None:
        return strip_text(v)

    def recognized_fields(self) -> dict[str, str]:
        """Return the mutable fields that carry a non-blank value.

        An empty result means there is nothing to update.
        """
        values = self.model_dump(include=set(MUTABLE_FIELDS), exclude_none=True)
        return {
            name: value
            for name, value in values.items()
            if isinstance(value, str) and value.strip()
        }


class Post(BaseModel):
    """Post as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    user_id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class MessageResponse(BaseModel):
    """Confirmation envelope for mutating operations."""

    message: str
