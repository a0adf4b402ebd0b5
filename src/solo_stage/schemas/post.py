# src/solo_stage/schemas/post.py
"""Post-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

MAX_TAGS = 32


class PostWrite(BaseModel):
    """Fields accepted when creating or replacing a post."""

    content: str = Field(..., min_length=1, description="Markdown body")
    image_url: str | None = Field(None, description="Reference to an uploaded image")
    image_sensitive: bool = Field(False, description="Hide the image behind a warning")
    tags: list[str] = Field(default_factory=list, max_length=MAX_TAGS)
    is_pinned: bool = False

    @field_validator("content")
    @classmethod
    def _content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content is required")
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _none_means_no_tags(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        seen: dict[str, None] = {}
        for raw in value:
            name = raw.strip()
            if name:
                seen.setdefault(name, None)
        return list(seen)


class PostCreate(PostWrite):
    """Schema for creating a new post."""


class PostUpdate(PostWrite):
    """Schema for replacing a post's fields and tag set."""


class PinUpdate(BaseModel):
    """Body of the pin toggle endpoint."""

    is_pinned: StrictBool


class PostOut(BaseModel):
    """Schema for post information returned by the API."""

    id: str
    content: str
    image_url: str | None
    image_sensitive: bool
    is_pinned: bool
    created_at: datetime
    updated_at: datetime
    tags: list[str]
    likes: int

    model_config = ConfigDict(from_attributes=True)


class PostEnvelope(BaseModel):
    post: PostOut


class PostListResponse(BaseModel):
    posts: list[PostOut]


class PostCreatedInfo(BaseModel):
    id: str
    url: str
    created_at: datetime


class PostCreatedResponse(BaseModel):
    success: bool = True
    post: PostCreatedInfo


class SuccessResponse(BaseModel):
    success: bool = True


class PinResponse(BaseModel):
    success: bool = True
    is_pinned: bool
