"""Tag-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class TagOut(BaseModel):
    id: int
    name: str
    count: int

    model_config = ConfigDict(from_attributes=True)


class TagListResponse(BaseModel):
    tags: list[TagOut]
