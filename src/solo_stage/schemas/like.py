"""Like-related Pydantic schemas."""

from pydantic import BaseModel


class LikeState(BaseModel):
    """Like count for a post and whether the caller has liked it."""

    likes: int
    liked: bool


class LikeToggleResponse(LikeState):
    success: bool = True
