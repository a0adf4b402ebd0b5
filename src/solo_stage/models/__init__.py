# src/solo_stage/models/__init__.py
"""SQLAlchemy models for the Solo Stage application."""

from .like import Like
from .post import Post
from .tag import PostTag, Tag

__all__ = [
    "Like",
    "Post",
    "PostTag",
    "Tag",
]
