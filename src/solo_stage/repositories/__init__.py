"""Data access layer."""

from .like_repo import LikeRepository
from .post_repo import PostRepository

__all__ = ["LikeRepository", "PostRepository"]
