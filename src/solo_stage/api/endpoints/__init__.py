# src/solo_stage/api/endpoints/__init__.py
"""API endpoint modules."""

from .auth import router as auth_router
from .likes import router as likes_router
from .posts import router as posts_router
from .tags import router as tags_router
from .uploads import images_router, router as uploads_router

__all__ = [
    "auth_router",
    "images_router",
    "likes_router",
    "posts_router",
    "tags_router",
    "uploads_router",
]
