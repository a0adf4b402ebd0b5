# src/solo_stage/api/__init__.py
"""HTTP API endpoints."""

from .endpoints import (
    auth_router,
    images_router,
    likes_router,
    posts_router,
    tags_router,
    uploads_router,
)

__all__ = [
    "auth_router",
    "images_router",
    "likes_router",
    "posts_router",
    "tags_router",
    "uploads_router",
]
