# src/solo_stage/services/__init__.py
"""Business logic services for the Solo Stage application."""

from .errors import PostNotFoundError
from .likes import LikeToggle
from .pins import PinCoordinator
from .post_ids import PostIdAllocator
from .posts import PostService
from .rate_limit import RateLimiter
from .sessions import AccessGate, SessionStore

__all__ = [
    "AccessGate",
    "LikeToggle",
    "PinCoordinator",
    "PostIdAllocator",
    "PostNotFoundError",
    "PostService",
    "RateLimiter",
    "SessionStore",
]
