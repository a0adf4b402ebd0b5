"""Service-level helpers for creating, editing and reading posts."""
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solo_stage.models import Post
from solo_stage.repositories import LikeRepository, PostRepository
from solo_stage.repositories.post_repo import PostFields, TagCount
from solo_stage.schemas.post import PostOut, PostWrite
from solo_stage.services.errors import PostNotFoundError
from solo_stage.services.pins import PinCoordinator
from solo_stage.services.post_ids import (
    PostIdAllocator,
    PostIdCollisionError,
    build_post_id_allocator,
)

logger = logging.getLogger(__name__)


def post_url(post_id: str) -> str:
    """Return the public path of a post page."""
    return f"/post/{post_id}"


def _fields(data: PostWrite) -> PostFields:
    return PostFields(
        content=data.content,
        image_url=data.image_url or None,
        image_sensitive=bool(data.image_sensitive),
    )


class PostService:
    """Post CRUD composed from the repository, allocator and pin coordinator.

    Each write runs in one transaction: the post row and its tag links commit
    together, and a requested pin is applied before that commit.
    """

    def __init__(self, session: Session, allocator: PostIdAllocator | None = None) -> None:
        self.session = session
        self.posts = PostRepository(session)
        self.likes = LikeRepository(session)
        self.pins = PinCoordinator(session)
        self.allocator = allocator or build_post_id_allocator(self.posts)

    # --- Reads --------------------------------------------------------------------------
    def to_post_out(self, post: Post) -> PostOut:
        """Convert a Post ORM instance to an API schema with tags and likes."""
        return PostOut(
            id=post.id,
            content=post.content,
            image_url=post.image_url,
            image_sensitive=bool(post.image_sensitive),
            is_pinned=bool(post.is_pinned),
            created_at=post.created_at,
            updated_at=post.updated_at,
            tags=[link.tag.name for link in post.tag_links],
            likes=self.likes.count(post.id),
        )

    def get(self, post_id: str) -> PostOut:
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        return self.to_post_out(post)

    def list(
        self,
        *,
        tag: str | None = None,
        pinned_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[PostOut]:
        rows = self.posts.list_posts(tag=tag, pinned_only=pinned_only, limit=limit, offset=offset)
        return [self.to_post_out(post) for post in rows]

    def tags(self) -> list[TagCount]:
        return self.posts.tag_counts()

    # --- Writes -------------------------------------------------------------------------
    def _insert(self, post_id: str, data: PostWrite) -> Post:
        try:
            post = self.posts.add(post_id, _fields(data), data.tags)
            if data.is_pinned:
                self.pins.apply(post_id, True)
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if self.posts.exists(post_id):
                raise PostIdCollisionError(post_id) from exc
            raise
        return post

    async def create(self, data: PostWrite) -> Post:
        """Create a post with a freshly allocated identifier."""
        post = await self.allocator.insert_with_unique_id(lambda post_id: self._insert(post_id, data))
        logger.info("Created post %s with %d tag(s)", post.id, len(data.tags))
        return post

    def update(self, post_id: str, data: PostWrite) -> Post:
        """Replace a post's fields, tag set and pin state.

        Raises:
            PostNotFoundError: If the post does not exist.
        """
        post = self.posts.get_by_id(post_id)
        if post is None:
            raise PostNotFoundError(post_id)
        try:
            self.posts.update_fields(post, _fields(data))
            self.posts.replace_tags(post, data.tags)
            if data.is_pinned != bool(post.is_pinned):
                self.pins.apply(post_id, data.is_pinned)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return post

    def delete(self, post_id: str) -> None:
        """Delete a post together with its tag links and likes.

        Raises:
            PostNotFoundError: If the post does not exist.
        """
        if not self.posts.delete(post_id):
            raise PostNotFoundError(post_id)
        self.session.commit()
        logger.info("Deleted post %s", post_id)
