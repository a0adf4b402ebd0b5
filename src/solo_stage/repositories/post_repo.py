"""Data access helpers for working with posts, tags and pins."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from solo_stage.models import Post, PostTag, Tag
from solo_stage.models.post import utc_now

__all__ = ["PostFields", "PostRepository", "TagCount"]


@dataclass(frozen=True)
class PostFields:
    """Mutable post columns written on create and update."""

    content: str
    image_url: str | None = None
    image_sensitive: bool = False


@dataclass(frozen=True)
class TagCount:
    """A tag together with the number of posts carrying it."""

    id: int
    name: str
    count: int


class PostRepository:
    """Thin wrapper around database access for post entities.

    Methods flush but never commit; the service layer owns transaction
    boundaries.
    """

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def exists(self, post_id: str) -> bool:
        """Return True if a post with this identifier is stored."""
        found = self.session.execute(
            select(Post.id).where(Post.id == post_id)
        ).scalar_one_or_none()
        return found is not None

    def get_by_id(self, post_id: str) -> Post | None:
        """Return a post with its tag links loaded."""
        result = self.session.execute(
            select(Post)
            .options(selectinload(Post.tag_links))
            .where(Post.id == post_id)
        )
        return result.scalars().first()

    def list_posts(
        self,
        *,
        tag: str | None = None,
        pinned_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> list[Post]:
        """Return posts pinned-first, then newest-first."""
        stmt = select(Post).options(selectinload(Post.tag_links))
        if tag:
            stmt = (
                stmt.join(PostTag, PostTag.post_id == Post.id)
                .join(Tag, Tag.id == PostTag.tag_id)
                .where(Tag.name == tag)
            )
        if pinned_only:
            stmt = stmt.where(Post.is_pinned.is_(True))
        stmt = (
            stmt.order_by(Post.is_pinned.desc(), Post.created_at.desc(), Post.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(self.session.execute(stmt).scalars())

    def add(self, post_id: str, fields: PostFields, tag_names: Sequence[str]) -> Post:
        """Stage a new unpinned post and its tag links, then flush.

        Raises:
            sqlalchemy.exc.IntegrityError: If the identifier is already taken.
        """
        now = utc_now()
        post = Post(
            id=post_id,
            content=fields.content,
            image_url=fields.image_url,
            image_sensitive=fields.image_sensitive,
            is_pinned=False,
            created_at=now,
            updated_at=now,
        )
        self.session.add(post)
        self.session.flush()
        self._link_tags(post_id, tag_names)
        return post

    def update_fields(self, post: Post, fields: PostFields) -> Post:
        """Overwrite editable columns and bump `updated_at`."""
        post.content = fields.content
        post.image_url = fields.image_url
        post.image_sensitive = fields.image_sensitive
        post.updated_at = utc_now()
        self.session.flush()
        return post

    def replace_tags(self, post: Post, tag_names: Sequence[str]) -> None:
        """Delete every tag link for the post and insert the new set."""
        post.tag_links.clear()
        self.session.flush()
        self._link_tags(post.id, tag_names)
        self.session.expire(post, ["tag_links"])

    def delete(self, post_id: str) -> bool:
        """Delete the post; tag links and likes go with it."""
        post = self.session.get(Post, post_id)
        if post is None:
            return False
        self.session.delete(post)
        self.session.flush()
        return True

    def tag_counts(self) -> list[TagCount]:
        """Return tags in use, most used first, ties broken by name."""
        count = func.count(PostTag.post_id).label("count")
        result = self.session.execute(
            select(Tag.id, Tag.name, count)
            .join(PostTag, PostTag.tag_id == Tag.id)
            .group_by(Tag.id, Tag.name)
            .having(count > 0)
            .order_by(count.desc(), Tag.name.asc())
        )
        return [TagCount(id=row.id, name=row.name, count=int(row.count)) for row in result]

    # --- Pin statements ---------------------------------------------------------------
    def clear_all_pins(self) -> int:
        """Unpin every pinned post; return the number of rows touched."""
        result = self.session.execute(
            update(Post).where(Post.is_pinned.is_(True)).values(is_pinned=False)
        )
        return result.rowcount or 0

    def set_pin_flag(self, post_id: str, pinned: bool) -> int:
        """Set the pinned flag on one post; return the number of rows touched."""
        result = self.session.execute(
            update(Post).where(Post.id == post_id).values(is_pinned=pinned)
        )
        return result.rowcount or 0

    def pinned_ids(self) -> list[str]:
        """Return identifiers of all pinned posts."""
        result = self.session.execute(select(Post.id).where(Post.is_pinned.is_(True)))
        return list(result.scalars())

    # --- Internals ----------------------------------------------------------------------
    def _get_or_create_tag(self, name: str) -> Tag:
        tag = self.session.execute(select(Tag).where(Tag.name == name)).scalar_one_or_none()
        if tag is None:
            tag = Tag(name=name)
            self.session.add(tag)
            self.session.flush()
        return tag

    def _link_tags(self, post_id: str, tag_names: Sequence[str]) -> None:
        for position, name in enumerate(tag_names):
            tag = self._get_or_create_tag(name)
            self.session.add(PostTag(post_id=post_id, tag_id=tag.id, position=position))
        self.session.flush()
