# src/solo_stage/models/tag.py
"""Models for tags and the post/tag association."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from solo_stage.db.session import Base

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .post import Post


class Tag(Base):
    """A tag name; names are unique and compared case-sensitively."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    post_links: Mapped[list[PostTag]] = relationship(
        back_populates="tag",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class PostTag(Base):
    """Association between a post and a tag.

    The whole set for a post is deleted and re-inserted on every edit.
    """

    __tablename__ = "post_tags"
    __table_args__ = (
        Index("idx_post_tags_post_id", "post_id"),
        Index("idx_post_tags_tag_id", "tag_id"),
    )

    # Composite primary key keeps each (post, tag) pair unique.
    post_id: Mapped[str] = mapped_column(
        String(14),
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )
    # Order in which the author listed the tag.
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    post: Mapped[Post] = relationship(back_populates="tag_links")
    tag: Mapped[Tag] = relationship(back_populates="post_links", lazy="joined")
