# src/solo_stage/models/post.py
"""SQLAlchemy model for posts."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from solo_stage.db.session import Base

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .like import Like
    from .tag import PostTag

POST_ID_LENGTH = 14


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


class Post(Base):
    """A single micro-post written by the site owner.

    The identifier is a 14-digit `yyyymmddhhmmss` string assigned once at
    creation; lexicographic order of identifiers equals creation order.
    """

    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
        Index("idx_posts_is_pinned", "is_pinned"),
    )

    id: Mapped[str] = mapped_column(String(POST_ID_LENGTH), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_sensitive: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # At most one row may carry is_pinned = True; see services.pins.
    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    tag_links: Mapped[list[PostTag]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PostTag.position",
    )
    likes: Mapped[list[Like]] = relationship(
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
