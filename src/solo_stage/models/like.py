# src/solo_stage/models/like.py
"""Model capturing likes on posts."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from solo_stage.db.session import Base

from .post import utc_now

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .post import Post


class Like(Base):
    """A like from one client token on one post.

    The row's existence is the liked state; there is no boolean column.
    """

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("post_id", "ip_hash", name="uq_likes_post_id_ip_hash"),
        Index("idx_likes_post_id", "post_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[str] = mapped_column(
        String(14),
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=False,
    )
    ip_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )

    post: Mapped[Post] = relationship(back_populates="likes")
