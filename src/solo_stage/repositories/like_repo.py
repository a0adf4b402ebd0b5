"""Data access helpers for likes."""
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from solo_stage.models import Like

__all__ = ["LikeRepository"]


class LikeRepository:
    """Single-statement operations on the likes relation."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def has_liked(self, post_id: str, ip_hash: str) -> bool:
        found = self.session.execute(
            select(Like.id).where(Like.post_id == post_id, Like.ip_hash == ip_hash)
        ).scalar_one_or_none()
        return found is not None

    def remove(self, post_id: str, ip_hash: str) -> bool:
        """Delete the (post, token) row; return True if one existed."""
        result = self.session.execute(
            delete(Like).where(Like.post_id == post_id, Like.ip_hash == ip_hash)
        )
        return bool(result.rowcount)

    def add(self, post_id: str, ip_hash: str) -> None:
        """Insert the (post, token) row and flush.

        Raises:
            sqlalchemy.exc.IntegrityError: If the pair is already present.
        """
        self.session.add(Like(post_id=post_id, ip_hash=ip_hash))
        self.session.flush()

    def count(self, post_id: str) -> int:
        return int(
            self.session.execute(
                select(func.count()).select_from(Like).where(Like.post_id == post_id)
            ).scalar_one()
        )
