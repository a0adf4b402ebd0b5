"""Like toggling keyed by hashed client identity."""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solo_stage.repositories import LikeRepository, PostRepository
from solo_stage.schemas.like import LikeState
from solo_stage.services.errors import PostNotFoundError

logger = logging.getLogger(__name__)


class LikeToggle:
    """Flip a (post, client token) like and report the resulting state.

    Each step is a single statement so the store serializes conflicting
    writers: the delete either removes the row or finds nothing, and the
    insert either lands or hits the unique (post_id, ip_hash) constraint. A
    constraint hit means a concurrent request already liked the post, which
    is reported as liked rather than as an error.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.posts = PostRepository(session)
        self.likes = LikeRepository(session)

    def _require_post(self, post_id: str) -> None:
        if not self.posts.exists(post_id):
            raise PostNotFoundError(post_id)

    def toggle(self, post_id: str, client_token: str) -> LikeState:
        """Like the post if the caller has not, otherwise remove the like.

        Raises:
            PostNotFoundError: If the post does not exist.
        """
        self._require_post(post_id)

        if self.likes.remove(post_id, client_token):
            self.session.commit()
            liked = False
        else:
            liked = self._insert(post_id, client_token)

        return LikeState(likes=self.likes.count(post_id), liked=liked)

    def _insert(self, post_id: str, client_token: str) -> bool:
        try:
            self.likes.add(post_id, client_token)
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            if not self.likes.has_liked(post_id, client_token):
                # Not a duplicate like; the post vanished or another constraint fired.
                self._require_post(post_id)
                raise
            logger.info("Concurrent like on %s resolved as already liked", post_id)
        return True

    def state(self, post_id: str, client_token: str) -> LikeState:
        """Return the like count and the caller's liked flag without mutating."""
        return LikeState(
            likes=self.likes.count(post_id),
            liked=self.likes.has_liked(post_id, client_token),
        )
