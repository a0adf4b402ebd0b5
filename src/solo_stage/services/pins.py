"""Single-pinned-post coordination."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from solo_stage.repositories import PostRepository
from solo_stage.services.errors import PostNotFoundError

logger = logging.getLogger(__name__)


class PinCoordinator:
    """Keep at most one post pinned.

    Pinning clears every existing pin before setting the new one, inside one
    transaction. If the store ever applied the statements separately, the
    worst interleaving leaves no post pinned, never two.
    """

    def __init__(self, session: Session) -> None:
        self.session = session
        self.posts = PostRepository(session)

    def apply(self, post_id: str, pinned: bool) -> None:
        """Stage the pin change without committing.

        Raises:
            PostNotFoundError: If the post does not exist.
        """
        if pinned:
            self.posts.clear_all_pins()
        if not self.posts.set_pin_flag(post_id, pinned):
            raise PostNotFoundError(post_id)

    def set_pinned(self, post_id: str, pinned: bool) -> None:
        """Pin or unpin `post_id` and commit.

        Raises:
            PostNotFoundError: If the post does not exist; nothing is changed.
        """
        try:
            self.apply(post_id, pinned)
        except PostNotFoundError:
            self.session.rollback()
            raise
        self.session.commit()
        logger.info("Post %s pinned=%s", post_id, pinned)
