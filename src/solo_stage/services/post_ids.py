"""Time-derived post identifiers.

Identifiers are the creation time at one-second resolution rendered as
`yyyymmddhhmmss`, so string order is chronological order and a reader can
decode the timestamp at a glance. Two allocations inside the same second
collide; the allocator detects that with a repository pre-check and, because
the pre-check cannot close the gap before the insert, also retries when the
insert itself reports a duplicate key.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TypeVar
from zoneinfo import ZoneInfo

from solo_stage.core.settings import settings
from solo_stage.repositories.post_repo import PostRepository

logger = logging.getLogger(__name__)

POST_ID_FORMAT = "%Y%m%d%H%M%S"

T = TypeVar("T")


class PostIdCollisionError(RuntimeError):
    """Raised by an insert callback when the identifier was taken concurrently."""


class PostIdExhaustedError(RuntimeError):
    """Raised when no free identifier was found within the attempt budget."""


def format_post_id(moment: datetime) -> str:
    """Render `moment` as a 14-digit post identifier."""
    return moment.strftime(POST_ID_FORMAT)


class PostIdAllocator:
    """Allocate unique 14-digit identifiers for new posts."""

    def __init__(
        self,
        repo: PostRepository,
        *,
        clock: Callable[[], datetime] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        max_attempts: int = 30,
        retry_delay: float = 1.0,
    ) -> None:
        self._repo = repo
        self._clock = clock or (lambda: datetime.now(ZoneInfo(settings.post_id_timezone)))
        self._sleep = sleep
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay

    def candidate(self) -> str:
        return format_post_id(self._clock())

    async def _backoff(self, attempt: int) -> None:
        # Linear backoff; the identifier only changes once the clock ticks.
        await self._sleep(self.retry_delay * attempt)

    async def allocate(self) -> str:
        """Return an identifier no stored post currently uses.

        Raises:
            PostIdExhaustedError: If every attempt collided.
        """
        for attempt in range(1, self.max_attempts + 1):
            post_id = self.candidate()
            if not self._repo.exists(post_id):
                return post_id
            logger.info("Post id %s already taken (attempt %d)", post_id, attempt)
            if attempt < self.max_attempts:
                await self._backoff(attempt)
        raise PostIdExhaustedError(f"No free post id after {self.max_attempts} attempts")

    async def insert_with_unique_id(self, insert: Callable[[str], T]) -> T:
        """Allocate an identifier and run `insert` with it, retrying on collision.

        `insert` must raise `PostIdCollisionError` when the repository rejects
        the identifier as a duplicate; any other exception propagates.
        """
        for attempt in range(1, self.max_attempts + 1):
            post_id = await self.allocate()
            try:
                return insert(post_id)
            except PostIdCollisionError:
                logger.warning("Post id %s collided on insert (attempt %d)", post_id, attempt)
                if attempt < self.max_attempts:
                    await self._backoff(attempt)
        raise PostIdExhaustedError(f"No free post id after {self.max_attempts} attempts")


def build_post_id_allocator(repo: PostRepository) -> PostIdAllocator:
    """Return an allocator configured from settings."""
    return PostIdAllocator(
        repo,
        max_attempts=settings.post_id_max_attempts,
        retry_delay=settings.post_id_retry_delay_seconds,
    )
