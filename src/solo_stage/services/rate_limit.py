"""Fixed-window request limiting keyed by client token."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

import redis

from solo_stage.core.settings import settings
from solo_stage.services.kv import get_kv_client

logger = logging.getLogger(__name__)

_KEY_PREFIX = "ratelimit"


@dataclass(frozen=True)
class RateDecision:
    """Outcome of a single admission check."""

    allowed: bool
    count: int
    retry_after: int


class RateLimiter:
    """Admit up to `max_requests` per client token in each fixed window.

    Windows are aligned to multiples of `window_seconds` since the epoch, so a
    burst straddling a boundary can see up to twice the quota. Counters live
    only in the key-value store; when it is missing or failing the limiter
    admits the request.
    """

    def __init__(
        self,
        client: redis.Redis | None,
        *,
        max_requests: int = 100,
        window_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._client = client
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

    def _window_key(self, client_token: str) -> str:
        window = int(self._clock()) // self.window_seconds
        return f"{_KEY_PREFIX}:{client_token}:{window}"

    def check(self, client_token: str) -> RateDecision:
        """Count this request against the token's window and decide."""
        if self._client is None:
            return RateDecision(allowed=True, count=0, retry_after=0)

        key = self._window_key(client_token)
        try:
            pipe = self._client.pipeline()
            pipe.incr(key)
            pipe.expire(key, self.window_seconds)
            count, _ = pipe.execute()
        except redis.RedisError as exc:
            logger.warning("Rate limiter store unavailable, failing open: %s", exc)
            return RateDecision(allowed=True, count=0, retry_after=0)

        count = int(count)
        if count > self.max_requests:
            logger.info("Rate limit exceeded for client %s (%d requests)", client_token[:12], count)
            return RateDecision(allowed=False, count=count, retry_after=self.window_seconds)
        return RateDecision(allowed=True, count=count, retry_after=0)

    def allow(self, client_token: str) -> bool:
        """Return True if the request may proceed."""
        return self.check(client_token).allowed


def get_rate_limiter() -> RateLimiter:
    """Return a limiter bound to the shared store and configured quota."""
    client = get_kv_client() if settings.rate_limit_enabled else None
    return RateLimiter(
        client,
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
