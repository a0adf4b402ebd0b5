"""Tests for the fixed-window rate limiter."""

import redis

from solo_stage.core.security import hash_client_identity
from solo_stage.services.rate_limit import RateLimiter

WINDOW_START = 1_762_956_000.0  # 489710 * 3600, on an hour boundary


class FakeClock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class BrokenRedis:
    """Client whose every round trip fails."""

    def pipeline(self):
        raise redis.ConnectionError("connection refused")


def test_hundred_requests_allowed_then_limited(kv) -> None:
    limiter = RateLimiter(kv, clock=FakeClock(WINDOW_START + 10))
    token = hash_client_identity("1.2.3.4")

    decisions = [limiter.check(token) for _ in range(100)]
    assert all(decision.allowed for decision in decisions)
    assert decisions[-1].count == 100

    denied = limiter.check(token)
    assert denied.allowed is False
    assert denied.count == 101
    assert denied.retry_after == 3600


def test_counter_expires_with_window(kv) -> None:
    limiter = RateLimiter(kv, clock=FakeClock(WINDOW_START))
    token = hash_client_identity("1.2.3.4")

    limiter.check(token)

    keys = kv.keys("ratelimit:*")
    assert len(keys) == 1
    assert 0 < kv.ttl(keys[0]) <= 3600


def test_next_window_starts_fresh(kv) -> None:
    assert WINDOW_START % 3600 == 0
    clock = FakeClock(WINDOW_START + 3599)
    limiter = RateLimiter(kv, max_requests=2, window_seconds=3600, clock=clock)
    token = hash_client_identity("1.2.3.4")

    assert limiter.allow(token)
    assert limiter.allow(token)
    assert not limiter.allow(token)

    clock.now = WINDOW_START + 3600

    assert limiter.allow(token)


def test_tokens_are_counted_separately(kv) -> None:
    limiter = RateLimiter(kv, max_requests=1, clock=FakeClock(WINDOW_START))

    assert limiter.allow(hash_client_identity("1.2.3.4"))
    assert limiter.allow(hash_client_identity("5.6.7.8"))
    assert not limiter.allow(hash_client_identity("1.2.3.4"))


def test_missing_store_fails_open() -> None:
    limiter = RateLimiter(None, max_requests=1)
    token = hash_client_identity("1.2.3.4")

    assert all(limiter.allow(token) for _ in range(5))


def test_store_errors_fail_open() -> None:
    limiter = RateLimiter(BrokenRedis(), max_requests=1)  # type: ignore[arg-type]

    decision = limiter.check(hash_client_identity("1.2.3.4"))

    assert decision.allowed is True
    assert decision.retry_after == 0
