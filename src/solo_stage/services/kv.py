"""Key-value store client shared by sessions and rate limiting.

The process keeps one client behind a module-level holder so tests (and
alternate deployments) can swap in another Redis-compatible client without
touching callers that already imported this module.
"""

from __future__ import annotations

import logging
from threading import Lock

import redis

from solo_stage.core.settings import settings

logger = logging.getLogger(__name__)

_CLIENT: redis.Redis | None = None
_CONFIGURED = False
_LOCK = Lock()


def _build_client() -> redis.Redis | None:
    if not settings.kv_configured:
        logger.warning("REDIS_URL is empty; sessions and rate limiting are disabled")
        return None
    # Bounded connect and read times so an unreachable store fails fast.
    return redis.from_url(
        settings.redis_url,
        decode_responses=True,
        socket_connect_timeout=settings.kv_socket_timeout_seconds,
        socket_timeout=settings.kv_socket_timeout_seconds,
    )


def get_kv_client() -> redis.Redis | None:
    """Return the shared client, or None when no store is configured."""
    global _CLIENT, _CONFIGURED
    if not _CONFIGURED:
        with _LOCK:
            if not _CONFIGURED:
                _CLIENT = _build_client()
                _CONFIGURED = True
    return _CLIENT


def use_kv_client(client: redis.Redis | None) -> None:
    """Install `client` as the shared key-value store (None disables it)."""
    global _CLIENT, _CONFIGURED
    with _LOCK:
        _CLIENT = client
        _CONFIGURED = True


def reset_kv_client() -> None:
    """Forget the installed client so the next call rebuilds it from settings."""
    global _CLIENT, _CONFIGURED
    with _LOCK:
        _CLIENT = None
        _CONFIGURED = False
